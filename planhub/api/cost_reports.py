from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.access import RequestContext
from ..core.cost_query.filters import UnknownFilterError, available_filters, get_filter
from ..database import get_db
from .auth import get_request_context

router = APIRouter(prefix="/cost_reports", tags=["cost-reports"])


@router.get("/filters")
def list_filters():
    return [{"key": item.key, "label": item.label} for item in available_filters()]


@router.get("/filters/{key}/values")
def filter_values(
    key: str,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context),
):
    try:
        filter_cls = get_filter(key)
    except UnknownFilterError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    values = filter_cls.available_values(db, context)
    return {
        "key": filter_cls.key,
        "label": filter_cls.label,
        "values": [[label, value] for label, value in values],
    }
