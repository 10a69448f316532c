from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models
from ..core.access import RequestContext, version_visible_to
from ..core.version_format import format_version_name, link_to_version
from ..database import get_db
from .auth import get_request_context

router = APIRouter(prefix="/versions", tags=["versions"])


@router.get("/{version_id}")
def get_version(
    version_id: int,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context),
):
    version = db.query(models.Version).filter(models.Version.id == int(version_id)).first()
    if version is None or not version_visible_to(version, context.user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found.")

    return {
        "id": int(version.id),
        "project_id": int(version.project_id),
        "name": version.name,
        "status": version.status,
        "sharing": version.sharing,
        "effective_date": version.effective_date,
        "display_name": format_version_name(version, context.project),
        "link_html": link_to_version(version, context),
    }
