from __future__ import annotations

import logging
import os
from typing import Any, ClassVar

from sqlalchemy.orm import Session

from ... import models
from ..access import RequestContext

logger = logging.getLogger(__name__)

ME_LABEL = os.getenv("COST_FILTER_ME_LABEL", "<< me >>")


def _parse_excluded_user_names() -> tuple[str, ...]:
    raw = os.getenv("COST_FILTER_EXCLUDED_USER_NAMES", "Redmine Admin,Anonymous")
    return tuple(token.strip() for token in raw.split(",") if token and token.strip())


EXCLUDED_USER_NAMES = _parse_excluded_user_names()


class UnknownFilterError(LookupError):
    pass


class CostQueryFilter:
    """A cost report filter: a key, a label and the values a user may pick."""

    key: ClassVar[str] = ""
    label: ClassVar[str] = ""

    @classmethod
    def available_values(cls, db: Session, context: RequestContext) -> list[tuple[str, Any]]:
        raise NotImplementedError


class UserIdFilter(CostQueryFilter):
    key = "user_id"
    label = "User"

    @staticmethod
    def _is_selectable(user: models.User) -> bool:
        if (user.user_type or models.USER_TYPE_USER) != models.USER_TYPE_USER:
            return False
        name = user.name
        return not any(excluded in name for excluded in EXCLUDED_USER_NAMES)

    @classmethod
    def _project_users(cls, db: Session, user_id: int) -> list[models.User]:
        project_ids = [
            row[0]
            for row in db.query(models.Member.project_id).filter(models.Member.user_id == int(user_id)).all()
        ]
        if not project_ids:
            return []
        return (
            db.query(models.User)
            .join(models.Member, models.Member.user_id == models.User.id)
            .filter(models.Member.project_id.in_(project_ids))
            .distinct()
            .all()
        )

    @classmethod
    def available_values(cls, db: Session, context: RequestContext) -> list[tuple[str, Any]]:
        user_id = getattr(context.user, "id", None)
        users = cls._project_users(db, user_id) if user_id is not None else []
        values: list[tuple[str, Any]] = sorted(
            (user.name, int(user.id))
            for user in users
            if cls._is_selectable(user)
        )
        logger.debug("user_id filter: %d selectable users for user %s", len(values), user_id)

        if context.logged_in:
            values.insert(0, (ME_LABEL, str(user_id)))
        return values


_FILTERS: dict[str, type[CostQueryFilter]] = {
    UserIdFilter.key: UserIdFilter,
}


def available_filters() -> list[type[CostQueryFilter]]:
    return list(_FILTERS.values())


def get_filter(key: str) -> type[CostQueryFilter]:
    normalized = (key or "").strip().lower()
    try:
        return _FILTERS[normalized]
    except KeyError:
        raise UnknownFilterError(f"Unknown cost query filter: {key!r}") from None
