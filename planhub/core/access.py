from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional


def _parse_admin_identifiers() -> set[str]:
    raw = os.getenv("ADMIN_IDENTIFIERS", "admin")
    return {
        token.strip().lower()
        for token in raw.split(",")
        if token and token.strip()
    }


_ADMIN_IDENTIFIERS = _parse_admin_identifiers()


@dataclass(frozen=True)
class RequestContext:
    """Who is asking, and which project the page is scoped to."""

    user: Optional[Any] = None
    project: Optional[Any] = None

    @property
    def logged_in(self) -> bool:
        return is_logged_in(self.user)


ANONYMOUS_CONTEXT = RequestContext()


def is_logged_in(user: Optional[object]) -> bool:
    if user is None:
        return False
    if getattr(user, "is_anonymous", False):
        return False
    return getattr(user, "id", None) is not None


def is_admin_user(user: Optional[object]) -> bool:
    if not is_logged_in(user):
        return False
    if bool(getattr(user, "is_admin", False)):
        return True

    login = (getattr(user, "login", "") or "").strip().lower()
    email = (getattr(user, "email", "") or "").strip().lower()
    return bool(login and login in _ADMIN_IDENTIFIERS) or bool(email and email in _ADMIN_IDENTIFIERS)


def is_project_member(user: Optional[object], project: Optional[object]) -> bool:
    if not is_logged_in(user) or project is None:
        return False
    user_id = getattr(user, "id", None)
    for member in getattr(project, "members", None) or []:
        if getattr(member, "user_id", None) == user_id:
            return True
    return False


def is_project_visible_to_user(project: Optional[object], user: Optional[object]) -> bool:
    if project is None:
        return False
    if is_admin_user(user) or is_project_member(user, project):
        return True
    return is_logged_in(user) and bool(getattr(project, "is_public", False))


def version_visible_to(version: Optional[object], user: Optional[object]) -> bool:
    if version is None:
        return False
    return is_project_visible_to_user(getattr(version, "project", None), user)
