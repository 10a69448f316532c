from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..core.access import RequestContext, is_admin_user, is_project_visible_to_user
from ..core.project_hierarchy import project_level_list, projects_level_list_json
from ..core.text_format import short_project_description
from ..core.version_format import version_options_for_select
from ..database import get_db
from .auth import get_optional_user

router = APIRouter(prefix="/projects", tags=["projects"])


def _visible_projects(db: Session, user: Optional[models.User]) -> list[models.Project]:
    projects = (
        db.query(models.Project)
        .options(selectinload(models.Project.members), selectinload(models.Project.children))
        .order_by(models.Project.id.asc())
        .all()
    )
    if is_admin_user(user):
        return projects
    return [project for project in projects if is_project_visible_to_user(project, user)]


def _get_visible_project_or_404(project_id: int, db: Session, user: Optional[models.User]) -> models.Project:
    project = db.query(models.Project).filter(models.Project.id == int(project_id)).first()
    if project is None or not is_project_visible_to_user(project, user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    return project


def serialize_project(project: models.Project) -> dict[str, Any]:
    return {
        "id": int(project.id),
        "name": project.name,
        "identifier": project.identifier,
        "parent_project_id": int(project.parent_project_id) if project.parent_project_id is not None else None,
        "is_public": bool(project.is_public),
        "short_description": short_project_description(project),
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


@router.get("/level_list")
def level_list(
    db: Session = Depends(get_db),
    user: Optional[models.User] = Depends(get_optional_user),
):
    return projects_level_list_json(project_level_list(_visible_projects(db, user)))


@router.get("/{project_id}")
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: Optional[models.User] = Depends(get_optional_user),
):
    return serialize_project(_get_visible_project_or_404(project_id, db, user))


@router.get("/{project_id}/versions/options")
def version_options(
    project_id: int,
    selected_version_id: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    user: Optional[models.User] = Depends(get_optional_user),
):
    project = _get_visible_project_or_404(project_id, db, user)
    context = RequestContext(user=user, project=project)

    selected = None
    if selected_version_id is not None:
        selected = db.query(models.Version).filter(models.Version.id == int(selected_version_id)).first()
        if selected is None or not is_project_visible_to_user(selected.project, context.user):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found.")

    versions = (
        db.query(models.Version)
        .filter(models.Version.project_id == int(project.id))
        .order_by(models.Version.name.asc(), models.Version.id.asc())
        .all()
    )
    return {"html": version_options_for_select(versions, selected)}
