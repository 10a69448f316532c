from __future__ import annotations

import argparse
import json
import logging
from typing import Iterable, List, Set

from ..core.project_hierarchy import format_project_tree, project_level_list, projects_level_list_json

logger = logging.getLogger(__name__)


def _parse_project_ids(values: Iterable[str]) -> List[int]:
    project_ids: Set[int] = set()
    for value in values:
        for token in str(value).split(","):
            token = token.strip()
            if not token:
                continue
            project_ids.add(int(token))
    return sorted(project_ids)


def _load_projects(db, project_ids: List[int]):
    from .. import models

    query = db.query(models.Project).order_by(models.Project.id.asc())
    if project_ids:
        query = query.filter(models.Project.id.in_(project_ids))
    return query.all()


def render(projects, as_json: bool) -> str:
    items = project_level_list(projects)
    if as_json:
        return json.dumps(projects_level_list_json(items), ensure_ascii=False, indent=2)
    return format_project_tree(items)


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print projects with their hierarchy levels.")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the level list document instead of an indented tree.",
    )
    parser.add_argument(
        "--project-id",
        action="append",
        default=[],
        help="Restrict to these project ids (repeatable or comma-separated).",
    )
    args = parser.parse_args(argv)

    from ..database import SessionLocal, ensure_runtime_schema

    ensure_runtime_schema()
    db = SessionLocal()
    try:
        projects = _load_projects(db, _parse_project_ids(args.project_id))
        if not projects:
            print("No projects matched the filter.")
            return 0
        print(render(projects, as_json=args.json))
        return 0
    except Exception as exc:  # noqa: BLE001
        logger.error("project_tree failed: %s: %s", type(exc).__name__, exc)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
