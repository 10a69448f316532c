from __future__ import annotations

from typing import Any, Iterable, Iterator, Sequence


def projects_with_level(projects: Iterable[Any]) -> Iterator[tuple[Any, int]]:
    """Yield ``(project, level)`` for each project, in the given order.

    A project's level is one more than the level of the nearest preceding
    project it descends from, or 0 when no preceding project is an ancestor.
    Levels therefore describe nesting relative to the supplied ordering; the
    same projects in another order can get different levels.

    Only ``is_descendant_of`` is consulted. Its answers are trusted as-is and
    any exception it raises propagates to the caller.
    """
    seen: list[tuple[Any, int]] = []
    for project in projects:
        level = 0
        for candidate, candidate_level in reversed(seen):
            if project.is_descendant_of(candidate):
                level = candidate_level + 1
                break
        seen.append((project, level))
        yield project, level


def _tree_sort_key(project: Any) -> tuple:
    chain = list(project.ancestors()) + [project]
    return tuple(
        ((node.name or "").lower(), node.id if node.id is not None else 0)
        for node in chain
    )


def tree_order(projects: Iterable[Any]) -> list[Any]:
    """Depth-first order: parents before children, siblings by name then id."""
    return sorted(projects, key=_tree_sort_key)


def project_level_list(projects: Iterable[Any]) -> list[dict[str, Any]]:
    return [
        {"project": project, "level": level}
        for project, level in projects_with_level(tree_order(projects))
    ]


def _serialize_level_item(item: dict[str, Any]) -> dict[str, Any]:
    project = item["project"]
    children = getattr(project, "children", None) or []
    return {
        "id": getattr(project, "id", None),
        "name": project.name,
        "identifier": getattr(project, "identifier", None),
        "has_children": bool(children),
        "level": int(item["level"]),
    }


def projects_level_list_json(items: Sequence[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    return {"projects": [_serialize_level_item(item) for item in items]}


def format_project_tree(items: Sequence[dict[str, Any]], indent: str = "  ") -> str:
    lines = [f"{indent * int(item['level'])}{item['project'].name}" for item in items]
    return "\n".join(lines)
