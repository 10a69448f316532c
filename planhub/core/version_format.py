from __future__ import annotations

import html
from typing import Any, Iterable, Optional

from .. import models
from .access import RequestContext, version_visible_to

VERSION_PATH_TEMPLATE = "/versions/{version_id}"


def _same_project(left: Optional[Any], right: Optional[Any]) -> bool:
    if left is None or right is None:
        return False
    if left is right:
        return True
    left_id = getattr(left, "id", None)
    return left_id is not None and left_id == getattr(right, "id", None)


def format_version_name(version: Any, project: Optional[Any] = None) -> str:
    """Version name, prefixed with its project unless ``project`` already scopes it."""
    if _same_project(version.project, project):
        return str(version.name)
    return f"{version.project.name} - {version.name}"


def version_path(version: Any) -> str:
    return VERSION_PATH_TEMPLATE.format(version_id=int(version.id))


def _render_attributes(attributes: dict[str, Any]) -> str:
    return "".join(
        f' {html.escape(str(name))}="{html.escape(str(value))}"'
        for name, value in sorted(attributes.items())
        if value is not None
    )


def link_to_version(
    version: Any,
    context: RequestContext,
    before_text: str = "",
    html_options: Optional[dict[str, Any]] = None,
) -> str:
    if not isinstance(version, models.Version):
        return ""

    label = html.escape(f"{before_text}{format_version_name(version, context.project)}", quote=False)
    if not version_visible_to(version, context.user):
        return label

    attributes = {"href": version_path(version)}
    attributes.update(html_options or {})
    href = attributes.pop("href")
    return f'<a href="{html.escape(href)}"{_render_attributes(attributes)}>{label}</a>'


def _option_tag(version: Any, selected_id: Optional[int]) -> str:
    selected = ' selected="selected"' if selected_id is not None and version.id == selected_id else ""
    name = html.escape(str(version.name), quote=False)
    return f'<option{selected} value="{html.escape(str(version.id))}">{name}</option>'


def version_options_for_select(versions: Iterable[Any], selected: Optional[Any] = None) -> str:
    candidates = list(versions)
    if selected is not None:
        candidates.append(selected)

    grouped: dict[str, list[Any]] = {}
    seen_keys: set = set()
    for version in candidates:
        key = version.id if version.id is not None else id(version)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        grouped.setdefault(version.project.name, []).append(version)

    selected_id = selected.id if selected is not None else None
    if len(grouped) > 1:
        groups = []
        for project_name, group in grouped.items():
            options = "\n".join(_option_tag(version, selected_id) for version in group)
            groups.append(f'<optgroup label="{html.escape(project_name)}">{options}</optgroup>')
        return "".join(groups)

    options = next(iter(grouped.values()), [])
    return "\n".join(_option_tag(version, selected_id) for version in options)
