from __future__ import annotations

import os
from typing import Any

PROJECT_DESCRIPTION_LENGTH = max(1, int(os.getenv("PROJECT_DESCRIPTION_LENGTH", "255")))
ELLIPSIS = "..."


def truncate_at_line_end(value: str, length: int) -> str:
    """Cut ``value`` after ``length`` characters, finishing the line in progress.

    Text that fits in ``length`` characters comes back unchanged. Otherwise the
    kept prefix runs to the end of the line containing the cut and everything
    after it is replaced by an ellipsis.
    """
    text = value or ""
    length = max(0, int(length))
    if len(text) <= length:
        return text

    line_end = length
    while line_end < len(text) and text[line_end] not in "\r\n":
        line_end += 1
    return text[:line_end] + ELLIPSIS


def short_project_description(project: Any, length: int = PROJECT_DESCRIPTION_LENGTH) -> str:
    description = getattr(project, "description", None) or ""
    if not description.strip():
        return ""
    return truncate_at_line_end(description, length).strip()
