"""Shared response builders for logtap command modules.

PUBLIC API:
  - truncate_string: Truncate strings with ellipsis
  - build_table_response: Build consistent table responses in markdown
  - build_info_response: Build info display responses in markdown
  - build_code_response: Build a titled code block response
"""

import json
from typing import Any

from replkit2.textkit import markdown


def truncate_string(text: str, max_length: int) -> str:
    """Truncate string with ellipsis for table display.

    Newlines and tabs become spaces first.
    """
    if not text:
        return "-"

    text = text.replace("\n", " ").replace("\t", " ")
    if len(text) <= max_length:
        return text
    if max_length < 5:
        return text[:max_length]
    return f"{text[: max_length - 3]}..."


def build_table_response(
    title: str, headers: list[str], rows: list[dict], summary: str | None = None, warnings: list[str] | None = None
) -> dict:
    """Build consistent table response in markdown format.

    Args:
        title: Table title.
        headers: Column headers.
        rows: Data rows as dicts.
        summary: Optional summary text.
        warnings: Optional warning messages.

    Returns:
        Markdown dict with formatted table.
    """
    builder = markdown().heading(title, level=2)

    if warnings:
        for warning in warnings:
            builder.element("alert", message=warning, level="warning")

    if rows:
        builder.element("table", headers=headers, rows=rows)
    else:
        builder.text("_No data available_")

    if summary:
        builder.text(f"_{summary}_")

    return builder.build()


def build_info_response(title: str, fields: dict, extra: str | None = None) -> dict:
    """Build info display response in markdown format.

    Args:
        title: Info display title.
        fields: Dict of field names to values. None values are skipped.
        extra: Optional raw markdown appended at the end.

    Returns:
        Markdown dict with formatted info display.
    """
    builder = markdown().heading(title, level=2)

    for key, value in fields.items():
        if value is not None:
            builder.text(f"**{key}:** {value}")

    if extra:
        builder.raw(extra)

    return builder.build()


def build_code_response(title: str, value: Any, language: str = "json") -> dict:
    """Titled fenced code block; non-string values are pretty-printed as JSON."""
    body = value if isinstance(value, str) else json.dumps(value, indent=2, default=str)
    builder = markdown().heading(title, level=2)
    builder.raw(f"```{language}\n{body}\n```")
    return builder.build()
