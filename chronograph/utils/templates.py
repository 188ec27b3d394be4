"""
Message template rendering for the bundled sinks.

Templates use the structured logging placeholder syntax::

    "Finished loading {Count} rows from {Table}. [{operationDuration}]"

Placeholders receive positional values in order of first appearance, numeric
placeholders (``{0}``) index the values directly, ``{{`` and ``}}`` render as
literal braces. Brace spans that are not valid placeholders (for example the
text of a stringified dict) are rendered as-is.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

_PLACEHOLDER = re.compile(
    r"(?P<hint>[@$]?)(?P<name>[0-9A-Za-z_]+)"
    r"(?:,(?P<alignment>-?\d+))?"
    r"(?::(?P<format>[^{}]*))?"
)

_MISSING = object()


def _render_value(value: Any, hint: str, format_spec: Optional[str]) -> str:
    if hint == "@":
        return repr(value)
    if format_spec:
        try:
            return format(value, format_spec)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def _align(text: str, alignment: Optional[str]) -> str:
    if not alignment:
        return text
    width = int(alignment)
    if width < 0:
        return text.ljust(-width)
    return text.rjust(width)


def render_template(
    template: str,
    values: Sequence[Any] = (),
) -> Tuple[str, Dict[str, Any]]:
    """
    Render ``template`` with positional ``values``.

    Returns the rendered message and the captured properties: one entry per
    bound placeholder name, plus ``__<index>`` entries for values no
    placeholder consumed.
    """
    parts: List[str] = []
    properties: Dict[str, Any] = {}
    consumed = set()
    next_index = 0
    length = len(template)
    i = 0

    while i < length:
        char = template[i]

        if char == "{" and template.startswith("{{", i):
            parts.append("{")
            i += 2
            continue
        if char == "}" and template.startswith("}}", i):
            parts.append("}")
            i += 2
            continue
        if char != "{":
            parts.append(char)
            i += 1
            continue

        close = template.find("}", i + 1)
        if close == -1:
            parts.append(template[i:])
            break

        inner = template[i + 1:close]
        if "{" in inner:
            parts.append(char)
            i += 1
            continue

        match = _PLACEHOLDER.fullmatch(inner)
        if match is None:
            parts.append(template[i:close + 1])
            i = close + 1
            continue

        name = match.group("name")
        value = _MISSING
        if name.isdigit():
            index = int(name)
            if index < len(values):
                value = values[index]
                consumed.add(index)
        elif name in properties:
            value = properties[name]
        elif next_index < len(values):
            # skip values already claimed by numeric placeholders
            while next_index in consumed and next_index < len(values):
                next_index += 1
            if next_index < len(values):
                value = values[next_index]
                consumed.add(next_index)
                next_index += 1

        if value is _MISSING:
            parts.append(template[i:close + 1])
        else:
            properties[name] = value
            rendered = _render_value(value, match.group("hint"), match.group("format"))
            parts.append(_align(rendered, match.group("alignment")))
        i = close + 1

    for index, value in enumerate(values):
        if index not in consumed:
            properties[f"__{index}"] = value

    return "".join(parts), properties
