"""
String helpers applied to action descriptions before they become part of a
message template.
"""

from __future__ import annotations

from typing import Optional


def lowercase_first_char(text: Optional[str]) -> str:
    """
    Lower-case the first character of ``text`` if it is upper case, so the
    description reads naturally after "Started " / "Finished ".
    """
    if not text:
        return ""
    if not text[0].isupper():
        return text
    return text[0].lower() + text[1:]


def _double_braces(fragment: str) -> str:
    return fragment.replace("{", "{{").replace("}", "}}")


def escape_curly_braces(target: str) -> str:
    """
    Escape literal curly braces so a structured logging template parser does
    not read them as placeholders.

    Braces appear in descriptions built by interpolating dicts, dataclasses
    and other objects whose ``str()`` contains braces. A brace span is
    escaped when it contains a space; a span without spaces is a
    ``{Placeholder}`` and is kept. An unbalanced span is escaped up to the end
    of the string.

    The transform is single-pass: escaping already escaped text doubles the
    braces again.
    """
    if "{" not in target:
        return target

    escaped = []
    length = len(target)
    i = 0

    while i < length:
        char = target[i]

        if char != "{":
            # closing braces outside a span are kept as-is
            escaped.append(char)
            i += 1
            continue

        depth = 1
        j = i + 1
        while depth > 0 and j < length:
            if target[j] == "{":
                depth += 1
            elif target[j] == "}":
                depth -= 1
            j += 1

        span = target[i:j]
        if depth > 0 or " " in span:
            escaped.append(_double_braces(span))
        else:
            escaped.append(span)
        i = j

    return "".join(escaped)
