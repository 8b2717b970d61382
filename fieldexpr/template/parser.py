"""
Template parsing.

Splits a template string into literal text and ${!...} expression segments.

Syntax:
    ${!expr}     expression; the closing brace is found by counting brace
                 depth, so the expression may contain balanced { and }
    ${{!text}}   escaped form; ends at the first }} (no nesting) and yields
                 the literal text ${!text}

A lone ${ that is not followed by ! is plain text.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..errors import ParseError


EXPRESSION_START = "${!"
ESCAPED_START = "${{!"
ESCAPED_END = "}}"


@dataclass(frozen=True)
class Literal:
    """Literal text copied to the output as-is."""
    text: str


@dataclass(frozen=True)
class ExpressionSource:
    """Source of one ${!...} expression and its offset in the template."""
    source: str
    position: int


Segment = Union[Literal, ExpressionSource]


def _find_marker(template: str, start: int) -> Tuple[int, Optional[str]]:
    """Return the offset and kind of the next start marker at or after start."""
    regular = template.find(EXPRESSION_START, start)
    escaped = template.find(ESCAPED_START, start)

    if escaped != -1 and (regular == -1 or escaped < regular):
        return escaped, ESCAPED_START
    if regular != -1:
        return regular, EXPRESSION_START
    return -1, None


def _find_closing_brace(template: str, start: int) -> int:
    """Offset of the } closing an expression whose body begins at start, or -1."""
    depth = 1
    for i in range(start, len(template)):
        char = template[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def parse_segments(template: str) -> List[Segment]:
    """
    Parse a template into ordered segments.

    Adjacent literal pieces (plain text and escaped expressions) are merged
    into a single Literal.

    Args:
        template: Raw template string

    Returns:
        List of Literal and ExpressionSource segments

    Raises:
        ParseError: If an expression or escaped expression is never closed
    """
    segments: List[Segment] = []
    literal_parts: List[str] = []

    def flush_literal() -> None:
        if literal_parts:
            segments.append(Literal("".join(literal_parts)))
            literal_parts.clear()

    pos = 0
    while pos < len(template):
        start, marker = _find_marker(template, pos)
        if marker is None:
            literal_parts.append(template[pos:])
            break

        if start > pos:
            literal_parts.append(template[pos:start])

        body_start = start + len(marker)

        if marker == ESCAPED_START:
            end = template.find(ESCAPED_END, body_start)
            if end == -1:
                raise ParseError(f"unclosed escaped expression starting at position {start}", start)
            literal_parts.append(EXPRESSION_START + template[body_start:end] + "}")
            pos = end + len(ESCAPED_END)
            continue

        end = _find_closing_brace(template, body_start)
        if end == -1:
            raise ParseError(f"unclosed expression starting at position {start}", start)

        flush_literal()
        segments.append(ExpressionSource(template[body_start:end], start))
        pos = end + 1

    flush_literal()
    return segments


def render_segments(segments: List[Segment]) -> str:
    """Serialize segments back into template syntax."""
    parts = []
    for segment in segments:
        if isinstance(segment, ExpressionSource):
            parts.append(f"{EXPRESSION_START}{segment.source}}}")
        else:
            parts.append(segment.text)
    return "".join(parts)
