"""
Parser for handler notes (the puzzle's text input).

Blocks are separated by a blank line; each block has exactly six lines:

    Monkey 0:
      Starting items: 79, 98
      Operation: new = old * 19
      Test: divisible by 23
        If true: throw to monkey 2
        If false: throw to monkey 3

Route targets are only parsed here; range checks belong to registry creation.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence, Tuple

from ..core.rounds.types import HandlerSpec, Transform


class NotesParseError(ValueError):
    def __init__(self, message: str, *, block: int, line: str | None = None) -> None:
        self.block = block
        self.line = line
        where = f"block {block}"
        if line is not None:
            where += f" line {line!r}"
        super().__init__(f"{where}: {message}")


_HEADER_RE = re.compile(r"^Monkey ([0-9]+):$")
_ITEMS_PREFIX = "Starting items:"
_ITEM_RE = re.compile(r"[0-9]+")
_OP_RE = re.compile(r"^Operation: new = old ([*+]) (old|[0-9]+)$")
_TEST_RE = re.compile(r"^Test: divisible by ([0-9]+)$")
_TRUE_RE = re.compile(r"^If true: throw to monkey ([0-9]+)$")
_FALSE_RE = re.compile(r"^If false: throw to monkey ([0-9]+)$")


def _match(pattern: re.Pattern[str], line: str, *, block: int, what: str) -> re.Match[str]:
    m = pattern.match(line)
    if m is None:
        raise NotesParseError(f"invalid {what} line", block=block, line=line)
    return m


def _parse_items(line: str, *, block: int) -> Tuple[int, ...]:
    if not line.startswith(_ITEMS_PREFIX):
        raise NotesParseError("invalid items line", block=block, line=line)
    rest = line[len(_ITEMS_PREFIX):].strip()
    if not rest:
        return ()
    items: List[int] = []
    for part in rest.split(","):
        part = part.strip()
        if _ITEM_RE.fullmatch(part) is None:
            raise NotesParseError(f"item {part!r} is not a non-negative integer", block=block, line=line)
        items.append(int(part))
    return tuple(items)


def _parse_operation(line: str, *, block: int) -> Transform:
    m = _match(_OP_RE, line, block=block, what="operation")
    op, arg = m.group(1), m.group(2)
    if arg == "old":
        if op == "*":
            return Transform.square()
        # `old + old` has no transform variant.
        raise NotesParseError("unsupported operation", block=block, line=line)
    if op == "*":
        return Transform.multiply(int(arg))
    return Transform.add(int(arg))


def _parse_block(text: str, *, block: int) -> HandlerSpec:
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if len(lines) != 6:
        raise NotesParseError(f"expected 6 lines, got {len(lines)}", block=block)
    header, items_line, op_line, test_line, true_line, false_line = lines

    ordinal = int(_match(_HEADER_RE, header, block=block, what="header").group(1))
    if ordinal != block:
        raise NotesParseError(f"handler ordinal {ordinal} does not match position", block=block, line=header)

    return HandlerSpec(
        transform=_parse_operation(op_line, block=block),
        divisor=int(_match(_TEST_RE, test_line, block=block, what="test").group(1)),
        route_true=int(_match(_TRUE_RE, true_line, block=block, what="true-target").group(1)),
        route_false=int(_match(_FALSE_RE, false_line, block=block, what="false-target").group(1)),
        initial_queue=_parse_items(items_line, block=block),
    )


def parse_notes(text: str) -> List[HandlerSpec]:
    """Parse notes text into handler specs, in file order."""
    normalized = text.replace("\r\n", "\n").strip()
    if not normalized:
        return []
    blocks = re.split(r"\n[ \t]*\n", normalized)
    return [_parse_block(b, block=i) for i, b in enumerate(blocks)]


def load_notes(path: Path) -> List[HandlerSpec]:
    return parse_notes(Path(path).read_text(encoding="utf-8"))


def render_notes(specs: Sequence[HandlerSpec]) -> str:
    """Inverse of `parse_notes` (canonical spacing)."""
    blocks: List[str] = []
    for i, s in enumerate(specs):
        op = s.transform.render()
        blocks.append(
            "\n".join(
                [
                    f"Monkey {i}:",
                    f"  Starting items: {', '.join(str(v) for v in s.initial_queue)}".rstrip(),
                    f"  Operation: new = {op}",
                    f"  Test: divisible by {s.divisor}",
                    f"    If true: throw to monkey {s.route_true}",
                    f"    If false: throw to monkey {s.route_false}",
                ]
            )
        )
    return "\n\n".join(blocks) + "\n"
