"""
GNU ld linker script MEMORY block parser.

Only the ``MEMORY { ... }`` block is read. Each entry has the form:

    NAME (ATTRS) : ORIGIN = <literal>, LENGTH = <literal>

The ld abbreviations ``org``/``o`` and ``len``/``l`` are accepted and the
attribute group is optional. ORIGIN and LENGTH must be plain hexadecimal
(``0x08000000``) or decimal literals. Unit suffixes (``512K``) and
expressions (``ORIGIN(RAM) + 4``) are rejected instead of evaluated, so a
report never shows a guessed region size.

One entry per line is expected.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from pretty_size.errors import DuplicateRegion, ParseError, UnsupportedExpression
from pretty_size.memory.index import AddressIndex
from pretty_size.memory.models import U64_LIMIT, Attributes, Region

LOG = logging.getLogger("parsers.linker_script")

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"//[^\n]*")
_MEMORY_KEYWORD = re.compile(r"\bMEMORY\b")
_MEMORY_OPEN = re.compile(r"\bMEMORY\s*\{")

_ENTRY_HEAD = re.compile(
    r"^(?P<name>[A-Za-z_.$][\w.$-]*)\s*(?:\((?P<attrs>[^()]*)\))?\s*(?P<rest>.*)$"
)
_ORIGIN_KEY = re.compile(r"^(?:ORIGIN|org|o)\s*=\s*", re.IGNORECASE)
_LENGTH_KEY = re.compile(r",\s*(?:LENGTH|len|l)\s*=\s*", re.IGNORECASE)
_HEX_LITERAL = re.compile(r"^0[xX][0-9A-Fa-f]+$")
_DEC_LITERAL = re.compile(r"^[0-9]+$")


def _strip_comments(text: str) -> str:
    """Remove C and C++ comments, keeping newlines so line numbers hold."""

    def _keep_newlines(match: re.Match) -> str:
        return "\n" * match.group(0).count("\n")

    text = _BLOCK_COMMENT.sub(_keep_newlines, text)
    return _LINE_COMMENT.sub("", text)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _memory_block_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, line)`` for every line inside MEMORY { }."""
    opening = _MEMORY_OPEN.search(text)
    if opening is None:
        keyword = _MEMORY_KEYWORD.search(text)
        if keyword is not None:
            raise ParseError(_line_of(text, keyword.start()), "expected '{' after MEMORY")
        raise ParseError(None, "no MEMORY block found")

    closing = text.find("}", opening.end())
    if closing < 0:
        raise ParseError(_line_of(text, opening.start()), "unterminated MEMORY block")

    first_line = _line_of(text, opening.end())
    body = text[opening.end():closing]
    for offset, line in enumerate(body.split("\n")):
        yield first_line + offset, line


def parse_literal(region: str, text: str, line_number: Optional[int] = None) -> int:
    """
    Parse an ORIGIN or LENGTH value.

    Raises:
        UnsupportedExpression: If the value is anything but a plain literal
        ParseError: If the literal does not fit in 64 bits
    """
    if _HEX_LITERAL.match(text):
        value = int(text, 16)
    elif _DEC_LITERAL.match(text):
        value = int(text, 10)
    else:
        raise UnsupportedExpression(region, text, line_number)

    if value >= U64_LIMIT:
        raise ParseError(line_number, f"value {text} of region {region} does not fit in 64 bits")
    return value


def _parse_entry(line_number: int, line: str) -> Region:
    head = _ENTRY_HEAD.match(line)
    if head is None:
        raise ParseError(line_number, "expected a region name")

    name = head.group("name")
    rest = head.group("rest")
    if not rest.startswith(":"):
        raise ParseError(line_number, f"expected ':' after region name {name}")

    body = rest[1:].strip()
    origin_key = _ORIGIN_KEY.match(body)
    if origin_key is None:
        raise ParseError(line_number, f"missing ORIGIN in region {name}")

    after_origin = body[origin_key.end():]
    length_key = _LENGTH_KEY.search(after_origin)
    if length_key is None:
        raise ParseError(line_number, f"missing LENGTH in region {name}")

    origin_text = after_origin[:length_key.start()].strip()
    length_text = after_origin[length_key.end():].strip().rstrip(",;").strip()
    if not origin_text:
        raise ParseError(line_number, f"missing ORIGIN value in region {name}")
    if not length_text:
        raise ParseError(line_number, f"missing LENGTH value in region {name}")

    origin = parse_literal(name, origin_text, line_number)
    length = parse_literal(name, length_text, line_number)

    try:
        attributes = Attributes.from_string(head.group("attrs") or "")
        return Region(name=name, origin=origin, length=length, attributes=attributes)
    except ValueError as exc:
        raise ParseError(line_number, str(exc)) from exc


def parse_linker_script(text: str) -> List[Region]:
    """
    Parse the MEMORY block of a linker script.

    Args:
        text: Linker script source

    Returns:
        Regions in declaration order

    Raises:
        ParseError: On a malformed entry or a missing/unterminated block
        UnsupportedExpression: On ORIGIN/LENGTH values that are not literals
        DuplicateRegion: If a region name is declared twice
        OverlappingRegions: If two regions share addresses
    """
    regions: List[Region] = []
    seen: set[str] = set()

    for line_number, raw_line in _memory_block_lines(_strip_comments(text)):
        line = raw_line.strip()
        if not line:
            continue

        region = _parse_entry(line_number, line)
        if region.name in seen:
            raise DuplicateRegion(region.name, line_number)
        seen.add(region.name)
        regions.append(region)
        LOG.debug("Parsed region %r at line %d", region, line_number)

    # Raises on overlap
    AddressIndex(regions)

    LOG.info("Parsed %d memory regions", len(regions))
    return regions


def load_linker_script(path: str | Path) -> List[Region]:
    """Read and parse a linker script file."""
    script_path = Path(path)
    if not script_path.exists():
        raise FileNotFoundError(f"Linker script not found: {script_path}")
    return parse_linker_script(script_path.read_text(encoding="utf-8", errors="replace"))
