"""rodrego/source.py — reading and splitting RodRego source text.

Example programs in the wild use all three newline conventions (LF, CR LF,
and the classic Mac lone CR), sometimes mixed in one file.  Everything here
canonicalises to LF before anything is tokenised, so both loaders see the
same lines and report the same line numbers.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

COMMENT_CHAR: str = "#"

_NEWLINE_RE = re.compile(r"\r\n?")


def normalize_newlines(text: Union[str, bytes]) -> str:
    """Return *text* with every CR LF and lone CR replaced by LF.

    Bytes are decoded as UTF-8, or byte-for-byte as Latin-1 when they are
    not valid UTF-8 (old Mac files are often MacRoman or Latin-1), so
    decoding never fails and distinct byte strings stay distinct.  A
    carriage return always terminates a line; it is never kept as line
    content.
    """
    if isinstance(text, bytes):
        text = _decode(text)
    return _NEWLINE_RE.sub("\n", text)


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.debug("input is not UTF-8 (%s); decoding as Latin-1", exc.reason)
        return data.decode("latin-1")


def split_lines(text: Union[str, bytes]) -> List[str]:
    """Normalise *text* and split it into lines without terminators.

    A terminator at the very end does not produce an extra empty line, so
    ``"a\\nb\\n"`` and ``"a\\nb"`` both give ``["a", "b"]``.
    """
    normalized = normalize_newlines(text)
    if not normalized:
        return []
    lines = normalized.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def is_skippable(line: str) -> bool:
    """True for blank lines and ``#`` comment lines."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_CHAR)


def iter_content_lines(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(lineno, fields)`` for every non-blank, non-comment line.

    ``lineno`` is 1-based and counts skipped lines too.
    """
    for lineno, line in enumerate(lines, start=1):
        if is_skippable(line):
            continue
        yield lineno, line.split()


_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_natural(token: str) -> Optional[int]:
    """Parse a base-10 natural number, or return ``None``.

    Only ASCII digits with an optional sign are accepted (no ``0x``, no
    ``1_000``); negative values are rejected.  ``-0`` is zero.
    """
    if not _INTEGER_RE.fullmatch(token):
        return None
    value = int(token)
    if value < 0:
        return None
    return value


def read_source(path: Union[str, Path]) -> str:
    """Read *path* and return its normalised text.  ``OSError`` propagates."""
    p = Path(path)
    data = p.read_bytes()
    logger.debug("read %d bytes from %s", len(data), p)
    return normalize_newlines(data)
