"""rodrego/registers.py — the register bank and the register file loader.

Register files give initial values, one register per line::

    # register value
    0 5
    1 3

Both fields are natural numbers.  Registers that are never set read as 0.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

from rodrego.errors import (
    InvalidRegisterFileLineError,
    InvalidRegisterIndexError,
    InvalidRegisterValueError,
    SourceSpan,
)
from rodrego.source import iter_content_lines, parse_natural, read_source, split_lines

logger = logging.getLogger(__name__)


class RegisterBank:
    """
    Mapping from register index to value over the natural numbers.

    Absent registers read as zero.  Nothing here can make a register
    negative: ``decrement`` on a zero register reports failure instead.
    """

    def __init__(self, initial: Optional[Mapping[int, int]] = None) -> None:
        self._values: Dict[int, int] = {}
        if initial:
            for index, value in initial.items():
                self.set(index, value)

    # -- Access ------------------------------------------------------------
    def get(self, index: int) -> int:
        return self._values.get(index, 0)

    def __getitem__(self, index: int) -> int:
        return self.get(index)

    def set(self, index: int, value: int) -> None:
        if index < 0:
            raise ValueError(f"register index must be non-negative, got {index}")
        if value < 0:
            raise ValueError(f"register value must be non-negative, got {value}")
        self._values[index] = value

    def __setitem__(self, index: int, value: int) -> None:
        self.set(index, value)

    # -- Machine operations ------------------------------------------------
    def increment(self, index: int) -> int:
        """Add one to register *index* and return the new value."""
        value = self.get(index) + 1
        self._values[index] = value
        return value

    def decrement(self, index: int) -> bool:
        """Subtract one from register *index* if it is non-zero.

        Returns ``False`` and leaves the register untouched when it is
        already zero (or was never set).
        """
        value = self.get(index)
        if value == 0:
            return False
        self._values[index] = value - 1
        return True

    # -- Views -------------------------------------------------------------
    def snapshot(self) -> Dict[int, int]:
        """Copy of the set registers, ordered by index."""
        return dict(sorted(self._values.items()))

    def copy(self) -> "RegisterBank":
        return RegisterBank(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._values))

    def __contains__(self, index: object) -> bool:
        return index in self._values

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RegisterBank):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"RegisterBank({self.snapshot()!r})"


def parse_registers(text: Union[str, bytes], source: str = "<string>") -> RegisterBank:
    """Parse register file text into a new ``RegisterBank``.

    The first malformed line aborts parsing.  A register assigned twice
    keeps the last value.
    """
    bank = RegisterBank()

    for lineno, fields in iter_content_lines(split_lines(text)):
        span = SourceSpan(source, lineno)
        raw = " ".join(fields)
        if len(fields) != 2:
            raise InvalidRegisterFileLineError(len(fields), span=span, source_line=raw)

        index = parse_natural(fields[0])
        if index is None:
            raise InvalidRegisterIndexError(fields[0], span=span, source_line=raw)
        value = parse_natural(fields[1])
        if value is None:
            raise InvalidRegisterValueError(fields[1], span=span, source_line=raw)

        bank.set(index, value)

    logger.info("loaded %d register(s) from %s", len(bank), source)
    return bank


def load_registers(path: Union[str, Path]) -> RegisterBank:
    """Read and parse the register file at *path*."""
    return parse_registers(read_source(path), source=str(path))
