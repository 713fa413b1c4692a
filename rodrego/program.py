"""rodrego/program.py – RodRego program model and loader.

A RodRego program is a set of labeled statements, one per line::

    # add register 1 into register 0
    start  DEB 1 inc0 done
    inc0   INC 0 start
    done   END

Mnemonics are case-insensitive; labels are case-sensitive opaque tokens.
Execution starts at the label of the first statement in the file.

Public API
----------
``parse_program(text, source) -> Program``
    Parse program source text.

``load_program(path) -> Program``
    Read and parse a program file.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from rodrego.errors import (
    InvalidInstructionError,
    InvalidRegisterReferenceError,
    MalformedLineError,
    SourceSpan,
    UnknownLabelError,
)
from rodrego.source import iter_content_lines, parse_natural, read_source, split_lines

logger = logging.getLogger(__name__)


class Instruction(enum.Enum):
    """The three RodRego instructions."""
    INC = "inc"
    DEB = "deb"
    END = "end"

    @property
    def operand_count(self) -> int:
        return _OPERAND_COUNTS[self]


_OPERAND_COUNTS: Dict[Instruction, int] = {
    Instruction.INC: 2,
    Instruction.DEB: 3,
    Instruction.END: 0,
}

_OPERAND_NAMES: Dict[Instruction, str] = {
    Instruction.INC: "<target> <branch>",
    Instruction.DEB: "<target> <branch> <elsebranch>",
    Instruction.END: "no operands",
}


@dataclass(frozen=True)
class Statement:
    """Single program statement.

    ``target`` is meaningless for END.  ``else_branch`` is only used by DEB.
    ``line`` records where the statement came from and takes no part in
    equality.
    """
    kind: Instruction
    target: int = 0
    branch: str = ""
    else_branch: str = ""
    line: int = field(default=0, compare=False)

    @classmethod
    def inc(cls, target: int, branch: str, line: int = 0) -> "Statement":
        return cls(Instruction.INC, target, branch, "", line)

    @classmethod
    def deb(cls, target: int, branch: str, else_branch: str, line: int = 0) -> "Statement":
        return cls(Instruction.DEB, target, branch, else_branch, line)

    @classmethod
    def end(cls, line: int = 0) -> "Statement":
        return cls(Instruction.END, line=line)

    def describe(self) -> str:
        if self.kind is Instruction.INC:
            return f"INC register {self.target} and GOTO {self.branch}"
        if self.kind is Instruction.DEB:
            return (
                f"DEB register {self.target} and GOTO {self.branch} "
                f"else {self.else_branch}"
            )
        return "END"

    def __str__(self) -> str:
        return self.describe()


@dataclass
class Program:
    """Label → statement mapping plus the entry label.

    ``entry`` is ``None`` only for a program with no statements.
    """
    statements: Dict[str, Statement] = field(default_factory=dict)
    entry: Optional[str] = None
    source: str = "<string>"

    def __len__(self) -> int:
        return len(self.statements)

    def __contains__(self, label: object) -> bool:
        return label in self.statements

    def __iter__(self) -> Iterator[str]:
        return iter(self.statements)

    def labels(self) -> List[str]:
        return list(self.statements)

    def lookup(self, label: str) -> Statement:
        """Return the statement at *label*; raise ``UnknownLabelError`` if absent."""
        try:
            return self.statements[label]
        except KeyError:
            raise UnknownLabelError(
                label,
                span=SourceSpan(self.source),
                hint=f"no statement is labeled {label!r}",
            ) from None


# ===================================================================== #
#  Parsing                                                               #
# ===================================================================== #

def _parse_statement(fields: List[str], lineno: int, source: str) -> Statement:
    span = SourceSpan(source, lineno)
    raw = " ".join(fields)

    if len(fields) < 2:
        raise MalformedLineError(
            f"Statement {fields[0]!r} has no instruction",
            span=span,
            expected=2,
            got=len(fields),
            hint="statements take the form <label> <INC|DEB|END> [operands]",
            source_line=raw,
        )

    mnemonic = fields[1]
    try:
        kind = Instruction(mnemonic.lower())
    except ValueError:
        raise InvalidInstructionError(mnemonic, span=span, source_line=raw) from None

    operands = fields[2:]
    if len(operands) != kind.operand_count:
        raise MalformedLineError(
            f"{kind.name} takes {kind.operand_count} operand(s), got {len(operands)}",
            span=span,
            expected=kind.operand_count,
            got=len(operands),
            hint=f"{kind.name} expects {_OPERAND_NAMES[kind]}",
            source_line=raw,
        )

    if kind is Instruction.END:
        return Statement.end(line=lineno)

    target = parse_natural(operands[0])
    if target is None:
        raise InvalidRegisterReferenceError(operands[0], span=span, source_line=raw)

    if kind is Instruction.INC:
        return Statement.inc(target, operands[1], line=lineno)
    return Statement.deb(target, operands[1], operands[2], line=lineno)


def parse_program(text: Union[str, bytes], source: str = "<string>") -> Program:
    """Parse RodRego program text.

    The first error aborts parsing.  A label defined twice keeps its last
    definition.
    """
    program = Program(source=source)

    for lineno, fields in iter_content_lines(split_lines(text)):
        label = fields[0]
        stmt = _parse_statement(fields, lineno, source)

        if program.entry is None:
            program.entry = label
        if label in program.statements:
            logger.warning(
                "%s:%d: label %r redefined (previous definition on line %d)",
                source, lineno, label, program.statements[label].line,
            )
        program.statements[label] = stmt

    logger.info(
        "loaded %d statement(s) from %s, entry %r",
        len(program), source, program.entry,
    )
    return program


def load_program(path: Union[str, Path]) -> Program:
    """Read and parse the program file at *path*."""
    return parse_program(read_source(path), source=str(path))
