# rodrego/errors.py
"""
RodRego Error Types

Exception classes and error codes for the RodRego loaders and execution
engine. Every error knows where it came from (a ``SourceSpan``) and which
phase raised it, and renders itself in GCC style so the command line can
print it as-is.

Error Hierarchy:
────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│  RodregoError (base)                                                        │
│  ├── LoadError                    - Program / register file parsing         │
│  │   ├── MalformedLineError       - Wrong field count                       │
│  │   │   └── InvalidRegisterFileLineError                                   │
│  │   ├── InvalidInstructionError  - Unknown mnemonic                        │
│  │   ├── InvalidRegisterReferenceError                                      │
│  │   ├── InvalidRegisterIndexError                                          │
│  │   └── InvalidRegisterValueError                                          │
│  ├── ExecutionError               - Faults while running a program          │
│  │   ├── UnknownLabelError        - Control reached an undefined label      │
│  │   └── MachineHaltedError       - Stepping a halted machine               │
│  └── InternalError                - Interpreter bugs (should never happen)  │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
  - 1000-1999: Load errors
  - 5000-5999: Runtime errors
  - 9000-9999: Internal errors

Example Usage:
──────────────
    from rodrego.errors import LoadError

    try:
        program = load_program("adder.rgo")
    except LoadError as exc:
        print(exc)          # adder.rgo:3: error: ... [RODREGO-1003]
        print(exc.line)     # 3
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Mapping, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """Phase of a run in which the error occurred."""

    LOAD = "load"          # Program / register file parsing
    RUNTIME = "runtime"    # Execution
    INTERNAL = "internal"  # Interpreter internals


class ErrorCode:
    """
    Structured error code of the form ``RODREGO-NNNN``.

    Codes compare equal to each other by number and to their string form,
    so tests can write ``exc.code == "RODREGO-1003"``.
    """

    __slots__ = ("prefix", "number", "phase", "title")

    def __init__(
        self,
        number: int,
        phase: ErrorPhase,
        title: str,
        prefix: str = "RODREGO",
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.title = title

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.title!r})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    # Load errors (1000-1999)
    MALFORMED_LINE = ErrorCode(1001, ErrorPhase.LOAD, "malformed line")
    INVALID_REGISTER_FILE_LINE = ErrorCode(
        1002, ErrorPhase.LOAD, "invalid register file line"
    )
    INVALID_INSTRUCTION = ErrorCode(1003, ErrorPhase.LOAD, "invalid instruction")
    INVALID_REGISTER_REFERENCE = ErrorCode(
        1004, ErrorPhase.LOAD, "invalid register reference"
    )
    INVALID_REGISTER_INDEX = ErrorCode(1005, ErrorPhase.LOAD, "invalid register index")
    INVALID_REGISTER_VALUE = ErrorCode(1006, ErrorPhase.LOAD, "invalid register value")

    # Runtime errors (5000-5999)
    UNKNOWN_LABEL = ErrorCode(5001, ErrorPhase.RUNTIME, "unknown label")
    MACHINE_HALTED = ErrorCode(5002, ErrorPhase.RUNTIME, "machine halted")

    # Internal errors (9000-9999)
    INTERNAL_ERROR = ErrorCode(9001, ErrorPhase.INTERNAL, "internal error")


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE LOCATION
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceSpan:
    """A position in a program or register file (1-based line, 0 = unknown)."""

    file: str = ""
    line: int = 0

    def __str__(self) -> str:
        if not self.file and self.line == 0:
            return "<unknown location>"

        parts = []
        if self.file:
            parts.append(self.file)
        if self.line > 0:
            parts.append(str(self.line))

        return ":".join(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class RodregoError(Exception):
    """
    Base exception for all RodRego errors.

    Carries an ``ErrorCode``, a ``SourceSpan`` and an optional hint, and
    formats them GCC style::

        adder.rgo:4: error: Unknown instruction 'JMP' [RODREGO-1003]
        hint: valid instructions are INC, DEB and END
    """

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        hint: str = "",
        source_line: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.span = span or SourceSpan()
        self.hint = hint
        self.source_line = source_line

    @property
    def line(self) -> int:
        """1-based line number of the offending line, 0 when not applicable."""
        return self.span.line

    @property
    def phase(self) -> ErrorPhase:
        return self.code.phase

    def with_hint(self, hint: str) -> "RodregoError":
        """Add a hint to this error."""
        self.hint = hint
        return self

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        lines = [f"{self.span}: error: {self.message} [{self.code}]"]
        if self.source_line:
            lines.append(f"    {self.source_line}")
        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "code": self.code.code,
            "message": self.message,
            "phase": self.code.phase.value,
            "location": {
                "file": self.span.file,
                "line": self.span.line,
            },
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ───────────────────────────────────────────────────────────────────────────────
# LOAD ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class LoadError(RodregoError):
    """Error while parsing a program or register file. Loading stops here."""

    default_code = ErrorCodes.MALFORMED_LINE


class MalformedLineError(LoadError):
    """A line has the wrong number of fields for what it declares."""

    default_code = ErrorCodes.MALFORMED_LINE

    def __init__(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        expected: int = 0,
        got: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, span=span, **kwargs)
        self.expected = expected
        self.got = got


class InvalidRegisterFileLineError(MalformedLineError):
    """A register file line is not ``<register number> <register value>``."""

    default_code = ErrorCodes.INVALID_REGISTER_FILE_LINE

    def __init__(
        self,
        got: int,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Register file lines take 2 fields, got {got}",
            span=span,
            expected=2,
            got=got,
            hint="required format for register file lines: "
                 "<register number> <register value>",
            **kwargs,
        )


class InvalidInstructionError(LoadError):
    """Mnemonic is not one of INC, DEB, END."""

    default_code = ErrorCodes.INVALID_INSTRUCTION

    def __init__(
        self,
        mnemonic: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Unknown instruction {mnemonic!r}",
            span=span,
            hint="valid instructions are INC, DEB and END",
            **kwargs,
        )
        self.mnemonic = mnemonic


class _NaturalNumberError(LoadError):
    """Shared shape of the "expected a natural number" errors."""

    what: str = "value"
    rule: str = ""

    def __init__(
        self,
        token: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Invalid {self.what} {token!r}",
            span=span,
            hint=self.rule,
            **kwargs,
        )
        self.token = token


class InvalidRegisterReferenceError(_NaturalNumberError):
    """An instruction's target register is not a natural number."""

    default_code = ErrorCodes.INVALID_REGISTER_REFERENCE
    what = "target register"
    rule = "target registers must be valid non-negative integers"


class InvalidRegisterIndexError(_NaturalNumberError):
    """A register file names a register that is not a natural number."""

    default_code = ErrorCodes.INVALID_REGISTER_INDEX
    what = "register number"
    rule = "registers must be referenced with natural numbers"


class InvalidRegisterValueError(_NaturalNumberError):
    """A register file assigns a value that is not a natural number."""

    default_code = ErrorCodes.INVALID_REGISTER_VALUE
    what = "register value"
    rule = "register values must be natural numbers"


# ───────────────────────────────────────────────────────────────────────────────
# EXECUTION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ExecutionError(RodregoError):
    """Error while running a program. The run is aborted."""

    default_code = ErrorCodes.UNKNOWN_LABEL


class UnknownLabelError(ExecutionError):
    """
    Control was transferred to a label the program does not define.

    ``registers`` holds the register bank as it was when the jump was
    attempted, for post-mortem reporting.
    """

    default_code = ErrorCodes.UNKNOWN_LABEL

    def __init__(
        self,
        label: str,
        span: Optional[SourceSpan] = None,
        registers: Optional[Mapping[int, int]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(f"Unknown label {label!r}", span=span, **kwargs)
        self.label = label
        self.registers: Dict[int, int] = dict(registers or {})


class MachineHaltedError(ExecutionError):
    """``step()`` was called on a machine that already executed END."""

    default_code = ErrorCodes.MACHINE_HALTED

    def __init__(self, label: str = "", **kwargs: Any) -> None:
        where = f" at {label!r}" if label else ""
        super().__init__(f"Machine already halted{where}", **kwargs)
        self.label = label


# ───────────────────────────────────────────────────────────────────────────────
# INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class InternalError(RodregoError):
    """Interpreter bug."""

    default_code = ErrorCodes.INTERNAL_ERROR
