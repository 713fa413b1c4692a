# tests/test_errors.py
"""
Tests for error codes, spans and rendering.
"""

import json

import pytest

from rodrego.errors import (
    ErrorCode,
    ErrorCodes,
    ErrorPhase,
    ExecutionError,
    InternalError,
    InvalidInstructionError,
    InvalidRegisterFileLineError,
    InvalidRegisterIndexError,
    InvalidRegisterReferenceError,
    InvalidRegisterValueError,
    LoadError,
    MachineHaltedError,
    MalformedLineError,
    RodregoError,
    SourceSpan,
    UnknownLabelError,
)


class TestErrorCode:

    def test_code_string(self):
        assert ErrorCodes.INVALID_INSTRUCTION.code == "RODREGO-1003"
        assert str(ErrorCodes.UNKNOWN_LABEL) == "RODREGO-5001"

    def test_equality(self):
        assert ErrorCodes.MALFORMED_LINE == ErrorCode(1001, ErrorPhase.LOAD, "other title")
        assert ErrorCodes.MALFORMED_LINE == "RODREGO-1001"
        assert ErrorCodes.MALFORMED_LINE != ErrorCodes.INVALID_REGISTER_FILE_LINE
        assert hash(ErrorCodes.MALFORMED_LINE) == hash(ErrorCode(1001, ErrorPhase.LOAD, ""))

    def test_codes_unique(self):
        codes = [v for k, v in vars(ErrorCodes).items() if isinstance(v, ErrorCode)]
        assert len({c.code for c in codes}) == len(codes)


class TestSourceSpan:

    @pytest.mark.parametrize("span,text", [
        (SourceSpan(), "<unknown location>"),
        (SourceSpan("a.rgo"), "a.rgo"),
        (SourceSpan("a.rgo", 4), "a.rgo:4"),
        (SourceSpan("", 4), "4"),
    ])
    def test_str(self, span, text):
        assert str(span) == text


class TestHierarchy:

    @pytest.mark.parametrize("exc,base,code", [
        (MalformedLineError("m"), LoadError, "RODREGO-1001"),
        (InvalidRegisterFileLineError(1), MalformedLineError, "RODREGO-1002"),
        (InvalidInstructionError("JMP"), LoadError, "RODREGO-1003"),
        (InvalidRegisterReferenceError("x"), LoadError, "RODREGO-1004"),
        (InvalidRegisterIndexError("x"), LoadError, "RODREGO-1005"),
        (InvalidRegisterValueError("x"), LoadError, "RODREGO-1006"),
        (UnknownLabelError("L"), ExecutionError, "RODREGO-5001"),
        (MachineHaltedError("L"), ExecutionError, "RODREGO-5002"),
        (InternalError("boom"), RodregoError, "RODREGO-9001"),
    ])
    def test_classes(self, exc, base, code):
        assert isinstance(exc, base)
        assert isinstance(exc, RodregoError)
        assert exc.code == code

    def test_phases(self):
        assert InvalidInstructionError("X").phase is ErrorPhase.LOAD
        assert UnknownLabelError("X").phase is ErrorPhase.RUNTIME


class TestRendering:

    def test_gcc_format(self):
        exc = InvalidInstructionError(
            "JMP", span=SourceSpan("p.rgo", 3), source_line="b JMP a",
        )
        assert str(exc) == (
            "p.rgo:3: error: Unknown instruction 'JMP' [RODREGO-1003]\n"
            "    b JMP a\n"
            "hint: valid instructions are INC, DEB and END"
        )

    def test_with_hint(self):
        exc = LoadError("bad").with_hint("fix it")
        assert str(exc).endswith("hint: fix it")

    def test_line_property(self):
        assert InvalidRegisterIndexError("x", span=SourceSpan("v", 9)).line == 9
        assert UnknownLabelError("x").line == 0

    def test_to_json(self):
        exc = InvalidRegisterValueError("-2", span=SourceSpan("v.txt", 2))
        data = exc.to_json()
        json.dumps(data)
        assert data["code"] == "RODREGO-1006"
        assert data["phase"] == "load"
        assert data["location"] == {"file": "v.txt", "line": 2}
        assert "natural numbers" in data["hint"]

    def test_unknown_label_registers_copied(self):
        regs = {0: 1}
        exc = UnknownLabelError("L", registers=regs)
        regs[0] = 5
        assert exc.registers == {0: 1}
