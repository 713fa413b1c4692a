# tests/test_report.py
"""
Tests for the text reporter.
"""

import io

from rodrego.machine import Machine, TraceEvent, execute
from rodrego.program import Statement, parse_program
from rodrego.registers import RegisterBank
from rodrego.report import (
    EMPTY_REGISTERS,
    FINAL_BANNER,
    STEP_PROMPT,
    TraceReporter,
    format_event,
    format_final,
    format_registers,
)
from tests.conftest import ADDER_RGO


class TestFormatRegisters:

    def test_empty(self):
        assert format_registers(RegisterBank()) == [EMPTY_REGISTERS]
        assert format_registers({}) == ["[ all registers empty ]"]

    def test_sorted_by_index(self):
        assert format_registers({10: 1, 2: 0}) == ["register 2 = 0", "register 10 = 1"]

    def test_bank(self):
        assert format_registers(RegisterBank({0: 5})) == ["register 0 = 5"]


class TestFormatEvent:

    def test_event_text(self):
        event = TraceEvent(step=0, label="B", statement=Statement.deb(0, "A", "END"),
                           registers={0: 1})
        assert format_event(event) == (
            "[[ now on line: B ]]\n"
            "register 0 = 1\n"
            "performing: DEB register 0 and GOTO A else END"
        )

    def test_final(self):
        assert format_final(RegisterBank()) == f"{FINAL_BANNER}\n{EMPTY_REGISTERS}"


class TestTraceReporter:

    def test_writes_every_event(self):
        out = io.StringIO()
        execute(parse_program(ADDER_RGO), RegisterBank({1: 1}), on_trace=TraceReporter(out))
        text = out.getvalue()
        assert text.count("[[ now on line:") == 4
        assert "performing: INC register 0 and GOTO start" in text
        assert STEP_PROMPT not in text

    def test_step_mode_pauses_between_statements(self):
        out = io.StringIO()
        pauses = []
        reporter = TraceReporter(out, step_mode=True, pause=lambda: pauses.append(1))
        execute(parse_program(ADDER_RGO), RegisterBank({1: 1}), on_trace=reporter)
        # no pause after END
        assert len(pauses) == 3
        assert out.getvalue().count(STEP_PROMPT) == 3

    def test_step_mode_does_not_change_result(self):
        plain = execute(parse_program(ADDER_RGO), RegisterBank({0: 1, 1: 4}))
        reporter = TraceReporter(io.StringIO(), step_mode=True, pause=lambda: None)
        stepped = execute(parse_program(ADDER_RGO), RegisterBank({0: 1, 1: 4}),
                          on_trace=reporter)
        assert plain.registers == stepped.registers
        assert plain.steps == stepped.steps

    def test_pause_sees_state_before_transition(self):
        machine = Machine(parse_program("a INC 0 b\nb END\n"))
        seen = []
        machine.add_trace_handler(
            TraceReporter(io.StringIO(), step_mode=True,
                          pause=lambda: seen.append(machine.registers.snapshot()))
        )
        machine.run()
        assert seen == [{}]

    def test_echo_off_prints_nothing(self):
        out = io.StringIO()
        execute(parse_program(ADDER_RGO), RegisterBank({1: 1}),
                on_trace=TraceReporter(out, echo=False))
        assert out.getvalue() == ""

    def test_echo_off_still_pauses_in_step_mode(self):
        out = io.StringIO()
        pauses = []
        reporter = TraceReporter(out, step_mode=True, echo=False,
                                 pause=lambda: pauses.append(1))
        execute(parse_program(ADDER_RGO), RegisterBank({1: 1}), on_trace=reporter)
        assert len(pauses) == 3
        assert "now on line" not in out.getvalue()
        assert out.getvalue().count(STEP_PROMPT) == 3
