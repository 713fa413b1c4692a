"""
rodrego/machine.py
==================

The RodRego execution engine.

This module provides:

* ``Machine``          – steps a ``Program`` over a ``RegisterBank``
* ``TraceEvent``       – the machine state observed just before each step
* ``ExecutionResult``  – final registers and step count of a halted run
* ``MachineConfig``    – configuration dataclass for tracing behaviour
* ``execute``          – one-call convenience wrapper

The machine does no I/O of its own.  Anything that wants to watch a run
(the command line's reporter, a test) registers a trace handler, a plain
callable taking a ``TraceEvent``.

Nothing bounds the number of steps: RodRego programs may legitimately
run forever.  Callers that need a bound step the machine themselves, e.g.
``itertools.islice(machine.iter_trace(), 1000)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from rodrego.errors import (
    InternalError,
    MachineHaltedError,
    SourceSpan,
    UnknownLabelError,
)
from rodrego.program import Instruction, Program, Statement
from rodrego.registers import RegisterBank

logger = logging.getLogger(__name__)


# ===================================================================== #
#  Trace and result types                                                #
# ===================================================================== #

@dataclass(frozen=True)
class TraceEvent:
    """Machine state immediately before ``statement`` is performed."""
    step: int
    label: str
    statement: Statement
    registers: Dict[int, int] = field(default_factory=dict)

    def describe(self) -> str:
        return self.statement.describe()


@dataclass
class ExecutionResult:
    """Outcome of a run that reached END."""
    registers: RegisterBank
    steps: int
    halt_label: Optional[str]


TraceHandler = Callable[[TraceEvent], None]


# ===================================================================== #
#  Configuration                                                         #
# ===================================================================== #

@dataclass
class MachineConfig:
    """Tuning knobs for the machine."""
    record_trace: bool = False
    snapshot_registers: bool = True

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if self.record_trace and not self.snapshot_registers:
            warnings.append(
                "record_trace without snapshot_registers keeps events "
                "with empty register snapshots"
            )
        return warnings


# ===================================================================== #
#  Machine                                                               #
# ===================================================================== #

class Machine:
    """
    RodRego register machine.

    Usage::

        program = parse_program(source)
        machine = Machine(program, parse_registers(values))
        machine.add_trace_handler(print)
        result = machine.run()
        print(result.registers)

    State is the current label plus the register bank.  If a jump lands
    on an undefined label, ``UnknownLabelError`` is raised and
    ``registers`` keeps the last valid state.
    """

    def __init__(
        self,
        program: Program,
        registers: Optional[RegisterBank] = None,
        config: Optional[MachineConfig] = None,
        on_trace: Optional[TraceHandler] = None,
    ) -> None:
        self._program = program
        self._registers = registers if registers is not None else RegisterBank()
        self._config = config or MachineConfig()
        for w in self._config.validate():
            logger.warning("MachineConfig: %s", w)

        self._current: Optional[str] = program.entry
        self._last: Optional[Statement] = None
        self._steps: int = 0
        self._halted: bool = program.entry is None
        self._trace: List[TraceEvent] = []
        self._trace_handlers: List[TraceHandler] = []
        if on_trace is not None:
            self.add_trace_handler(on_trace)

    # -- Handler registration --------------------------------------------
    def add_trace_handler(self, handler: TraceHandler) -> None:
        self._trace_handlers.append(handler)

    # -- State access ----------------------------------------------------
    @property
    def program(self) -> Program:
        return self._program

    @property
    def registers(self) -> RegisterBank:
        return self._registers

    @property
    def current(self) -> Optional[str]:
        return self._current

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def trace(self) -> List[TraceEvent]:
        """Recorded events; only populated with ``record_trace`` set."""
        return list(self._trace)

    def result(self) -> ExecutionResult:
        return ExecutionResult(
            registers=self._registers,
            steps=self._steps,
            halt_label=self._current if self._halted else None,
        )

    # -- Execution -------------------------------------------------------
    def _fetch(self, label: str) -> Statement:
        try:
            return self._program.lookup(label)
        except UnknownLabelError as exc:
            exc.registers = self._registers.snapshot()
            # Point at the INC/DEB that made the jump.
            if self._last is not None:
                exc.span = SourceSpan(self._program.source, self._last.line)
                exc.source_line = self._last.describe()
            raise

    def _emit(self, event: TraceEvent) -> None:
        if self._config.record_trace:
            self._trace.append(event)
        for handler in self._trace_handlers:
            handler(event)

    def step(self) -> TraceEvent:
        """Perform one statement and return the event emitted before it."""
        if self._halted:
            raise MachineHaltedError(self._current or "")

        label = self._current
        if label is None:
            raise InternalError("machine has no current label but is not halted")
        stmt = self._fetch(label)
        self._last = stmt

        event = TraceEvent(
            step=self._steps,
            label=label,
            statement=stmt,
            registers=self._registers.snapshot() if self._config.snapshot_registers else {},
        )
        self._emit(event)
        self._steps += 1

        kind = stmt.kind
        if kind is Instruction.INC:
            self._registers.increment(stmt.target)
            self._current = stmt.branch

        elif kind is Instruction.DEB:
            if self._registers.decrement(stmt.target):
                self._current = stmt.branch
            else:
                self._current = stmt.else_branch

        elif kind is Instruction.END:
            self._halted = True
            logger.info("halted at %r after %d step(s)", label, self._steps)

        else:
            raise InternalError(f"unhandled instruction kind {kind!r}")

        return event

    def iter_trace(self) -> Iterator[TraceEvent]:
        """Step lazily until halt, yielding each event."""
        while not self._halted:
            yield self.step()

    def run(self) -> ExecutionResult:
        """Run until END.  May never return for a non-halting program."""
        logger.info(
            "running %s from %r with %d register(s) set",
            self._program.source, self._current, len(self._registers),
        )
        while not self._halted:
            self.step()
        return self.result()


def execute(
    program: Program,
    registers: Optional[RegisterBank] = None,
    on_trace: Optional[TraceHandler] = None,
    config: Optional[MachineConfig] = None,
) -> ExecutionResult:
    """Run *program* to completion over *registers* (mutated in place)."""
    return Machine(program, registers, config=config, on_trace=on_trace).run()
