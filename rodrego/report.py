"""rodrego/report.py — human-readable rendering of machine state.

The output format follows the classic RodRego interpreter::

    [[ now on line: start ]]
    register 1 = 2
    performing: DEB register 1 and GOTO inc0 else done
    ...
    *** Final state of the world ***
    register 0 = 2
"""

from __future__ import annotations

import sys
from typing import Callable, List, Mapping, Optional, TextIO, Union

from rodrego.machine import TraceEvent
from rodrego.program import Instruction
from rodrego.registers import RegisterBank

EMPTY_REGISTERS: str = "[ all registers empty ]"
FINAL_BANNER: str = "*** Final state of the world ***"
STEP_PROMPT: str = "ENTER to continue..."


def format_registers(registers: Union[RegisterBank, Mapping[int, int]]) -> List[str]:
    """One line per set register, ascending by index."""
    if isinstance(registers, RegisterBank):
        values = registers.snapshot()
    else:
        values = dict(sorted(registers.items()))
    if not values:
        return [EMPTY_REGISTERS]
    return [f"register {k} = {v}" for k, v in values.items()]


def format_event(event: TraceEvent) -> str:
    lines = [f"[[ now on line: {event.label} ]]"]
    lines.extend(format_registers(event.registers))
    lines.append(f"performing: {event.describe()}")
    return "\n".join(lines)


def format_final(registers: Union[RegisterBank, Mapping[int, int]]) -> str:
    return "\n".join([FINAL_BANNER, *format_registers(registers)])


class TraceReporter:
    """
    Trace handler that prints each event to *stream*.

    In step mode it waits on *pause* (``input`` by default) after every
    statement except END.  Waiting never touches the machine.  With
    *echo* off the event text is suppressed but step mode still pauses.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        step_mode: bool = False,
        pause: Optional[Callable[[], object]] = None,
        echo: bool = True,
    ) -> None:
        self.stream = stream or sys.stdout
        self.step_mode = step_mode
        self.pause = pause or input
        self.echo = echo

    def __call__(self, event: TraceEvent) -> None:
        if self.echo:
            print(format_event(event), file=self.stream)
        if self.step_mode and event.statement.kind is not Instruction.END:
            print(STEP_PROMPT, file=self.stream)
            self.stream.flush()
            self.pause()
