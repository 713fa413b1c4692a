"""rodrego — an interpreter for the RodRego register machine.

RodRego machines have numbered registers holding natural numbers and
three instructions: INC (increment and jump), DEB (decrement or branch)
and END (halt).

Submodules
----------
source
    Newline normalisation, line splitting and comment skipping shared by
    both loaders.

program
    ``Instruction``, ``Statement`` and ``Program``; the program loader.

registers
    ``RegisterBank`` and the register file loader.

machine
    ``Machine`` (the execution engine), ``TraceEvent``,
    ``ExecutionResult`` and ``MachineConfig``.

report
    Text rendering of trace events and register banks.

errors
    Exception hierarchy with ``RODREGO-NNNN`` error codes and source
    locations.

main
    CLI entry-point (``python -m rodrego``).

Usage
-----
Command-line::

    python -m rodrego --program adder.rgo --values start.txt
    python -m rodrego --help

Programmatic::

    from rodrego.program import parse_program
    from rodrego.registers import parse_registers
    from rodrego.machine import execute

    program = parse_program("a DEB 0 b c\\nb INC 1 a\\nc END\\n")
    result = execute(program, parse_registers("0 3\\n"))
    result.registers.get(1)   # 3

"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "errors",
    "machine",
    "program",
    "registers",
    "report",
    "source",
]
