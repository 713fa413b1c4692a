#!/usr/bin/env python3
"""rodrego/main.py — CLI entry-point for the RodRego interpreter.

Usage examples
--------------
    # Run a program with all registers starting at zero
    python -m rodrego --program adder.rgo

    # Start from the register values in a file
    python -m rodrego -p adder.rgo -r values.txt

    # Pause for ENTER after every instruction
    python -m rodrego -p adder.rgo -r values.txt --step

    # Only print the final register state
    python -m rodrego -p adder.rgo -q

Exit codes
----------
    0   The program reached END.
    1   The program or register file is malformed, or execution jumped to
        an undefined label.
    2   Infrastructure failure (unreadable file, bad invocation).

The module doubles as ``python -m rodrego`` via the companion
``rodrego/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from rodrego import __version__
from rodrego.errors import ExecutionError, LoadError, UnknownLabelError
from rodrego.machine import Machine
from rodrego.program import load_program
from rodrego.registers import RegisterBank, load_registers
from rodrego.report import TraceReporter, format_final, format_registers

_log = logging.getLogger("rodrego")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_INTERRUPTED: int = 130


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``rodrego`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("rodrego")
    root.setLevel(level)
    # Repeated main() calls (tests) must not stack handlers.
    for h in list(root.handlers):
        if getattr(h, "_rodrego_cli", False):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler._rodrego_cli = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def _report_error(exc: Exception, stream: TextIO) -> None:
    print(str(exc), file=stream)


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rodrego",
        description="Run a RodRego register machine program.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "-p", "-program", "--program",
        required=True,
        metavar="FILE",
        help="Filename of a RodRego program to execute (required).",
    )
    parser.add_argument(
        "-r", "-values", "--values",
        default=None,
        metavar="FILE",
        help="Filename for a set of initial register values.",
    )
    parser.add_argument(
        "-s", "-step", "--step",
        action="store_true",
        help="Step through the program one instruction at a time.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print the per-instruction trace (step mode still pauses).",
    )
    return parser


# ===========================================================================
# Command
# ===========================================================================

def run(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Load, execute and report.  Returns an exit code."""
    try:
        program = load_program(args.program)
        registers = load_registers(args.values) if args.values else RegisterBank()
    except OSError as exc:
        _log.error("cannot read input: %s", exc)
        return EXIT_INFRA
    except LoadError as exc:
        _report_error(exc, stderr)
        return EXIT_ERROR

    machine = Machine(program, registers)
    if args.step or not args.quiet:
        machine.add_trace_handler(
            TraceReporter(stdout, step_mode=args.step, echo=not args.quiet)
        )

    try:
        machine.run()
    except UnknownLabelError as exc:
        _report_error(exc, stderr)
        print("*** Last state before the fault ***", file=stdout)
        print("\n".join(format_registers(exc.registers)), file=stdout)
        return EXIT_ERROR
    except ExecutionError as exc:
        _report_error(exc, stderr)
        return EXIT_ERROR

    print(format_final(machine.registers), file=stdout)
    _log.info("finished after %d step(s)", machine.steps)
    return EXIT_OK


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the RodRego CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA

    _configure_logging(args.verbose)

    try:
        return run(args, sys.stdout, sys.stderr)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


# ---------------------------------------------------------------------------
# Module execution support
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    raise SystemExit(main())
