# tests/conftest.py
"""
Shared fixtures and sample sources for the RodRego tests.
"""

import itertools
from typing import List

import pytest

from rodrego.machine import Machine, TraceEvent


# ---------------------------------------------------------------------------
# Sample programs
# ---------------------------------------------------------------------------

HALT_ONLY_RGO = "S END\n"

# r0 += r1, r1 cleared
ADDER_RGO = """\
# add register 1 into register 0
start  DEB 1 inc0 done
inc0   INC 0 start
done   END
"""

# r2 += r0 + r1, numeric labels; r0 and r1 end at zero
COPY_RGO = """\
1 DEB 0 2 3
2 INC 2 1
3 DEB 1 4 5
4 INC 2 3
5 END
"""

# never halts: 0 goes 0 -> 1 -> 0 -> 1 ...
OSCILLATOR_RGO = """\
A INC 0 B
B DEB 0 A END
END END
"""

DUPLICATE_LABEL_RGO = """\
L INC 0 L
L END
"""

DANGLING_RGO = """\
a INC 3 b
b INC 3 nowhere
"""

MIXED_CASE_RGO = """\
go  inc 0 Stop
Stop eNd
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def run_bounded(machine: Machine, limit: int) -> List[TraceEvent]:
    """Step *machine* at most *limit* times and return the events."""
    return list(itertools.islice(machine.iter_trace(), limit))


class EventCollector:
    """Trace handler that keeps every event."""

    def __init__(self):
        self.events: List[TraceEvent] = []

    def __call__(self, event: TraceEvent) -> None:
        self.events.append(event)

    @property
    def labels(self) -> List[str]:
        return [e.label for e in self.events]


@pytest.fixture
def collector():
    return EventCollector()


@pytest.fixture
def write_file(tmp_path):
    """Write *text* (str or bytes) to *name* under tmp_path; return the path."""

    def _write(name, text):
        path = tmp_path / name
        if isinstance(text, bytes):
            path.write_bytes(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write
