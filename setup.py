#!/usr/bin/env python3
# =============================================================================
#  rodrego — setup.py  (legacy compatibility shim)
#
#  All authoritative metadata lives in pyproject.toml.
#  This file exists so that:
#
#    1.  `pip install -e .` works on older pip / setuptools that pre-date
#        PEP 660 editable installs.
#    2.  `python setup.py sdist bdist_wheel` still works for CI scripts
#        that haven't migrated to `python -m build`.
#
#  For new tooling, prefer:
#      pip install -e ".[dev]"
#      python -m build
#      python -m pytest
# =============================================================================

from __future__ import annotations

from setuptools import setup, find_packages

# ---------------------------------------------------------------------------
#  Project metadata (name, version, dependencies, the `rodrego` console
#  script) is read by setuptools from pyproject.toml.  Only the package
#  discovery rules are repeated here.
# ---------------------------------------------------------------------------
setup(
    packages=find_packages(
        include=[
            "rodrego",
            "rodrego.*",
        ],
        exclude=[
            "tests",
            "tests.*",
            "examples",
            "examples.*",
        ],
    ),
    zip_safe=False,
)
