#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rodrego/__main__.py
===================

Entry point for ``python -m rodrego``.  See :mod:`rodrego.main`.
"""

from __future__ import annotations

import sys

from rodrego.main import main


if __name__ == "__main__":
    sys.exit(main())
