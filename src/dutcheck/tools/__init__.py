# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/tools/__init__.py

"""Command-line tools.

- dv: build and run one bench test for one or more seeds
- dv-regress: run a YAML list of dv jobs and summarize PASS/FAIL
"""
