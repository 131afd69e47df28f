# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/__init__.py

"""Reference DUTs with their RTL and benches.

Each DUT directory holds:
- rtl/: SystemVerilog source and srclist.f
- dv/: cocotb/pyuvm bench and dv_regress.yaml
- a simulator-free model of the DUT's behavior
"""
