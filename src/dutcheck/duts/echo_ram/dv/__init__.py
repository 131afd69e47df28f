# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/dv/__init__.py

"""cocotb/pyuvm bench for echo_ram.

Components:
- echo_ram_driver: drives request_valid/request_data
- echo_ram_monitor: captures response_valid/response_data
- echo_ram_ref_model: circular-buffer predictor
- echo_ram_coverage: response data coverage
- test_echo_ram: the test (variants are stimulus profiles)

To run:
    dv --design=echo_ram --test=test_echo_ram
    dv --design=echo_ram --test=test_echo_ram --bug=2 --expect=FAIL
    dv-regress --file=src/dutcheck/duts/echo_ram/dv/dv_regress.yaml
"""
