#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Segmented MMU reference model and cocotb verification framework.

This package provides a cycle-level Python model of a four-segment memory
translation unit (32-bit logical to 42-bit physical addresses) and a cocotb
(Coroutine-based Co-simulation Testbench) environment that checks an HDL
implementation of the unit against that model.

Package Structure
-----------------

Subpackages:
    models
        Reference model: register file, match engine, translation/fault
        logic, status updater, bus arbiter and the per-cycle ``step``

    encoders
        Register map packing and bus-cycle builders

    generators
        Constrained-random descriptor configurations and access streams

    monitors
        Scoreboard and DUT output monitor

    cocotb_tests
        Directed and random cocotb tests against an HDL DUT

    utils
        Bit-field helpers, validation, structured logging, coverage

Modules:
    config
        Central configuration constants (widths, masks, register map, etc.)

    mmu_types
        Type aliases for type safety (LogicalAddress, SegmentIndex, etc.)

    exceptions
        Custom exception hierarchy for misuse and verification failures

    run_sim
        Build an HDL DUT and run the cocotb tests (``segmmu-sim``)

    trace
        Replay a stimulus file through the model (``segmmu-trace``)

Quick Start
-----------
Run the cocotb regression against a VHDL implementation::

    segmmu-sim mmu.vhd --hide

Replay a stimulus file through the model::

    segmmu-trace stimulus.txt
"""

# Models are imported first; encoders depend on the bus arbiter model
from segmmu.models import (
    BusInputs,
    BusOutputs,
    SegmentDescriptor,
    SegmentedMMU,
    step,
)
from segmmu.mmu_types import AccessOutcome, LogicalAddress, PhysicalAddress
from segmmu.config import FAULT_SENTINEL, MASK32, MASK42

__all__ = [
    "BusInputs",
    "BusOutputs",
    "SegmentDescriptor",
    "SegmentedMMU",
    "step",
    "AccessOutcome",
    "LogicalAddress",
    "PhysicalAddress",
    "FAULT_SENTINEL",
    "MASK32",
    "MASK42",
]
