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

"""Central configuration for the segmented MMU model and testbench.

Configuration
=============

This module contains all configuration constants used throughout the model
and the verification environment. Centralizing these values keeps bit
positions, widths and the register map in one place, so the model, the
encoders and the testbench cannot drift apart.

Organization:
    Constants are organized into logical sections:
    - Address Configuration (logical/physical widths, offset granularity)
    - Data Type Masks (10-bit, 22-bit, 32-bit, 42-bit)
    - Segment Register File Geometry (segment count, field indices)
    - Status Word Layout (U, D, WP, F, E bits and the opaque index field)
    - Fault Sentinel
    - DUT Signal Path Configuration
    - Test Configuration Defaults
    - Simulation Tooling Defaults

Usage:
    Import specific constants as needed:
    >>> from segmmu.config import MASK32, FAULT_SENTINEL
    >>> physical = FAULT_SENTINEL if fault else merged & MASK42

    Or import the dataclass for signal path configuration:
    >>> from segmmu.config import DUTSignalPaths
    >>> custom_paths = DUTSignalPaths(clock="i_clk", data="io_data")

Customization:
    To adapt the testbench for a different HDL implementation of the unit:
    1. Adjust DUTSignalPaths for different port names or fault polarity
    2. Change test defaults (NUM_LOOPS, coverage threshold, etc.)
"""

from dataclasses import dataclass
from typing import Final

# ============================================================================
# Address Configuration
# ============================================================================

LOGICAL_ADDRESS_WIDTH: Final[int] = 32
"""Width of the logical (requester-side) address in bits."""

PHYSICAL_ADDRESS_WIDTH: Final[int] = 42
"""Width of the translated physical address in bits."""

DATA_WIDTH: Final[int] = 32
"""Width of the shared data channel and of every descriptor field."""

OFFSET_BITS: Final[int] = 10
"""Number of low address bits passed through untranslated (2^10 granularity)."""

SEGMENT_GRANULARITY: Final[int] = 1 << OFFSET_BITS
"""Addressable units per segment frame (1024)."""

MERGE_BITS: Final[int] = 22
"""Number of base/mask bits merged into physical address bits [31:10]."""

PHYSICAL_HIGH_SHIFT: Final[int] = 32
"""Bit position of the phys_base[31:22] field inside the physical address."""

# ============================================================================
# Data Type Masks
# ============================================================================

MASK32: Final[int] = (1 << 32) - 1
"""32-bit mask (0xFFFF_FFFF)."""

MASK42: Final[int] = (1 << PHYSICAL_ADDRESS_WIDTH) - 1
"""42-bit mask for physical addresses (0x3FF_FFFF_FFFF)."""

OFFSET_MASK: Final[int] = SEGMENT_GRANULARITY - 1
"""Mask for the intra-segment offset, bits [9:0] (0x3FF)."""

MATCH_MASK: Final[int] = MASK32 & ~OFFSET_MASK
"""Mask for the bits that take part in matching, bits [31:10] (0xFFFF_FC00)."""

MERGE_MASK: Final[int] = (1 << MERGE_BITS) - 1
"""Mask for the merged base bits, bits [21:0] (0x3F_FFFF)."""

# ============================================================================
# Segment Register File Geometry
# ============================================================================

NUM_SEGMENTS: Final[int] = 4
"""Number of segment descriptor slots (fixed)."""

FIELDS_PER_SEGMENT: Final[int] = 4
"""Number of 32-bit fields in each descriptor."""

FIELD_PHYS_BASE: Final[int] = 0
"""Field index of the physical frame base."""

FIELD_LOG_BASE: Final[int] = 1
"""Field index of the logical frame base."""

FIELD_MASK: Final[int] = 2
"""Field index of the match/merge mask."""

FIELD_STATUS: Final[int] = 3
"""Field index of the status word."""

FIELD_NAMES: Final[tuple[str, ...]] = ("phys_base", "log_base", "mask", "status")
"""Descriptor field names, indexed by field number."""

REGISTER_FIELD_SELECT_MASK: Final[int] = 0x3
"""Address bits [1:0] select the descriptor field during register access."""

REGISTER_SEGMENT_SELECT_SHIFT: Final[int] = 2
"""Address bits [3:2] select the descriptor during register access."""

REGISTER_SEGMENT_SELECT_MASK: Final[int] = 0x3
"""Mask applied after shifting to extract the segment select."""

# ============================================================================
# Status Word Layout
# ============================================================================

STATUS_USED_BIT: Final[int] = 31
"""U: set by the unit on every successful translation."""

STATUS_DIRTY_BIT: Final[int] = 30
"""D: set by the unit on every successful write translation."""

STATUS_WRITE_PROTECT_BIT: Final[int] = 29
"""WP: owned by software, never modified by the unit."""

STATUS_FAULT_BIT: Final[int] = 28
"""F: set by the unit when a write hits a write-protected segment."""

STATUS_ENABLED_BIT: Final[int] = 27
"""E: owned by software, never modified by the unit."""

STATUS_USED: Final[int] = 1 << STATUS_USED_BIT
STATUS_DIRTY: Final[int] = 1 << STATUS_DIRTY_BIT
STATUS_WRITE_PROTECT: Final[int] = 1 << STATUS_WRITE_PROTECT_BIT
STATUS_FAULT: Final[int] = 1 << STATUS_FAULT_BIT
STATUS_ENABLED: Final[int] = 1 << STATUS_ENABLED_BIT

STATUS_STICKY_FLAGS: Final[int] = STATUS_USED | STATUS_DIRTY | STATUS_FAULT
"""Flags the unit may set but only software may clear."""

STATUS_INDEX_MASK: Final[int] = (1 << STATUS_ENABLED_BIT) - 1
"""Opaque index field, bits [26:0], never interpreted by the unit."""

# ============================================================================
# Fault Sentinel
# ============================================================================

FAULT_SENTINEL: Final[int] = 0x3FFDEADBEEF
"""Physical address driven on any fault and on every non-translate cycle."""

# ============================================================================
# DUT Signal Path Configuration
# ============================================================================


@dataclass
class DUTSignalPaths:
    """Configurable names of the DUT's top-level ports.

    This allows the testbench to adapt to different HDL implementations of
    the unit without changing test code. Override these names if your DUT
    uses a different port naming convention.

    Polarity:
        The reference implementation reports faults active-low (a '1' on
        the fault pins means "no fault"). The model always uses
        fault-occurred polarity; ``faults_active_low`` tells DUTInterface
        whether to invert when sampling.

    Output Timing:
        When ``outputs_registered`` is True the DUT's outputs are sampled
        after the rising edge that consumed the inputs; otherwise they are
        sampled combinationally just before that edge.

        >>> custom_paths = DUTSignalPaths(
        ...     clock="i_clk",
        ...     physical_address="o_paddr",
        ...     faults_active_low=False,
        ... )
        >>> dut_if = DUTInterface(dut, signal_paths=custom_paths)
    """

    clock: str = "clk"
    """Clock input."""

    address: str = "addr"
    """32-bit logical address input."""

    write_enable: str = "rw"
    """Access type input ('1' = write)."""

    mode_select: str = "mode"
    """Mode select input ('0' = register access, '1' = translate)."""

    data: str = "data"
    """32-bit bidirectional data channel."""

    physical_address: str = "phys_addr"
    """42-bit physical address output."""

    seg_fault: str = "seg_fault"
    """Segmentation fault flag output."""

    prot_fault: str = "prot_fault"
    """Protection fault flag output."""

    faults_active_low: bool = True
    """True if the fault pins read '1' when no fault occurred."""

    outputs_registered: bool = True
    """True if outputs change on the clock edge rather than combinationally."""


# ============================================================================
# Test Configuration Defaults
# ============================================================================

DEFAULT_NUM_TEST_LOOPS: Final[int] = 4000
"""Default number of random bus cycles in the random regression."""

DEFAULT_MIN_COVERAGE_COUNT: Final[int] = 20
"""Default minimum hit count per coverage bin."""

DEFAULT_RECONFIGURE_INTERVAL: Final[int] = 64
"""Default number of accesses between random descriptor reconfigurations."""

DEFAULT_CLOCK_PERIOD_NS: Final[int] = 10
"""Default clock period in nanoseconds."""

DEFAULT_RESET_CYCLES: Final[int] = 2
"""Default number of idle cycles driven before the first transaction."""

# ============================================================================
# Simulation Tooling Defaults
# ============================================================================

DEFAULT_SIMULATOR: Final[str] = "ghdl"
"""Default simulator for the cocotb runner."""

DEFAULT_HDL_TOPLEVEL: Final[str] = "mmu"
"""Default HDL top-level entity name."""

DEFAULT_STOP_TIME: Final[str] = "1000us"
"""Default simulation stop time passed to GHDL."""

DEFAULT_WAVEFORM_VIEWER: Final[str] = "gtkwave"
"""Default waveform viewer executable."""

VHDL_STANDARD_ARGS: Final[tuple[str, ...]] = ("--std=08",)
"""GHDL analysis/elaboration flags (VHDL-2008)."""

COCOTB_TEST_MODULES: Final[tuple[str, ...]] = (
    "segmmu.cocotb_tests.test_mmu_directed",
    "segmmu.cocotb_tests.test_mmu_random",
)
"""cocotb test modules run by the simulation runner."""
