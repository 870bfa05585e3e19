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

"""Structured logging for bus transactions and debugging.

Transaction Logger
==================

Provides utilities for logging bus cycles with rich context, making
debugging and waveform correlation much easier.

The ``format_*`` methods return plain strings so the model and the CLIs can
reuse them with the standard ``logging`` module outside a simulator; the
``log_*`` methods write to ``cocotb.log`` and are meant for testbench code.
"""

import cocotb

from segmmu.config import FIELD_NAMES
from segmmu.encoders.register_map import decode_register_address, decode_status
from segmmu.models.bus_arbiter import BusInputs
from segmmu.models.mmu_model import BusOutputs
from segmmu.models.register_file import SegmentDescriptor
from segmmu.mmu_types import AccessOutcome


class TransactionLogger:
    """Structured logging for segmented-MMU bus cycles.

    Provides formatted, context-rich logging for each cycle, making it
    easier to debug verification failures and correlate with waveforms.
    """

    @staticmethod
    def format_cycle(
        cycle: int,
        inputs: BusInputs,
        outputs: BusOutputs,
        outcome: AccessOutcome | None = None,
    ) -> str:
        """Format one bus cycle as a single line.

        Args:
            cycle: Current simulation cycle
            inputs: Inputs driven this cycle
            outputs: Outputs observed (or expected) this cycle
            outcome: Optional classification of the cycle

        Returns:
            e.g. ``[Cycle    12] XLATE W 0x00000003 -> 0x00000040003 PROT``
        """
        parts = [f"[Cycle {cycle:5d}]"]

        if inputs.mode_select:
            parts.append(f"XLATE {'W' if inputs.is_write else 'R'}")
            parts.append(f"0x{inputs.address:08X}")
            parts.append(f"-> 0x{outputs.physical_address:011X}")
            if outputs.seg_fault:
                parts.append("SEG")
            if outputs.prot_fault:
                parts.append("PROT")
        else:
            segment, field = decode_register_address(inputs.address)
            parts.append(f"REG   {'W' if inputs.is_write else 'R'}")
            parts.append(f"seg{segment}.{FIELD_NAMES[field]}")
            if inputs.is_write:
                parts.append(f"<- 0x{inputs.data_in:08X}")
            else:
                parts.append(f"-> {outputs.data_out}")

        if outcome is not None:
            parts.append(f"({outcome.value})")

        return " ".join(parts)

    @staticmethod
    def format_descriptor(segment: int, descriptor: SegmentDescriptor) -> str:
        """Format a descriptor with its decoded status flags."""
        return (
            f"seg{segment}: phys_base=0x{descriptor.phys_base:08X} "
            f"log_base=0x{descriptor.log_base:08X} "
            f"mask=0x{descriptor.mask:08X} "
            f"status={decode_status(descriptor.status)}"
        )

    @staticmethod
    def log_cycle(
        cycle: int,
        inputs: BusInputs,
        outputs: BusOutputs,
        outcome: AccessOutcome | None = None,
    ) -> None:
        """Log one bus cycle."""
        cocotb.log.info(TransactionLogger.format_cycle(cycle, inputs, outputs, outcome))

    @staticmethod
    def log_descriptors(cycle: int, descriptors: tuple[SegmentDescriptor, ...]) -> None:
        """Log the full register file, e.g. after a reconfiguration.

        Args:
            cycle: Current simulation cycle
            descriptors: Register file contents to show
        """
        for segment, descriptor in enumerate(descriptors):
            cocotb.log.info(
                f"[Cycle {cycle:5d}] "
                + TransactionLogger.format_descriptor(segment, descriptor)
            )

    @staticmethod
    def log_mismatch(
        signal: str,
        cycle: int,
        expected: object,
        actual: object,
    ) -> None:
        """Log hardware-model mismatch for debugging.

        Args:
            signal: Output that mismatched ("physical_address", "data", ...)
            cycle: Cycle when mismatch occurred
            expected: Expected value from the model
            actual: Actual value from hardware
        """
        cocotb.log.error(
            f"[Cycle {cycle:5d}] MISMATCH {signal}: expected={expected}, actual={actual}"
        )

    @staticmethod
    def log_coverage_summary(coverage: dict[str, int], threshold: int) -> None:
        """Log functional coverage summary.

        Args:
            coverage: Dict mapping bin name -> hit count
            threshold: Minimum required hit count
        """
        cocotb.log.info("=" * 60)
        cocotb.log.info("FUNCTIONAL COVERAGE SUMMARY")
        cocotb.log.info("=" * 60)
        for name, count in coverage.items():
            status = "✓" if count >= threshold else "✗"
            cocotb.log.info(f"  {status} {name:18s}: {count:5d} hits")
        cocotb.log.info("=" * 60)
