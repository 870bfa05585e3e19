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

"""Transaction execution helper that encapsulates the execute-and-model pattern.

Transaction Executor
====================

This module provides the TransactionExecutor class that encapsulates the
common pattern for executing bus cycles and modeling their effects:

1. Wait for the falling edge (inputs change away from the sampling edge)
2. Classify the cycle for coverage
3. Compute the expected outputs with the model
4. Queue the expectation for the bus monitor
5. Drive the inputs to the DUT

Because the model and the DUT consume exactly the same inputs, every
register write, status update and read-back is checked cycle by cycle by the
monitor without any test-specific bookkeeping.

Usage:
    from segmmu.cocotb_tests.transaction_executor import TransactionExecutor

    executor = TransactionExecutor(dut_if)
    cocotb.start_soon(executor.monitor())

    # Load segment 0 and translate through it
    await executor.load_descriptor(0, descriptor)
    outputs = await executor.translate(0x123)

    # Wait for the monitor to check everything queued so far
    await executor.drain()
"""

from collections import deque

import cocotb
from cocotb.clock import Clock
from cocotb.triggers import ClockCycles, FallingEdge

from segmmu.config import FIELDS_PER_SEGMENT, NUM_SEGMENTS
from segmmu.encoders.register_map import (
    descriptor_write_sequence,
    register_read,
    register_write,
    translate_access,
)
from segmmu.exceptions import MismatchError, RegisterAccessError
from segmmu.models.bus_arbiter import BusInputs, Driven
from segmmu.models.match_engine import match_segment
from segmmu.models.mmu_model import BusOutputs, SegmentedMMU, classify_access
from segmmu.models.register_file import SegmentDescriptor, reset_descriptor
from segmmu.monitors.monitors import ExpectedCycle, bus_monitor
from segmmu.monitors.scoreboard import Scoreboard
from segmmu.utils.coverage import TestStatistics
from segmmu.utils.transaction_logger import TransactionLogger
from segmmu.cocotb_tests.test_common import TestConfig
from segmmu.cocotb_tests.test_helpers import DUTInterface

DRAIN_CYCLES = 3


class TransactionExecutor:
    """Encapsulates the execute-and-model pattern for single bus cycles.

    The executor owns the golden model, the expectation queue and the
    scoreboard, so tests only describe the stimulus.

    Attributes:
        dut_if: DUT interface for signal access
        model: Golden model driven in lockstep with the DUT
        stats: Coverage statistics for executed cycles
        scoreboard: Comparison state used by the monitor
        expected_queue: Expectations not yet checked by the monitor
        log_cycles: If True, log every cycle with TransactionLogger
    """

    def __init__(
        self,
        dut_if: DUTInterface,
        model: SegmentedMMU | None = None,
        stats: TestStatistics | None = None,
        log_cycles: bool = False,
    ) -> None:
        """Initialize the transaction executor.

        Args:
            dut_if: DUT interface for signal access
            model: Golden model (a model in reset state if None)
            stats: Coverage statistics (a fresh tracker if None)
            log_cycles: If True, log every cycle for debugging
        """
        self.dut_if = dut_if
        self.model = model or SegmentedMMU()
        self.stats = stats or TestStatistics()
        self.scoreboard = Scoreboard()
        self.expected_queue: deque[ExpectedCycle] = deque()
        self.log_cycles = log_cycles

    async def monitor(self) -> None:
        """Monitor coroutine for this executor; start it with cocotb.start_soon."""
        await bus_monitor(self.dut_if, self.scoreboard, self.expected_queue)

    async def execute(self, inputs: BusInputs, log: bool = False) -> BusOutputs:
        """Execute one bus cycle on the DUT and the model.

        Args:
            inputs: Inputs for this cycle
            log: If True, log this cycle even when log_cycles is off

        Returns:
            The model's outputs for this cycle (the monitor checks the DUT's)
        """
        await FallingEdge(self.dut_if.clock)

        cycle = self.model.cycle
        descriptors = self.model.descriptors
        outcome = classify_access(descriptors, inputs)
        segment = match_segment(descriptors, inputs.address) if inputs.mode_select else None

        expected = self.model.clock(inputs)
        self.stats.record(outcome, segment)
        self.expected_queue.append((cycle, inputs, expected))
        self.dut_if.drive(inputs)

        if log or self.log_cycles:
            TransactionLogger.log_cycle(cycle, inputs, expected, outcome)
        return expected

    async def write_register(self, segment: int, field: int, value: int) -> BusOutputs:
        return await self.execute(register_write(segment, field, value))

    async def read_register(self, segment: int, field: int) -> int:
        """Read one field; returns the model's value (the monitor checks the DUT)."""
        outputs = await self.execute(register_read(segment, field))
        if not isinstance(outputs.data_out, Driven):
            raise RegisterAccessError(
                "register read did not drive the data channel",
                segment=segment,
                field=field,
            )
        return outputs.data_out.value

    async def translate(self, address: int, is_write: bool = False) -> BusOutputs:
        return await self.execute(translate_access(address, is_write))

    async def load_descriptor(self, segment: int, descriptor: SegmentDescriptor) -> None:
        """Load a descriptor through four register-write cycles."""
        for inputs in descriptor_write_sequence(segment, descriptor):
            await self.execute(inputs)

    async def read_descriptor(self, segment: int) -> SegmentDescriptor:
        """Read a descriptor back through four register-read cycles."""
        fields = [
            await self.read_register(segment, field)
            for field in range(FIELDS_PER_SEGMENT)
        ]
        return SegmentDescriptor(*fields)

    async def initialize_descriptors(self) -> None:
        """Load the reset descriptors into every slot through the bus.

        The DUT's power-up register contents are unspecified, so the model's
        reset contents are written over them before any translation.
        """
        for segment in range(NUM_SEGMENTS):
            await self.load_descriptor(segment, reset_descriptor(segment))

    async def drain(self) -> None:
        """Let the monitor check every queued expectation.

        Raises:
            MismatchError: If expectations remain unchecked afterwards
        """
        await FallingEdge(self.dut_if.clock)
        self.dut_if.drive_idle()
        await ClockCycles(self.dut_if.clock, DRAIN_CYCLES)
        if self.expected_queue:
            cycle = self.expected_queue[0][0]
            raise MismatchError(
                f"{len(self.expected_queue)} expected cycles were never sampled",
                cycle=cycle,
            )
        cocotb.log.info(f"Scoreboard checked {self.scoreboard.checked} cycles")


async def start_executor(dut: object, config: TestConfig) -> TransactionExecutor:
    """Start clock and monitor, settle the DUT and load its reset descriptors.

    Args:
        dut: cocotb DUT handle
        config: Test configuration

    Returns:
        A ready executor whose model and DUT hold identical reset state
    """
    dut_if = DUTInterface(dut, config.signal_paths)
    executor = TransactionExecutor(dut_if, log_cycles=config.use_structured_logging)

    dut_if.drive_idle()
    cocotb.start_soon(Clock(dut_if.clock, config.clock_period_ns, unit="ns").start())
    await dut_if.idle_cycles(config.reset_cycles)

    cocotb.start_soon(executor.monitor())
    await executor.initialize_descriptors()
    return executor
