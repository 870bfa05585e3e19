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

"""DUT output monitor coroutine.

Bus Monitor
===========

Runs concurrently with a test, sampling the DUT's outputs once per cycle
and comparing them against the model's expectations queued by the
TransactionExecutor. Sampling point depends on the DUT:

    outputs_registered=True   after the rising edge that consumed the inputs
    outputs_registered=False  in the read-only phase after inputs are driven
                              (before that rising edge)
"""

from collections import deque
from typing import TYPE_CHECKING

from cocotb.triggers import FallingEdge, ReadOnly, RisingEdge

from segmmu.models.bus_arbiter import BusInputs
from segmmu.models.mmu_model import BusOutputs
from segmmu.monitors.scoreboard import Scoreboard
from segmmu.utils.transaction_logger import TransactionLogger
from segmmu.exceptions import MismatchError

if TYPE_CHECKING:
    from segmmu.cocotb_tests.test_helpers import DUTInterface

ExpectedCycle = tuple[int, BusInputs, BusOutputs]
"""(cycle, inputs, expected outputs) queued by the executor."""


async def bus_monitor(
    dut_if: "DUTInterface",
    scoreboard: Scoreboard,
    expected_queue: deque[ExpectedCycle],
) -> None:
    """Compare DUT outputs against queued expectations forever.

    Args:
        dut_if: DUT interface to sample
        scoreboard: Scoreboard doing the comparison
        expected_queue: Expectations appended by the executor, oldest first

    Raises:
        MismatchError: If the DUT disagrees with the model
    """
    registered = dut_if.signal_paths.outputs_registered
    while True:
        if registered:
            await RisingEdge(dut_if.clock)
        else:
            await FallingEdge(dut_if.clock)
        await ReadOnly()

        if not expected_queue:
            continue

        cycle, inputs, expected = expected_queue.popleft()
        actual = dut_if.sample_outputs(cycle, inputs)
        try:
            scoreboard.check(cycle, expected, actual)
        except MismatchError as e:
            TransactionLogger.log_mismatch(
                e.signal or "?", cycle, e.expected_value, e.actual_value
            )
            raise
