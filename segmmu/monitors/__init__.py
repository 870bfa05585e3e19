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

"""Runtime verification monitors for DUT output checking.

This package contains the scoreboard and the monitor coroutine that runs
concurrently with tests, continuously checking that DUT outputs match the
model's expected values.

Monitors
--------
scoreboard
    Scoreboard compares one cycle of outputs (data channel drive state,
    both fault flags, physical address) and raises MismatchError on the
    first difference.

monitors
    bus_monitor coroutine: samples the DUT once per cycle and feeds the
    scoreboard from the executor's expectation queue.

How Monitors Work
-----------------
1. Test computes the expected outputs with the model
2. Test queues the expectation and drives the inputs to the DUT
3. Monitor samples the DUT outputs at the configured point in the cycle
4. Monitor pops the oldest expectation and compares
5. Scoreboard raises MismatchError on a difference

Usage
-----
The monitor is started by test infrastructure::

    from segmmu.monitors.monitors import bus_monitor

    cocotb.start_soon(bus_monitor(dut_if, scoreboard, expected_queue))
"""

from segmmu.monitors.scoreboard import Scoreboard

# Note: bus_monitor is not imported at package level so the scoreboard can be
# used without a simulator. Import directly: from segmmu.monitors.monitors import bus_monitor

__all__ = [
    "Scoreboard",
]
