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

"""Expected-vs-actual comparison of bus outputs.

Scoreboard
==========

Compares one cycle of DUT outputs against the model's expected outputs,
signal by signal, and raises MismatchError on the first difference. Kept
free of simulator dependencies so it can be exercised without a DUT.

Compared signals (in order):
    data            Driven(value) vs NOT_DRIVEN must match exactly
    seg_fault       fault-occurred polarity
    prot_fault      fault-occurred polarity
    physical_address
"""

from dataclasses import dataclass

from segmmu.config import PHYSICAL_ADDRESS_WIDTH
from segmmu.exceptions import MismatchError
from segmmu.models.mmu_model import BusOutputs
from segmmu.utils.bit_utils import format_hex

_COMPARED_SIGNALS = ("data_out", "seg_fault", "prot_fault", "physical_address")


def _show(signal: str, value: object) -> str:
    if signal == "physical_address":
        return format_hex(value, PHYSICAL_ADDRESS_WIDTH)
    return str(value)


@dataclass
class Scoreboard:
    """Running comparison of DUT outputs against the model.

    Attributes:
        checked: Number of cycles compared
    """

    checked: int = 0

    def check(self, cycle: int, expected: BusOutputs, actual: BusOutputs) -> None:
        """Compare one cycle.

        Args:
            cycle: Model cycle the outputs belong to
            expected: Outputs computed by the model
            actual: Outputs sampled from the DUT

        Raises:
            MismatchError: On the first signal that differs
        """
        for signal in _COMPARED_SIGNALS:
            expected_value = getattr(expected, signal)
            actual_value = getattr(actual, signal)
            if expected_value != actual_value:
                raise MismatchError(
                    f"[Cycle {cycle:5d}] {signal} mismatch: "
                    f"expected {_show(signal, expected_value)}, "
                    f"got {_show(signal, actual_value)}",
                    signal=signal,
                    expected_value=expected_value,
                    actual_value=actual_value,
                    cycle=cycle,
                )
        self.checked += 1
