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

"""Cycle-level model of the segmented memory-translation unit.

MMU Model
=========

The unit is a single synchronous clock domain. One call to ``step`` is one
clock cycle:

    1. The bus arbiter decodes the inputs into register-access or
       translate mode.
    2. Register access: read or stage a write of one descriptor field.
       Translate: match engine, then translation/fault logic, then the
       status updater stages the U/D/F update.
    3. All combinational work above reads only the pre-edge descriptors.
    4. The clock edge commits the single staged write.

``step`` is a pure function ``(state, inputs) -> (new_state, outputs)``;
``SegmentedMMU`` wraps it for callers that prefer a stateful object, and
adds the descriptor-level helpers a CPU/OS model would use.

Outputs Per Mode:

    ┌───────────────────┬───────────┬───────────────────┬───────────┐
    │ Cycle             │ data_out  │ physical_address  │ faults    │
    ├───────────────────┼───────────┼───────────────────┼───────────┤
    │ register read     │ Driven(v) │ FAULT_SENTINEL    │ none      │
    │ register write    │ NOT_DRIVEN│ FAULT_SENTINEL    │ none      │
    │ translate, hit    │ NOT_DRIVEN│ merged address    │ prot?     │
    │ translate, miss   │ NOT_DRIVEN│ FAULT_SENTINEL    │ seg       │
    └───────────────────┴───────────┴───────────────────┴───────────┘
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from segmmu.config import (
    FAULT_SENTINEL,
    FIELD_STATUS,
    FIELDS_PER_SEGMENT,
    STATUS_STICKY_FLAGS,
)
from segmmu.encoders.register_map import (
    descriptor_write_sequence,
    register_read,
    register_write,
    translate_access,
)
from segmmu.exceptions import RegisterAccessError
from segmmu.mmu_types import AccessOutcome
from segmmu.models.bus_arbiter import (
    NOT_DRIVEN,
    BusInputs,
    BusMode,
    DataBus,
    Driven,
    decode_request,
    drive_data_bus,
)
from segmmu.models.register_file import SegmentDescriptor, SegmentRegisterFile
from segmmu.models.status_updater import apply_status_update
from segmmu.models.translation import translate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BusOutputs:
    """Pin-level outputs for one cycle.

    Fault flags use fault-occurred polarity (True = fault). The reference
    hardware drives them active-low; see ``active_low_flags``.

    Attributes:
        data_out: Data channel as driven by the unit
        physical_address: 42-bit address or FAULT_SENTINEL
        seg_fault: Segmentation fault occurred
        prot_fault: Protection fault occurred
    """

    data_out: DataBus
    physical_address: int
    seg_fault: bool
    prot_fault: bool

    def active_low_flags(self) -> tuple[int, int]:
        """Return (seg_fault_n, prot_fault_n) as the pins would show them."""
        return (0 if self.seg_fault else 1, 0 if self.prot_fault else 1)


IDLE_OUTPUTS = BusOutputs(NOT_DRIVEN, FAULT_SENTINEL, False, False)
"""Outputs of a register-access cycle that leaves the data channel released."""


@dataclass(frozen=True)
class MMUState:
    """Committed state between clock edges.

    Attributes:
        descriptors: The four committed descriptors
        cycle: Number of clock edges since reset
    """

    descriptors: tuple[SegmentDescriptor, ...]
    cycle: int = 0


def reset_state() -> MMUState:
    """State of the unit right after reset: no descriptor configured."""
    return MMUState(SegmentRegisterFile().current)


def step(state: MMUState, inputs: BusInputs) -> tuple[MMUState, BusOutputs]:
    """Advance the unit by one clock cycle.

    Args:
        state: Committed state before the clock edge
        inputs: Pin-level inputs sampled on this edge

    Returns:
        (new_state, outputs) where outputs depend only on ``state`` and
        ``inputs`` and new_state has the cycle's single write committed
    """
    register_file = SegmentRegisterFile(state.descriptors)
    request = decode_request(inputs)
    data_out = drive_data_bus(request, register_file)

    if request.mode is BusMode.TRANSLATE:
        result = translate(register_file.current, request.address, request.is_write)
        apply_status_update(register_file, result, request.is_write)
        outputs = BusOutputs(
            data_out, result.physical_address, result.seg_fault, result.prot_fault
        )
    else:
        outputs = replace(IDLE_OUTPUTS, data_out=data_out)

    return MMUState(register_file.commit(), state.cycle + 1), outputs


def classify_access(
    descriptors: Sequence[SegmentDescriptor], inputs: BusInputs
) -> AccessOutcome:
    """Name what a cycle does against the given pre-edge descriptors."""
    request = decode_request(inputs)
    if request.mode is BusMode.REGISTER_ACCESS:
        if request.is_write:
            return AccessOutcome.REGISTER_WRITE
        return AccessOutcome.REGISTER_READ

    result = translate(descriptors, request.address, request.is_write)
    if not result.seg_fault:
        if result.prot_fault:
            return AccessOutcome.PROTECTION_FAULT
        return AccessOutcome.TRANSLATED
    if result.segment is not None:
        return AccessOutcome.DISABLED
    if result.vector:
        return AccessOutcome.OVERLAP
    return AccessOutcome.NO_MATCH


class SegmentedMMU:
    """Stateful wrapper around ``step`` with descriptor-level helpers.

    Every helper goes through ``clock``, so loading a descriptor costs four
    cycles and reading one back costs four more, exactly as on the bus.

    Attributes:
        state: Committed state after the most recent clock edge
    """

    def __init__(self, descriptors: Iterable[SegmentDescriptor] | None = None) -> None:
        """Initialize the unit.

        Args:
            descriptors: Initial register file contents (reset state if None)
        """
        if descriptors is None:
            self.state = reset_state()
        else:
            self.state = MMUState(SegmentRegisterFile(descriptors).current)

    @property
    def descriptors(self) -> tuple[SegmentDescriptor, ...]:
        return self.state.descriptors

    @property
    def cycle(self) -> int:
        return self.state.cycle

    def reset(self) -> None:
        """Return to the reset state (reset descriptors, cycle 0)."""
        self.state = reset_state()
        logger.info("MMU reset")

    def clock(self, inputs: BusInputs) -> BusOutputs:
        """Apply one cycle of inputs and return that cycle's outputs."""
        cycle = self.state.cycle
        self.state, outputs = step(self.state, inputs)
        logger.debug(
            "[Cycle %5d] addr=0x%08X we=%d mode=%d din=0x%08X -> "
            "dout=%s paddr=0x%011X seg_fault=%d prot_fault=%d",
            cycle,
            inputs.address,
            inputs.is_write,
            inputs.mode_select,
            inputs.data_in,
            outputs.data_out,
            outputs.physical_address,
            outputs.seg_fault,
            outputs.prot_fault,
        )
        return outputs

    def write_register(self, segment: int, field: int, value: int) -> BusOutputs:
        return self.clock(register_write(segment, field, value))

    def read_register(self, segment: int, field: int) -> int:
        """Read one field through the bus and return the driven value."""
        outputs = self.clock(register_read(segment, field))
        if not isinstance(outputs.data_out, Driven):
            raise RegisterAccessError(
                "register read did not drive the data channel",
                segment=segment,
                field=field,
            )
        return outputs.data_out.value

    def translate(self, address: int, is_write: bool = False) -> BusOutputs:
        return self.clock(translate_access(address, is_write))

    def load_descriptor(self, segment: int, descriptor: SegmentDescriptor) -> None:
        """Load a full descriptor through four register-write cycles."""
        for inputs in descriptor_write_sequence(segment, descriptor):
            self.clock(inputs)
        logger.info(
            "Loaded segment %d: phys_base=0x%08X log_base=0x%08X "
            "mask=0x%08X status=0x%08X",
            segment,
            *descriptor.fields(),
        )

    def read_descriptor(self, segment: int) -> SegmentDescriptor:
        """Fetch a full descriptor through four register-read cycles."""
        return SegmentDescriptor(
            *(self.read_register(segment, field) for field in range(FIELDS_PER_SEGMENT))
        )

    def clear_status_flags(self, segment: int, flags: int = STATUS_STICKY_FLAGS) -> int:
        """Clear software-owned sticky flags with a read-modify-write.

        Args:
            segment: Descriptor slot (0-3)
            flags: Status bits to clear (U, D and F by default)

        Returns:
            The status word written back
        """
        status = self.read_register(segment, FIELD_STATUS) & ~flags
        self.write_register(segment, FIELD_STATUS, status)
        return status
