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

"""Bus arbitration between register access and translation.

Bus Arbiter
===========

Every cycle the mode-select input picks exactly one of two modes:

    ┌───────────────┬──────────┬───────────────────────────────────────────┐
    │ mode_select   │ is_write │ Action                                    │
    ├───────────────┼──────────┼───────────────────────────────────────────┤
    │ 0 (register)  │ 0        │ read field, unit drives the data channel  │
    │ 0 (register)  │ 1        │ write field from data_in                  │
    │ 1 (translate) │ x        │ match, translate, update status           │
    └───────────────┴──────────┴───────────────────────────────────────────┘

There is no persistent control state; the mode is re-selected from the
inputs on every cycle.

The shared data channel is modeled as an explicit tagged value instead of
electrical tri-state: ``Driven(value)`` on register-read cycles and
``NOT_DRIVEN`` on every other cycle.
"""

from dataclasses import dataclass
from enum import Enum

from segmmu.config import (
    DATA_WIDTH,
    LOGICAL_ADDRESS_WIDTH,
    REGISTER_FIELD_SELECT_MASK,
    REGISTER_SEGMENT_SELECT_MASK,
    REGISTER_SEGMENT_SELECT_SHIFT,
)
from segmmu.models.register_file import SegmentRegisterFile
from segmmu.utils.bit_utils import ensure_width


class BusMode(Enum):
    """Mode selected for one cycle."""

    REGISTER_ACCESS = 0
    TRANSLATE = 1


@dataclass(frozen=True)
class Driven:
    """The unit drives the data channel with a value."""

    value: int

    def __str__(self) -> str:
        return f"0x{self.value:08X}"


@dataclass(frozen=True)
class NotDriven:
    """The unit leaves the data channel to other parties (high impedance)."""

    def __str__(self) -> str:
        return "Z"


NOT_DRIVEN = NotDriven()

DataBus = Driven | NotDriven


@dataclass(frozen=True)
class BusInputs:
    """Pin-level inputs sampled on one clock edge.

    Attributes:
        address: 32-bit logical address
        is_write: Access type (True = write)
        mode_select: False = register access, True = translate
        data_in: Data channel value, only meaningful on register writes
    """

    address: int
    is_write: bool = False
    mode_select: bool = False
    data_in: int = 0

    def __post_init__(self) -> None:
        ensure_width(self.address, LOGICAL_ADDRESS_WIDTH, "address")
        ensure_width(self.data_in, DATA_WIDTH, "data_in")


@dataclass(frozen=True)
class AccessRequest:
    """A bus cycle decoded by the arbiter.

    Attributes:
        address: 32-bit logical address (packed register address in
            register-access mode)
        is_write: True for a write
        mode: Mode selected for this cycle
        data_in: Value on the data channel (meaningful for register writes)
    """

    address: int
    is_write: bool
    mode: BusMode
    data_in: int = 0

    @property
    def segment(self) -> int:
        """Segment select, address bits [3:2]."""
        return (self.address >> REGISTER_SEGMENT_SELECT_SHIFT) & (
            REGISTER_SEGMENT_SELECT_MASK
        )

    @property
    def field(self) -> int:
        """Field select, address bits [1:0]."""
        return self.address & REGISTER_FIELD_SELECT_MASK


def select_mode(mode_select: bool) -> BusMode:
    return BusMode.TRANSLATE if mode_select else BusMode.REGISTER_ACCESS


def decode_request(inputs: BusInputs) -> AccessRequest:
    """Decode pin-level inputs into an AccessRequest."""
    return AccessRequest(
        inputs.address, inputs.is_write, select_mode(inputs.mode_select), inputs.data_in
    )


def drive_data_bus(request: AccessRequest, register_file: SegmentRegisterFile) -> DataBus:
    """Perform a register access and decide who drives the data channel.

    Register writes are staged into the register file; register reads return
    the committed field value on the channel. Translate-mode cycles never
    drive the channel.

    Args:
        request: Decoded bus cycle
        register_file: Register file for this cycle

    Returns:
        Driven(value) on register reads, NOT_DRIVEN otherwise
    """
    if request.mode is not BusMode.REGISTER_ACCESS:
        return NOT_DRIVEN
    if request.is_write:
        register_file.write(request.segment, request.field, request.data_in)
        return NOT_DRIVEN
    return Driven(register_file.read(request.segment, request.field))
