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

"""Register map encoding for the segment descriptor interface.

Register Map
============

During register access the low four address bits select a descriptor field:

    address[3:2] = segment index, address[1:0] = field index

    ┌─────────┬───────────┬───────────┬───────────┬───────────┐
    │ Segment │ phys_base │ log_base  │ mask      │ status    │
    ├─────────┼───────────┼───────────┼───────────┼───────────┤
    │    0    │   0x0     │   0x1     │   0x2     │   0x3     │
    │    1    │   0x4     │   0x5     │   0x6     │   0x7     │
    │    2    │   0x8     │   0x9     │   0xA     │   0xB     │
    │    3    │   0xC     │   0xD     │   0xE     │   0xF     │
    └─────────┴───────────┴───────────┴───────────┴───────────┘

Status word:

    [31]=U  [30]=D  [29]=WP  [28]=F  [27]=E  [26:0]=opaque index

This module also builds the bus cycles an external descriptor loader (a
CPU/OS model or a testbench) issues. There is no privileged loading
channel; descriptors are loaded field by field through register writes.
"""

from dataclasses import dataclass

from segmmu.config import (
    FIELDS_PER_SEGMENT,
    REGISTER_FIELD_SELECT_MASK,
    REGISTER_SEGMENT_SELECT_MASK,
    REGISTER_SEGMENT_SELECT_SHIFT,
    STATUS_DIRTY,
    STATUS_ENABLED,
    STATUS_FAULT,
    STATUS_INDEX_MASK,
    STATUS_USED,
    STATUS_WRITE_PROTECT,
)
from segmmu.models.bus_arbiter import BusInputs
from segmmu.models.register_file import SegmentDescriptor, check_register_index
from segmmu.utils.bit_utils import ensure_width


def register_address(segment: int, field: int) -> int:
    """Pack a (segment, field) pair into a register-access address.

    Example:
        >>> register_address(2, 3)
        11
    """
    check_register_index(segment, field)
    return (segment << REGISTER_SEGMENT_SELECT_SHIFT) | field


def decode_register_address(address: int) -> tuple[int, int]:
    """Return (segment, field) selected by the low four address bits."""
    segment = (address >> REGISTER_SEGMENT_SELECT_SHIFT) & REGISTER_SEGMENT_SELECT_MASK
    return segment, address & REGISTER_FIELD_SELECT_MASK


@dataclass(frozen=True)
class StatusFields:
    """Decoded status word."""

    used: bool = False
    dirty: bool = False
    write_protect: bool = False
    fault: bool = False
    enabled: bool = False
    index: int = 0

    def __str__(self) -> str:
        flags = [
            name
            for name, value in (
                ("U", self.used),
                ("D", self.dirty),
                ("WP", self.write_protect),
                ("F", self.fault),
                ("E", self.enabled),
            )
            if value
        ]
        return f"[{' '.join(flags) or '-'}] idx=0x{self.index:07X}"


def encode_status(
    *,
    used: bool = False,
    dirty: bool = False,
    write_protect: bool = False,
    fault: bool = False,
    enabled: bool = False,
    index: int = 0,
) -> int:
    """Build a status word from its fields.

    Example:
        >>> hex(encode_status(enabled=True, write_protect=True))
        '0x28000000'
    """
    ensure_width(index, 27, "status index")
    status = index
    if used:
        status |= STATUS_USED
    if dirty:
        status |= STATUS_DIRTY
    if write_protect:
        status |= STATUS_WRITE_PROTECT
    if fault:
        status |= STATUS_FAULT
    if enabled:
        status |= STATUS_ENABLED
    return status


def decode_status(status: int) -> StatusFields:
    """Split a status word into its fields."""
    return StatusFields(
        used=bool(status & STATUS_USED),
        dirty=bool(status & STATUS_DIRTY),
        write_protect=bool(status & STATUS_WRITE_PROTECT),
        fault=bool(status & STATUS_FAULT),
        enabled=bool(status & STATUS_ENABLED),
        index=status & STATUS_INDEX_MASK,
    )


def register_read(segment: int, field: int) -> BusInputs:
    """Bus cycle that reads one descriptor field."""
    return BusInputs(register_address(segment, field), is_write=False, mode_select=False)


def register_write(segment: int, field: int, value: int) -> BusInputs:
    """Bus cycle that writes one descriptor field."""
    return BusInputs(
        register_address(segment, field),
        is_write=True,
        mode_select=False,
        data_in=value,
    )


def translate_access(address: int, is_write: bool = False) -> BusInputs:
    """Bus cycle that translates a logical address."""
    return BusInputs(address, is_write=is_write, mode_select=True)


def descriptor_write_sequence(
    segment: int, descriptor: SegmentDescriptor
) -> list[BusInputs]:
    """Register writes that load a whole descriptor, one field per cycle."""
    return [
        register_write(segment, field, value)
        for field, value in enumerate(descriptor.fields())
    ]


def descriptor_read_sequence(segment: int) -> list[BusInputs]:
    """Register reads that fetch a whole descriptor, one field per cycle."""
    return [register_read(segment, field) for field in range(FIELDS_PER_SEGMENT)]
