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

"""Software model of the segment descriptor register file.

Segment Register File
=====================

The unit owns exactly four segment descriptors. Each descriptor is four
32-bit words, addressed by (segment index, field index):

    ┌───────┬───────────┬──────────────────────────────────────────────┐
    │ Field │ Name      │ Meaning                                      │
    ├───────┼───────────┼──────────────────────────────────────────────┤
    │   0   │ phys_base │ Physical frame base                          │
    │   1   │ log_base  │ Logical frame base                           │
    │   2   │ mask      │ Match bits [31:10], merge bits [21:0]        │
    │   3   │ status    │ U D WP F E | opaque index [26:0]             │
    └───────┴───────────┴──────────────────────────────────────────────┘

Clocked Update Semantics:
    The register file keeps two snapshots. Every read, and every
    combinational consumer (match engine, translation logic), sees only the
    ``current`` snapshot. Writes are staged into ``next`` and become visible
    when ``commit()`` is called at the clock edge. A write and a lookup
    against the same descriptor in the same cycle therefore see the
    pre-edge contents.

    Only one field of one descriptor may be written per cycle; staging a
    second write before ``commit()`` raises RegisterAccessError.

Reset State:
    Every slot resets to a disabled descriptor on its own 1 KiB frame at the
    top of the logical address space (slot i at 0xFFFFFC00 - i * 0x400).
    Reset slots never overlap each other, and any lookup that lands on one
    faults because it is disabled. Zeroed contents would not do: a zero
    mask matches every address, so four zeroed slots would turn every
    lookup into a multi-match fault.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from segmmu.config import (
    FIELD_LOG_BASE,
    FIELD_MASK,
    FIELD_NAMES,
    FIELD_PHYS_BASE,
    FIELD_STATUS,
    FIELDS_PER_SEGMENT,
    MATCH_MASK,
    NUM_SEGMENTS,
    OFFSET_BITS,
    STATUS_DIRTY_BIT,
    STATUS_ENABLED_BIT,
    STATUS_FAULT_BIT,
    STATUS_INDEX_MASK,
    STATUS_USED_BIT,
    STATUS_WRITE_PROTECT_BIT,
)
from segmmu.exceptions import RegisterAccessError
from segmmu.utils.bit_utils import bit_is_set, ensure_width

_FIELD_ATTRIBUTES = {
    FIELD_PHYS_BASE: "phys_base",
    FIELD_LOG_BASE: "log_base",
    FIELD_MASK: "mask",
    FIELD_STATUS: "status",
}


def check_register_index(segment: int, field: int) -> None:
    """Raise RegisterAccessError unless both indices address a real field."""
    if not 0 <= segment < NUM_SEGMENTS:
        raise RegisterAccessError(
            f"segment index {segment} out of range 0-{NUM_SEGMENTS - 1}",
            segment=segment,
            field=field,
        )
    if not 0 <= field < FIELDS_PER_SEGMENT:
        raise RegisterAccessError(
            f"field index {field} out of range 0-{FIELDS_PER_SEGMENT - 1}",
            segment=segment,
            field=field,
        )


@dataclass(frozen=True)
class SegmentDescriptor:
    """One segment descriptor slot.

    Attributes:
        phys_base: Physical frame base
        log_base: Logical frame base
        mask: Match/merge mask
        status: Status word (flags plus opaque index)
    """

    phys_base: int = 0
    log_base: int = 0
    mask: int = 0
    status: int = 0

    def __post_init__(self) -> None:
        for name in FIELD_NAMES:
            ensure_width(getattr(self, name), 32, name)

    @property
    def used(self) -> bool:
        return bit_is_set(self.status, STATUS_USED_BIT)

    @property
    def dirty(self) -> bool:
        return bit_is_set(self.status, STATUS_DIRTY_BIT)

    @property
    def write_protected(self) -> bool:
        return bit_is_set(self.status, STATUS_WRITE_PROTECT_BIT)

    @property
    def faulted(self) -> bool:
        return bit_is_set(self.status, STATUS_FAULT_BIT)

    @property
    def enabled(self) -> bool:
        return bit_is_set(self.status, STATUS_ENABLED_BIT)

    @property
    def index(self) -> int:
        """Opaque index field; carried but never interpreted."""
        return self.status & STATUS_INDEX_MASK

    def field(self, field: int) -> int:
        """Return the value of a field by index (0-3)."""
        check_register_index(0, field)
        return getattr(self, _FIELD_ATTRIBUTES[field])

    def with_field(self, field: int, value: int) -> "SegmentDescriptor":
        """Return a copy with one field replaced."""
        check_register_index(0, field)
        return replace(self, **{_FIELD_ATTRIBUTES[field]: value})

    def fields(self) -> tuple[int, int, int, int]:
        """Return all four fields in register-map order."""
        return (self.phys_base, self.log_base, self.mask, self.status)


def reset_descriptor(segment: int) -> SegmentDescriptor:
    """Return the contents slot ``segment`` holds after reset.

    The slot is disabled and covers only the 1 KiB frame
    ``0xFFFFFC00 - segment * 0x400``.
    """
    check_register_index(segment, 0)
    return SegmentDescriptor(
        phys_base=0,
        log_base=MATCH_MASK - (segment << OFFSET_BITS),
        mask=MATCH_MASK,
        status=0,
    )


RESET_DESCRIPTORS: tuple[SegmentDescriptor, ...] = tuple(
    reset_descriptor(segment) for segment in range(NUM_SEGMENTS)
)


class SegmentRegisterFile:
    """Four descriptors with synchronous, single-writer update.

    Attributes:
        current: Committed (pre-edge) descriptor contents
    """

    def __init__(self, descriptors: Iterable[SegmentDescriptor] | None = None) -> None:
        """Initialize the register file.

        Args:
            descriptors: Initial contents. If None, all descriptors start
                from RESET_DESCRIPTORS.

        Raises:
            RegisterAccessError: If the number of descriptors isn't four
        """
        if descriptors is None:
            current = RESET_DESCRIPTORS
        else:
            current = tuple(descriptors)
        if len(current) != NUM_SEGMENTS:
            raise RegisterAccessError(
                f"register file holds exactly {NUM_SEGMENTS} descriptors, "
                f"got {len(current)}"
            )
        self._current: tuple[SegmentDescriptor, ...] = current
        self._next: list[SegmentDescriptor] = list(current)
        self._staged: tuple[int, int] | None = None

    @property
    def current(self) -> tuple[SegmentDescriptor, ...]:
        return self._current

    @property
    def has_pending_write(self) -> bool:
        return self._staged is not None

    def descriptor(self, segment: int) -> SegmentDescriptor:
        """Return the committed descriptor in a slot."""
        check_register_index(segment, 0)
        return self._current[segment]

    def read(self, segment: int, field: int) -> int:
        """Read a committed field value.

        Args:
            segment: Descriptor slot (0-3)
            field: Field index (0-3)

        Returns:
            32-bit field value as of the last commit
        """
        check_register_index(segment, field)
        return self._current[segment].field(field)

    def write(self, segment: int, field: int, value: int) -> None:
        """Stage a field write for the next clock edge.

        Args:
            segment: Descriptor slot (0-3)
            field: Field index (0-3)
            value: 32-bit value to store

        Raises:
            RegisterAccessError: If indices are invalid or a write is
                already staged this cycle
            BusWidthError: If value doesn't fit 32 bits
        """
        check_register_index(segment, field)
        ensure_width(value, 32, FIELD_NAMES[field])
        if self._staged is not None:
            staged_segment, staged_field = self._staged
            raise RegisterAccessError(
                "second register write in one cycle "
                f"(already staged segment {staged_segment} "
                f"{FIELD_NAMES[staged_field]})",
                segment=segment,
                field=field,
            )
        self._next[segment] = self._next[segment].with_field(field, value)
        self._staged = (segment, field)

    def commit(self) -> tuple[SegmentDescriptor, ...]:
        """Clock edge: make the staged write visible and return the new contents."""
        self._current = tuple(self._next)
        self._staged = None
        return self._current
