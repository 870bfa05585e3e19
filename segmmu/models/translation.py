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

"""Software model of the translation and fault logic.

Translation / Fault Logic
=========================

Consumes the match engine's result and the access type and produces the
physical address plus the two fault flags. Both flags use fault-occurred
polarity (True = fault).

Algorithm:
    1. No one-hot match              -> seg_fault, sentinel address
    2. Match against disabled (E=0)  -> seg_fault, sentinel address
    3. Match against enabled segment -> physical address:

        ┌──────────────────┬───────────────────────────────────────────────┐
        │ Physical bits    │ Source                                        │
        ├──────────────────┼───────────────────────────────────────────────┤
        │ [41:32]          │ phys_base[31:22]                              │
        │ [31:10]          │ (phys_base[21:0] & ~mask[21:0])               │
        │                  │   | (log_base[21:0] & mask[21:0])             │
        │ [9:0]            │ address[9:0]                                  │
        └──────────────────┴───────────────────────────────────────────────┘

    4. Case 3 with a write to a write-protected segment additionally raises
       prot_fault. The address is still produced: the fault is advisory and
       the caller decides whether to abort the transfer.

Note that bits [9:0] of the mask are never consulted; the intra-segment
offset is always the low 10 address bits.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from segmmu.config import (
    FAULT_SENTINEL,
    MERGE_BITS,
    MERGE_MASK,
    OFFSET_BITS,
    OFFSET_MASK,
    PHYSICAL_HIGH_SHIFT,
)
from segmmu.models.match_engine import decode_one_hot, match_vector
from segmmu.models.register_file import SegmentDescriptor


@dataclass(frozen=True)
class TranslationResult:
    """Outcome of one translate-mode access.

    Attributes:
        physical_address: 42-bit translated address, or FAULT_SENTINEL
        seg_fault: True if no enabled descriptor matched exactly
        prot_fault: True if a write hit a write-protected descriptor
        segment: Index of the one-hot matched descriptor (None if no match)
        vector: Raw 4-bit match vector, kept for coverage and logging
    """

    physical_address: int
    seg_fault: bool
    prot_fault: bool
    segment: int | None = None
    vector: int = 0

    @property
    def translated(self) -> bool:
        return not self.seg_fault


def merge_physical_address(descriptor: SegmentDescriptor, address: int) -> int:
    """Concatenate the three physical address fields for a matched descriptor.

    Args:
        descriptor: The matched, enabled descriptor
        address: 32-bit logical address

    Returns:
        42-bit physical address

    Example:
        >>> d = SegmentDescriptor(phys_base=0x100, log_base=0, mask=0xFFFFFC00)
        >>> hex(merge_physical_address(d, 0x3))
        '0x40003'
    """
    high = descriptor.phys_base >> MERGE_BITS
    merge_mask = descriptor.mask & MERGE_MASK
    middle = ((descriptor.phys_base & MERGE_MASK) & ~merge_mask) | (
        descriptor.log_base & merge_mask
    )
    return (
        (high << PHYSICAL_HIGH_SHIFT)
        | (middle << OFFSET_BITS)
        | (address & OFFSET_MASK)
    )


def translate(
    descriptors: Sequence[SegmentDescriptor], address: int, is_write: bool
) -> TranslationResult:
    """Translate a logical address against the committed descriptors.

    Args:
        descriptors: Pre-edge register file contents
        address: 32-bit logical address
        is_write: True for a write access

    Returns:
        TranslationResult with the physical address and fault flags
    """
    vector = match_vector(descriptors, address)
    segment = decode_one_hot(vector)
    if segment is None:
        return TranslationResult(FAULT_SENTINEL, True, False, None, vector)

    descriptor = descriptors[segment]
    if not descriptor.enabled:
        return TranslationResult(FAULT_SENTINEL, True, False, segment, vector)

    return TranslationResult(
        physical_address=merge_physical_address(descriptor, address),
        seg_fault=False,
        prot_fault=is_write and descriptor.write_protected,
        segment=segment,
        vector=vector,
    )
