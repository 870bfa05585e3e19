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

"""Software model of the segment match engine.

Match Engine
============

Every descriptor is compared against the logical address independently:

    match[i] = (log_base[31:10] & mask[31:10]) == (address[31:10] & mask[31:10])

The four results form a 4-bit match vector (bit i = descriptor i). A segment
is selected only when the vector is exactly one-hot:

    0b0001 -> 0    0b0010 -> 1    0b0100 -> 2    0b1000 -> 3

Every other pattern, including the all-zero vector and any vector with two
or more bits set, selects nothing. This is not a priority encoder:
overlapping descriptor configurations fault exactly like unmapped
addresses, and no "lowest index wins" tie-break is applied.

The enable bit is not consulted here; a disabled descriptor still takes part
in matching, and the translation logic turns a match against it into a
segmentation fault.
"""

from collections.abc import Sequence

from segmmu.config import MATCH_MASK
from segmmu.models.register_file import SegmentDescriptor

_ONE_HOT_SEGMENTS = {0b0001: 0, 0b0010: 1, 0b0100: 2, 0b1000: 3}


def segment_matches(descriptor: SegmentDescriptor, address: int) -> bool:
    """Compare one descriptor's masked logical base against an address."""
    significant = descriptor.mask & MATCH_MASK
    return (descriptor.log_base & significant) == (address & significant)


def match_vector(descriptors: Sequence[SegmentDescriptor], address: int) -> int:
    """Build the match vector for an address.

    Args:
        descriptors: Committed register file contents
        address: 32-bit logical address

    Returns:
        Bit vector with bit i set when descriptor i matches
    """
    vector = 0
    for segment, descriptor in enumerate(descriptors):
        if segment_matches(descriptor, address):
            vector |= 1 << segment
    return vector


def decode_one_hot(vector: int) -> int | None:
    """Return the segment selected by an exactly-one-hot vector, else None."""
    return _ONE_HOT_SEGMENTS.get(vector)


def match_segment(descriptors: Sequence[SegmentDescriptor], address: int) -> int | None:
    """Return the single matching segment for an address, or None."""
    return decode_one_hot(match_vector(descriptors, address))
