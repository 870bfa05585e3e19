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

"""Constrained-random stimulus for the segmented MMU.

Transaction Generator
=====================

Generates descriptor configurations and bus cycles that exercise every
outcome of the unit with useful probability. Purely random addresses almost
never hit a configured segment, so accesses are steered:

    ┌──────────────────────┬────────┬───────────────────────────────────────┐
    │ Access kind          │ Weight │ Purpose                               │
    ├──────────────────────┼────────┼───────────────────────────────────────┤
    │ targeted translate   │   55   │ hits, disabled and overlap faults     │
    │ random translate     │   15   │ no-match faults                       │
    │ register read        │   15   │ read-back of committed state          │
    │ status write         │   10   │ software clearing of U/D/F, WP toggle │
    │ random field write   │    5   │ reconfiguration through the bus       │
    └──────────────────────┴────────┴───────────────────────────────────────┘

Configurations:
    Each slot owns the logical region selected by address bits [31:30]
    (slot i uses region i), so slots never overlap unless an overlap is
    injected on purpose by copying one slot's log_base and mask into
    another. Masks are contiguous prefixes covering bits [31:k] for a random
    k in [10, 24], giving segment sizes from 1 KiB to 16 MiB.

All randomness comes from a ``random.Random`` seeded by the caller, so a
failing regression is reproduced by re-running with the same seed.
"""

import random
from collections.abc import Sequence
from dataclasses import replace

from segmmu.config import (
    FIELD_MASK,
    FIELD_STATUS,
    FIELDS_PER_SEGMENT,
    MASK32,
    MATCH_MASK,
    NUM_SEGMENTS,
    STATUS_ENABLED,
    STATUS_INDEX_MASK,
    STATUS_STICKY_FLAGS,
    STATUS_WRITE_PROTECT,
)
from segmmu.encoders.register_map import (
    descriptor_write_sequence,
    encode_status,
    register_read,
    register_write,
    translate_access,
)
from segmmu.models.bus_arbiter import BusInputs
from segmmu.models.register_file import SegmentDescriptor

REGION_SHIFT = 30
MIN_PREFIX_LOW_BIT = 10
MAX_PREFIX_LOW_BIT = 24

ACCESS_WEIGHTS = {
    "targeted_translate": 55,
    "random_translate": 15,
    "register_read": 15,
    "status_write": 10,
    "field_write": 5,
}


def segments_overlap(a: SegmentDescriptor, b: SegmentDescriptor) -> bool:
    """Return True if some logical address matches both descriptors.

    The unit itself never reports overlap (it simply faults on the shared
    addresses); this check exists for stimulus generation and tooling.
    """
    shared = a.mask & b.mask & MATCH_MASK
    return ((a.log_base ^ b.log_base) & shared) == 0


def prefix_mask(low_bit: int) -> int:
    """Contiguous mask covering bits [31:low_bit]."""
    return (MASK32 << low_bit) & MASK32


def address_in_segment(rng: random.Random, descriptor: SegmentDescriptor) -> int:
    """Random logical address that matches the descriptor's masked base."""
    significant = descriptor.mask & MATCH_MASK
    return (descriptor.log_base & significant) | (rng.getrandbits(32) & ~significant)


class TransactionGenerator:
    """Seeded source of descriptor configurations and bus cycles.

    Attributes:
        rng: Random number generator (seeded for reproducibility)
        enable_probability: Chance a generated slot is enabled
        write_protect_probability: Chance a generated slot is write-protected
        overlap_probability: Chance a configuration contains an overlap
    """

    def __init__(
        self,
        seed: int | None = None,
        enable_probability: float = 0.8,
        write_protect_probability: float = 0.3,
        overlap_probability: float = 0.25,
    ) -> None:
        self.rng = random.Random(seed)
        self.enable_probability = enable_probability
        self.write_protect_probability = write_protect_probability
        self.overlap_probability = overlap_probability

    def random_descriptor(self, segment: int) -> SegmentDescriptor:
        """Random descriptor owning the logical region of its slot."""
        rng = self.rng
        mask = prefix_mask(rng.randint(MIN_PREFIX_LOW_BIT, MAX_PREFIX_LOW_BIT))
        region = segment << REGION_SHIFT
        log_base = (region | rng.getrandbits(REGION_SHIFT)) & mask
        status = encode_status(
            used=rng.random() < 0.2,
            dirty=rng.random() < 0.2,
            write_protect=rng.random() < self.write_protect_probability,
            fault=rng.random() < 0.1,
            enabled=rng.random() < self.enable_probability,
            index=rng.getrandbits(27),
        )
        return SegmentDescriptor(
            phys_base=rng.getrandbits(32),
            log_base=log_base,
            mask=mask,
            status=status,
        )

    def random_configuration(self) -> tuple[SegmentDescriptor, ...]:
        """Random set of four descriptors, sometimes with one overlapping pair."""
        descriptors = [self.random_descriptor(segment) for segment in range(NUM_SEGMENTS)]
        if self.rng.random() < self.overlap_probability:
            source, target = self.rng.sample(range(NUM_SEGMENTS), 2)
            descriptors[target] = replace(
                descriptors[target],
                log_base=descriptors[source].log_base,
                mask=descriptors[source].mask,
                status=descriptors[target].status | STATUS_ENABLED,
            )
        return tuple(descriptors)

    def configuration_cycles(
        self, descriptors: Sequence[SegmentDescriptor]
    ) -> list[BusInputs]:
        """Register writes that load every descriptor of a configuration."""
        cycles: list[BusInputs] = []
        for segment, descriptor in enumerate(descriptors):
            cycles.extend(descriptor_write_sequence(segment, descriptor))
        return cycles

    def next_access(self, descriptors: Sequence[SegmentDescriptor]) -> BusInputs:
        """Pick one weighted-random bus cycle against the current descriptors.

        Args:
            descriptors: The model's committed descriptors, used to steer
                translations toward configured segments

        Returns:
            Inputs for one bus cycle
        """
        rng = self.rng
        kind = rng.choices(
            list(ACCESS_WEIGHTS), weights=list(ACCESS_WEIGHTS.values())
        )[0]
        is_write = bool(rng.getrandbits(1))
        segment = rng.randrange(NUM_SEGMENTS)

        if kind == "targeted_translate":
            address = address_in_segment(rng, descriptors[segment])
            return translate_access(address, is_write)
        if kind == "random_translate":
            return translate_access(rng.getrandbits(32), is_write)
        if kind == "register_read":
            return register_read(segment, rng.randrange(FIELDS_PER_SEGMENT))
        if kind == "status_write":
            status = descriptors[segment].status
            if rng.random() < 0.75:
                status &= ~STATUS_STICKY_FLAGS
            if rng.random() < 0.25:
                status ^= STATUS_WRITE_PROTECT
            return register_write(segment, FIELD_STATUS, status & MASK32)
        return self._random_field_write(segment)

    def _random_field_write(self, segment: int) -> BusInputs:
        rng = self.rng
        field = rng.randrange(FIELDS_PER_SEGMENT)
        if field == FIELD_MASK:
            value = prefix_mask(rng.randint(MIN_PREFIX_LOW_BIT, MAX_PREFIX_LOW_BIT))
        elif field == FIELD_STATUS:
            value = (rng.getrandbits(5) << 27) | (rng.getrandbits(32) & STATUS_INDEX_MASK)
        else:
            value = rng.getrandbits(32)
        return register_write(segment, field, value)
