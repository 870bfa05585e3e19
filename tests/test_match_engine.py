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

"""Tests for the one-hot segment match engine."""

import pytest

from segmmu.config import MATCH_MASK, STATUS_ENABLED
from segmmu.models.match_engine import (
    decode_one_hot,
    match_segment,
    match_vector,
    segment_matches,
)
from segmmu.models.register_file import RESET_DESCRIPTORS, SegmentDescriptor


def _segment(log_base: int, mask: int = MATCH_MASK, status: int = 0) -> SegmentDescriptor:
    return SegmentDescriptor(phys_base=0, log_base=log_base, mask=mask, status=status)


@pytest.mark.parametrize(
    "vector,expected",
    [
        (0b0000, None),
        (0b0001, 0),
        (0b0010, 1),
        (0b0100, 2),
        (0b1000, 3),
        (0b0011, None),
        (0b1001, None),
        (0b1111, None),
    ],
)
def test_decode_one_hot(vector, expected):
    assert decode_one_hot(vector) == expected


def test_match_compares_masked_bits_only():
    descriptor = _segment(0x12345400)
    assert segment_matches(descriptor, 0x12345400)
    assert segment_matches(descriptor, 0x123457FF)
    assert not segment_matches(descriptor, 0x12345800)


def test_mask_bits_below_ten_are_ignored():
    descriptor = _segment(0x12345400, mask=0xFFFFFFFF)
    assert segment_matches(descriptor, 0x123454AB)


def test_log_base_offset_bits_are_ignored():
    descriptor = _segment(0x123457FF)
    assert segment_matches(descriptor, 0x12345400)


def test_zero_mask_matches_everything():
    descriptor = _segment(0xFFFFFC00, mask=0)
    assert segment_matches(descriptor, 0)
    assert segment_matches(descriptor, 0xFFFFFFFF)


def test_reset_descriptors_match_only_their_own_frame():
    assert match_vector(RESET_DESCRIPTORS, 0xFFFFFC00) == 0b0001
    assert match_vector(RESET_DESCRIPTORS, 0xFFFFF0FF) == 0b1000
    assert match_vector(RESET_DESCRIPTORS, 0xFFFFEFFF) == 0
    assert match_vector(RESET_DESCRIPTORS, 0) == 0


def test_disabled_descriptor_still_matches():
    assert segment_matches(_segment(0x400, status=0), 0x400)


def test_match_vector_and_selection():
    descriptors = (
        _segment(0x00000000),
        _segment(0x00000400),
        _segment(0x00000800, status=STATUS_ENABLED),
        _segment(0x00010000),
    )
    assert match_vector(descriptors, 0x00000804) == 0b0100
    assert match_segment(descriptors, 0x00000804) == 2
    assert match_vector(descriptors, 0x00001000) == 0
    assert match_segment(descriptors, 0x00001000) is None


def test_overlap_selects_nothing():
    descriptors = (
        _segment(0x00000400),
        _segment(0x00010000),
        _segment(0x00020000),
        _segment(0x00000400),
    )
    assert match_vector(descriptors, 0x00000400) == 0b1001
    assert match_segment(descriptors, 0x00000400) is None
