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

"""Shared fixtures for the model unit tests."""

import pytest

from segmmu.config import MATCH_MASK, STATUS_ENABLED, STATUS_WRITE_PROTECT
from segmmu.models.mmu_model import SegmentedMMU
from segmmu.models.register_file import SegmentDescriptor


@pytest.fixture
def identity_segment() -> SegmentDescriptor:
    """Enabled 1 KiB segment mapping logical 0x000-0x3FF to physical 0x000-0x3FF."""
    return SegmentDescriptor(
        phys_base=0, log_base=0, mask=MATCH_MASK, status=STATUS_ENABLED
    )


@pytest.fixture
def protected_segment() -> SegmentDescriptor:
    """Enabled, write-protected 1 KiB segment at logical 0, physical frame 0x100."""
    return SegmentDescriptor(
        phys_base=0x100,
        log_base=0,
        mask=MATCH_MASK,
        status=STATUS_ENABLED | STATUS_WRITE_PROTECT,
    )


@pytest.fixture
def mmu() -> SegmentedMMU:
    """Model straight out of reset."""
    return SegmentedMMU()


@pytest.fixture
def identity_mmu(mmu: SegmentedMMU, identity_segment: SegmentDescriptor) -> SegmentedMMU:
    """Model with only segment 0 loaded, as the identity segment."""
    mmu.load_descriptor(0, identity_segment)
    return mmu
