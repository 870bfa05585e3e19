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

"""Directed tests for the segmented MMU.

Directed MMU Tests
==================

Each test targets one property of the unit with hand-written stimulus.
Every cycle also goes through the bus monitor, so the DUT is compared
against the model on all outputs (data channel drive state, physical
address, both fault flags), not only on the values asserted here.

Test Cases:
    1. All descriptors disabled: every translation faults with the sentinel
    2. Register round trip: a written field reads back one cycle later
    3. Identity segment: addresses 0-1023 translate to themselves
    4. Just past the identity segment: address 1024 faults
    5. Write-protected segment: protection fault, then U/D/F set, E/WP kept
    6. Overlapping enabled segments: the shared range faults
    7. Sticky status flags: no translation ever clears U, D or F
    8. Same-cycle semantics: a translation sees the pre-edge descriptors
    9. Data channel: released on every cycle except register reads

Usage:
    segmmu-sim mmu.vhd --testcase test_protection_fault_sets_status
"""

import random
from typing import Any

import cocotb

from segmmu.config import (
    FAULT_SENTINEL,
    FIELD_STATUS,
    FIELDS_PER_SEGMENT,
    MASK32,
    NUM_SEGMENTS,
    SEGMENT_GRANULARITY,
)
from segmmu.encoders.register_map import encode_status
from segmmu.models.bus_arbiter import NOT_DRIVEN
from segmmu.models.register_file import SegmentDescriptor
from segmmu.utils.validation import MMUAssertions, assert_equals
from segmmu.cocotb_tests.test_common import TestConfig
from segmmu.cocotb_tests.transaction_executor import start_executor

IDENTITY_SEGMENT = SegmentDescriptor(
    phys_base=0,
    log_base=0,
    mask=0xFFFFFC00,
    status=encode_status(enabled=True),
)
"""Maps logical 0-1023 onto physical 0-1023."""

PROTECTED_SEGMENT = SegmentDescriptor(
    phys_base=0x100,
    log_base=0,
    mask=0xFFFFFC00,
    status=encode_status(enabled=True, write_protect=True),
)
"""Same logical range as IDENTITY_SEGMENT, write-protected, other frame."""


def _sample_addresses(rng: random.Random, count: int) -> list[int]:
    corners = [0x00000000, 0x000003FF, 0x00000400, 0x7FFFFFFF, 0x80000000, MASK32]
    return corners + [rng.getrandbits(32) for _ in range(count)]


@cocotb.test()
async def test_all_disabled_faults(dut: Any) -> None:
    """With every descriptor in its disabled reset state, any translation faults."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    rng = random.Random(config.seed if config.seed is not None else cocotb.RANDOM_SEED)

    for address in _sample_addresses(rng, 64):
        for is_write in (False, True):
            outputs = await executor.translate(address, is_write)
            assert_equals(outputs.seg_fault, True, "disabled unit must fault", address=hex(address))
            assert_equals(outputs.physical_address, FAULT_SENTINEL, address=hex(address))
            assert_equals(outputs.prot_fault, False, address=hex(address))

    await executor.drain()


@cocotb.test()
async def test_register_round_trip(dut: Any) -> None:
    """Every field of every descriptor reads back the value written to it."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    rng = random.Random(config.seed if config.seed is not None else cocotb.RANDOM_SEED)

    written = {}
    for segment in range(NUM_SEGMENTS):
        for field in range(FIELDS_PER_SEGMENT):
            value = rng.getrandbits(32)
            written[(segment, field)] = value
            await executor.write_register(segment, field, value)

    for (segment, field), value in written.items():
        read_back = await executor.read_register(segment, field)
        assert_equals(read_back, value, "register round trip", segment=segment, field=field)

    # A write is visible on the very next cycle
    await executor.write_register(2, 1, 0xA5A5A5A5)
    assert_equals(await executor.read_register(2, 1), 0xA5A5A5A5)

    await executor.drain()


@cocotb.test()
async def test_identity_translation(dut: Any) -> None:
    """Descriptor 0 maps the first 1 KiB onto itself."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    await executor.load_descriptor(0, IDENTITY_SEGMENT)

    for address in range(SEGMENT_GRANULARITY):
        outputs = await executor.translate(address)
        assert_equals(outputs.seg_fault, False, address=hex(address))
        assert_equals(outputs.physical_address, address, address=hex(address))

    await executor.drain()


@cocotb.test()
async def test_no_match_past_segment(dut: Any) -> None:
    """The first address past the identity segment is unmapped."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    await executor.load_descriptor(0, IDENTITY_SEGMENT)

    outputs = await executor.translate(0x00000400)
    assert_equals(outputs.seg_fault, True)
    assert_equals(outputs.physical_address, FAULT_SENTINEL)

    await executor.drain()


@cocotb.test()
async def test_protection_fault_sets_status(dut: Any) -> None:
    """A write to a write-protected segment flags the fault and sets U, D, F."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    await executor.load_descriptor(0, PROTECTED_SEGMENT)

    outputs = await executor.translate(0x000003, is_write=True)
    assert_equals(outputs.prot_fault, True)
    assert_equals(outputs.seg_fault, False)

    status = await executor.read_register(0, FIELD_STATUS)
    descriptor = SegmentDescriptor(status=status)
    assert_equals(
        (descriptor.used, descriptor.dirty, descriptor.faulted),
        (True, True, True),
        "U, D and F must be set",
    )
    assert_equals(
        (descriptor.enabled, descriptor.write_protected),
        (True, True),
        "E and WP must be untouched",
    )

    await executor.drain()


@cocotb.test()
async def test_overlapping_segments_fault(dut: Any) -> None:
    """Two enabled descriptors covering the same range fault instead of resolving."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    await executor.load_descriptor(0, IDENTITY_SEGMENT)
    await executor.load_descriptor(3, PROTECTED_SEGMENT)

    for address in (0x000, 0x001, 0x200, 0x3FF):
        for is_write in (False, True):
            outputs = await executor.translate(address, is_write)
            assert_equals(outputs.seg_fault, True, "overlap must fault", address=hex(address))
            assert_equals(outputs.prot_fault, False, address=hex(address))
            assert_equals(outputs.physical_address, FAULT_SENTINEL)

    # Faulting accesses leave status untouched
    descriptor = await executor.read_descriptor(0)
    assert_equals(descriptor.used, False)

    await executor.drain()


@cocotb.test()
async def test_status_flags_are_sticky(dut: Any) -> None:
    """Random translations never clear U, D or F, and never touch E or WP."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    rng = random.Random(config.seed if config.seed is not None else cocotb.RANDOM_SEED)

    for segment in range(NUM_SEGMENTS):
        await executor.load_descriptor(
            segment,
            SegmentDescriptor(
                phys_base=rng.getrandbits(32),
                log_base=segment << 30,
                mask=0xC0000000,
                status=encode_status(
                    enabled=True,
                    write_protect=bool(segment & 1),
                    index=rng.getrandbits(27),
                ),
            ),
        )

    previous = [
        await executor.read_register(segment, FIELD_STATUS)
        for segment in range(NUM_SEGMENTS)
    ]
    for _ in range(64):
        segment = rng.randrange(NUM_SEGMENTS)
        address = (segment << 30) | rng.getrandbits(30)
        await executor.translate(address, bool(rng.getrandbits(1)))
        status = await executor.read_register(segment, FIELD_STATUS)
        MMUAssertions.assert_status_monotonic(previous[segment], status, segment)
        MMUAssertions.assert_software_bits_preserved(previous[segment], status, segment)
        previous[segment] = status

    await executor.drain()


@cocotb.test()
async def test_translation_sees_pre_edge_state(dut: Any) -> None:
    """Enabling a segment takes effect on the cycle after the write."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)

    disabled = SegmentDescriptor(0, 0, 0xFFFFFC00, 0)
    await executor.load_descriptor(1, disabled)

    # Translation right before the enabling write still faults
    outputs = await executor.translate(0x10)
    assert_equals(outputs.seg_fault, True)

    await executor.write_register(1, FIELD_STATUS, encode_status(enabled=True))
    outputs = await executor.translate(0x10)
    assert_equals(outputs.seg_fault, False)
    assert_equals(outputs.physical_address, 0x10)

    # Status update from that translation is visible on the next read
    status = SegmentDescriptor(status=await executor.read_register(1, FIELD_STATUS))
    assert_equals(status.used, True)

    await executor.drain()


@cocotb.test()
async def test_data_channel_release(dut: Any) -> None:
    """The unit drives the data channel only on register reads."""
    config = TestConfig.from_environment()
    executor = await start_executor(dut, config)
    await executor.load_descriptor(0, IDENTITY_SEGMENT)

    outputs = await executor.translate(0x20)
    assert_equals(outputs.data_out, NOT_DRIVEN)
    outputs = await executor.translate(0x20, is_write=True)
    assert_equals(outputs.data_out, NOT_DRIVEN)
    outputs = await executor.translate(0x800)
    assert_equals(outputs.data_out, NOT_DRIVEN)
    outputs = await executor.write_register(2, 0, 0x12345678)
    assert_equals(outputs.data_out, NOT_DRIVEN)
    assert_equals(outputs.physical_address, FAULT_SENTINEL)

    await executor.drain()
