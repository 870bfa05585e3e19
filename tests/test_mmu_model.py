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

"""Cycle-level tests of the complete model.

Covers the externally observable properties of the unit: reset behavior,
register round trip, translation, no-match, protection faults, one-hot-only
matching and status flag monotonicity.
"""

import random

import pytest

from segmmu.config import (
    FAULT_SENTINEL,
    FIELD_LOG_BASE,
    FIELD_MASK,
    FIELD_STATUS,
    MATCH_MASK,
    STATUS_DIRTY,
    STATUS_ENABLED,
    STATUS_FAULT,
    STATUS_STICKY_FLAGS,
    STATUS_USED,
    STATUS_WRITE_PROTECT,
)
from segmmu.encoders.register_map import (
    register_read,
    register_write,
    translate_access,
)
from segmmu.exceptions import RegisterAccessError
from segmmu.generators.transaction_generator import TransactionGenerator
from segmmu.mmu_types import AccessOutcome
from segmmu.models.bus_arbiter import NOT_DRIVEN, BusInputs, Driven
from segmmu.models.mmu_model import (
    IDLE_OUTPUTS,
    BusOutputs,
    MMUState,
    SegmentedMMU,
    classify_access,
    reset_state,
    step,
)
from segmmu.models.register_file import (
    RESET_DESCRIPTORS,
    SegmentDescriptor,
    reset_descriptor,
)
from segmmu.utils.validation import MMUAssertions

_rng = random.Random(7)
SAMPLE_ADDRESSES = [0x0, 0x3FF, 0x400, 0x7FFFFFFF, 0x80000000, 0xFFFFFFFF] + [
    _rng.getrandbits(32) for _ in range(32)
]


def _assert_seg_fault(outputs: BusOutputs) -> None:
    assert outputs.seg_fault
    assert not outputs.prot_fault
    assert outputs.physical_address == FAULT_SENTINEL
    assert outputs.data_out is NOT_DRIVEN


class TestReset:
    @pytest.mark.parametrize("address", SAMPLE_ADDRESSES)
    @pytest.mark.parametrize("is_write", [False, True])
    def test_unit_out_of_reset_faults_everywhere(self, mmu, address, is_write):
        _assert_seg_fault(mmu.translate(address, is_write))

    @pytest.mark.parametrize("address", SAMPLE_ADDRESSES)
    def test_all_disabled_unit_faults_everywhere(self, mmu, address):
        for segment in range(4):
            mask = segment * 0x40000000
            descriptor = SegmentDescriptor(0, 0, mask, STATUS_WRITE_PROTECT)
            mmu.load_descriptor(segment, descriptor)
        _assert_seg_fault(mmu.translate(address, is_write=True))

    def test_registers_read_reset_descriptors(self, mmu):
        for segment in range(4):
            assert mmu.read_descriptor(segment) == reset_descriptor(segment)
        assert mmu.read_register(1, FIELD_LOG_BASE) == 0xFFFFF800
        assert mmu.read_register(1, FIELD_STATUS) == 0

    def test_reset_discards_configuration(self, identity_mmu):
        identity_mmu.reset()
        assert identity_mmu.cycle == 0
        _assert_seg_fault(identity_mmu.translate(0x10))


class TestRegisterAccess:
    def test_round_trip_every_field(self, mmu):
        rng = random.Random(0x5E6)
        written = {}
        for segment in range(4):
            for field in range(4):
                value = rng.getrandbits(32)
                written[segment, field] = value
                mmu.write_register(segment, field, value)

        for (segment, field), value in written.items():
            assert mmu.read_register(segment, field) == value

    def test_value_kept_until_overwritten(self, mmu):
        mmu.write_register(1, FIELD_MASK, 0xFFFFF000)
        mmu.translate(0x1234)
        mmu.read_register(0, FIELD_MASK)
        assert mmu.read_register(1, FIELD_MASK) == 0xFFFFF000

        mmu.write_register(1, FIELD_MASK, 0xFFFFFC00)
        assert mmu.read_register(1, FIELD_MASK) == 0xFFFFFC00

    def test_write_cycle_outputs(self, mmu):
        assert mmu.write_register(0, 0, 0xFFFFFFFF) == IDLE_OUTPUTS

    def test_read_cycle_outputs(self, mmu):
        mmu.write_register(3, FIELD_STATUS, 0x12345678)
        outputs = mmu.clock(register_read(3, FIELD_STATUS))
        assert outputs == BusOutputs(Driven(0x12345678), FAULT_SENTINEL, False, False)

    def test_upper_address_bits_ignored(self, mmu):
        mmu.clock(BusInputs(0xABCD0007, is_write=True, data_in=0xBEEF))
        assert mmu.read_register(1, FIELD_STATUS) == 0xBEEF

    def test_read_descriptor_costs_four_cycles(self, mmu, identity_segment):
        mmu.load_descriptor(2, identity_segment)
        assert mmu.cycle == 4
        assert mmu.read_descriptor(2).fields() == identity_segment.fields()
        assert mmu.cycle == 8

    def test_read_register_rejects_bad_index(self, mmu):
        with pytest.raises(RegisterAccessError):
            mmu.read_register(4, 0)


class TestTranslation:
    @pytest.mark.parametrize("address", [0x000, 0x001, 0x123, 0x200, 0x3FF])
    def test_identity_segment(self, identity_mmu, address):
        outputs = identity_mmu.translate(address)
        assert not outputs.seg_fault
        assert not outputs.prot_fault
        assert outputs.physical_address == address
        assert outputs.data_out is NOT_DRIVEN

    def test_first_address_past_segment(self, identity_mmu):
        _assert_seg_fault(identity_mmu.translate(0x400))

    def test_protection_fault_sets_status(self, mmu, protected_segment):
        mmu.load_descriptor(0, protected_segment)

        outputs = mmu.translate(0x3, is_write=True)
        assert outputs.prot_fault
        assert not outputs.seg_fault
        assert outputs.physical_address == 0x40003

        status = mmu.read_register(0, FIELD_STATUS)
        assert status & STATUS_USED
        assert status & STATUS_DIRTY
        assert status & STATUS_FAULT
        assert status & STATUS_ENABLED
        assert status & STATUS_WRITE_PROTECT

    def test_overlapping_enabled_segments_fault(self, mmu, identity_segment):
        mmu.load_descriptor(0, identity_segment)
        mmu.load_descriptor(3, SegmentDescriptor(0x200, 0, MATCH_MASK, STATUS_ENABLED))

        for address in (0x000, 0x155, 0x3FF):
            _assert_seg_fault(mmu.translate(address))
        assert mmu.read_register(0, FIELD_STATUS) == STATUS_ENABLED
        assert mmu.read_register(3, FIELD_STATUS) == STATUS_ENABLED

    def test_faults_leave_status_untouched(self, mmu):
        mmu.load_descriptor(1, SegmentDescriptor(0, 0x400, MATCH_MASK, 0))
        _assert_seg_fault(mmu.translate(0x400, is_write=True))
        assert mmu.read_register(1, FIELD_STATUS) == 0

    def test_matching_follows_register_contents_only(self, mmu):
        mmu.write_register(0, FIELD_MASK, 0)
        assert classify_access(mmu.descriptors, translate_access(0x10)) == (
            AccessOutcome.DISABLED
        )
        mmu.write_register(0, FIELD_STATUS, STATUS_ENABLED)
        assert mmu.translate(0xFFFFF800).seg_fault
        assert mmu.translate(0x10).physical_address == 0x10

        mmu.write_register(0, FIELD_MASK, MATCH_MASK)
        mmu.write_register(0, FIELD_LOG_BASE, 0)
        _assert_seg_fault(mmu.translate(0xFFFFFC00))
        assert mmu.translate(0x10).physical_address == 0x10


class TestStatusFlags:
    def test_flags_are_sticky(self, identity_mmu):
        identity_mmu.translate(0x10, is_write=True)
        identity_mmu.translate(0x10, is_write=False)
        status = identity_mmu.read_register(0, FIELD_STATUS)
        assert status == STATUS_ENABLED | STATUS_USED | STATUS_DIRTY

    def test_software_clears_flags(self, mmu, protected_segment):
        mmu.load_descriptor(0, protected_segment)
        mmu.translate(0x3, is_write=True)

        written = mmu.clear_status_flags(0)
        assert written == STATUS_ENABLED | STATUS_WRITE_PROTECT
        assert mmu.read_register(0, FIELD_STATUS) == written

    def test_translations_never_clear_flags(self):
        generator = TransactionGenerator(seed=1234)
        rng = random.Random(99)
        for _ in range(20):
            mmu = SegmentedMMU(generator.random_configuration())
            for _ in range(50):
                before = [d.status for d in mmu.descriptors]
                inputs = generator.next_access(mmu.descriptors)
                if not inputs.mode_select:
                    inputs = translate_access(rng.getrandbits(32), rng.random() < 0.5)
                mmu.clock(inputs)
                for segment, descriptor in enumerate(mmu.descriptors):
                    MMUAssertions.assert_status_monotonic(
                        before[segment], descriptor.status, segment
                    )
                    MMUAssertions.assert_software_bits_preserved(
                        before[segment], descriptor.status, segment
                    )


class TestStep:
    def test_step_is_pure(self, identity_segment):
        state = MMUState((identity_segment,) + RESET_DESCRIPTORS[1:])

        first = step(state, translate_access(0x10, is_write=True))
        second = step(state, translate_access(0x10, is_write=True))

        assert first == second
        assert state.descriptors[0].status == STATUS_ENABLED
        assert first[0].cycle == 1

    def test_register_write_takes_effect_next_cycle(self, protected_segment):
        state = MMUState((protected_segment,) + RESET_DESCRIPTORS[1:])

        state, outputs = step(state, register_write(0, FIELD_STATUS, STATUS_WRITE_PROTECT))
        assert outputs == IDLE_OUTPUTS
        assert state.descriptors[0].status == STATUS_WRITE_PROTECT

        state, outputs = step(state, translate_access(0x3, is_write=True))
        assert outputs.seg_fault

    def test_status_update_visible_next_cycle(self, protected_segment):
        state = MMUState((protected_segment,) + RESET_DESCRIPTORS[1:])

        state, outputs = step(state, translate_access(0x3, is_write=True))
        assert outputs.prot_fault
        state, outputs = step(state, register_read(0, FIELD_STATUS))
        assert outputs.data_out == Driven(
            protected_segment.status | STATUS_STICKY_FLAGS
        )

    def test_reset_state(self):
        state = reset_state()
        assert state.cycle == 0
        assert state.descriptors == RESET_DESCRIPTORS
        assert not any(d.enabled for d in state.descriptors)


class TestClassifyAccess:
    def test_outcomes(self, identity_segment, protected_segment):
        disabled = SegmentDescriptor(0, 0x800, MATCH_MASK, 0)
        writable = SegmentDescriptor(0, 0x400, MATCH_MASK, STATUS_ENABLED)
        descriptors = (protected_segment, writable, disabled, identity_segment)

        cases = {
            register_read(0, 0): AccessOutcome.REGISTER_READ,
            register_write(0, 0, 1): AccessOutcome.REGISTER_WRITE,
            translate_access(0x404): AccessOutcome.TRANSLATED,
            translate_access(0x804): AccessOutcome.DISABLED,
            translate_access(0xC04): AccessOutcome.NO_MATCH,
            translate_access(0x004): AccessOutcome.OVERLAP,
        }
        for inputs, outcome in cases.items():
            assert classify_access(descriptors, inputs) is outcome

        protected_only = (protected_segment, writable, disabled, disabled)
        assert classify_access(
            protected_only, translate_access(0x3, is_write=True)
        ) is AccessOutcome.PROTECTION_FAULT

    def test_segmentation_fault_outcomes(self):
        faults = {o for o in AccessOutcome if o.is_segmentation_fault}
        assert faults == {
            AccessOutcome.NO_MATCH,
            AccessOutcome.OVERLAP,
            AccessOutcome.DISABLED,
        }
