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

"""Software model of the segmented memory-translation unit.

This package contains the cycle-level reference model. It is used on its
own (trace replay, unit tests) and as the golden model that the cocotb
testbench compares an HDL implementation against.

Modules
-------
register_file
    Four segment descriptors with current/next snapshots:
    - Word-granular read/write addressed by (segment, field)
    - Single staged write per cycle, committed at the clock edge

match_engine
    Per-descriptor masked comparison and exact one-hot decode
    (no priority encoding; overlaps select nothing)

translation
    Physical address merge, segmentation and protection fault flags,
    fault sentinel on any segmentation fault

status_updater
    Monotonic U/D/F updates on successful translations

bus_arbiter
    Register-access vs translate mode selection and the tagged
    Driven/NotDriven data channel

mmu_model
    Pure ``step(state, inputs)`` function, outcome classification and the
    stateful ``SegmentedMMU`` wrapper

Usage
-----
Drive the model one cycle at a time::

    from segmmu.models.mmu_model import SegmentedMMU
    from segmmu.models.register_file import SegmentDescriptor

    mmu = SegmentedMMU()
    mmu.load_descriptor(0, SegmentDescriptor(0, 0, 0xFFFFFC00, 0x08000000))
    outputs = mmu.translate(0x123)  # outputs.physical_address == 0x123
"""

from segmmu.models.register_file import SegmentDescriptor, SegmentRegisterFile
from segmmu.models.match_engine import match_segment, match_vector
from segmmu.models.translation import TranslationResult, translate
from segmmu.models.status_updater import apply_status_update, updated_status
from segmmu.models.bus_arbiter import (
    NOT_DRIVEN,
    AccessRequest,
    BusInputs,
    BusMode,
    Driven,
    NotDriven,
)
from segmmu.models.mmu_model import (
    BusOutputs,
    MMUState,
    SegmentedMMU,
    classify_access,
    reset_state,
    step,
)

__all__ = [
    "SegmentDescriptor",
    "SegmentRegisterFile",
    "match_segment",
    "match_vector",
    "TranslationResult",
    "translate",
    "apply_status_update",
    "updated_status",
    "NOT_DRIVEN",
    "AccessRequest",
    "BusInputs",
    "BusMode",
    "Driven",
    "NotDriven",
    "BusOutputs",
    "MMUState",
    "SegmentedMMU",
    "classify_access",
    "reset_state",
    "step",
]
