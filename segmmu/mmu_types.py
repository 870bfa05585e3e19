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

"""Type aliases and custom types for the segmented MMU.

Types
=====

This module defines type aliases, NewTypes and small enums for better type
safety and code clarity throughout the model and the testbench.
"""

from enum import Enum
from typing import NewType

# Address-related types
LogicalAddress = NewType("LogicalAddress", int)
"""32-bit logical address as seen by the requester."""

PhysicalAddress = NewType("PhysicalAddress", int)
"""42-bit translated address, or the fault sentinel."""

# Register-file-related types
SegmentIndex = NewType("SegmentIndex", int)
"""Descriptor slot index (0-3)."""

FieldIndex = NewType("FieldIndex", int)
"""Descriptor field index (0=phys_base, 1=log_base, 2=mask, 3=status)."""

RegisterValue = NewType("RegisterValue", int)
"""32-bit descriptor field value."""

# Cycle counter
CycleCount = NewType("CycleCount", int)
"""Simulation cycle counter."""


class AccessOutcome(Enum):
    """What a single bus cycle did, used for coverage and logging."""

    REGISTER_READ = "register_read"
    REGISTER_WRITE = "register_write"
    TRANSLATED = "translated"
    PROTECTION_FAULT = "protection_fault"
    NO_MATCH = "no_match"
    OVERLAP = "overlap"
    DISABLED = "disabled"

    @property
    def is_segmentation_fault(self) -> bool:
        """True for every outcome that raises the segmentation fault flag."""
        return self in (
            AccessOutcome.NO_MATCH,
            AccessOutcome.OVERLAP,
            AccessOutcome.DISABLED,
        )
