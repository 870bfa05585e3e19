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

"""Utility functions for the model and the verification framework.

This package provides helper functions used throughout the package for bit
manipulation, validation, logging and coverage.

Modules
-------
bit_utils
    Bit-vector helpers:
    - Field extraction with [high:low] bounds
    - Single-bit tests
    - Bus width checks

validation
    Enhanced assertion utilities:
    - ValidationError with a context dict
    - MMUAssertions class for segment-unit-specific validations

transaction_logger
    Structured logging for bus cycles:
    - One-line cycle formatting (register access and translation)
    - Descriptor dumps with decoded status flags
    - Coverage summary reporting

coverage
    TestStatistics: outcome counters and coverage threshold checks

Usage
-----
Import utilities as needed::

    from segmmu.utils.bit_utils import extract_bits
    from segmmu.utils.validation import MMUAssertions

    # Physical bits [41:32]
    high = extract_bits(physical_address, 41, 32)

    # Validate a segment index
    MMUAssertions.assert_segment_valid(segment)
"""

from segmmu.utils.bit_utils import bit_is_set, ensure_width, extract_bits
from segmmu.utils.validation import MMUAssertions, ValidationError

# Note: TransactionLogger and TestStatistics are not imported at package level
# to avoid circular imports with the models package.
# Import directly when needed: from segmmu.utils.transaction_logger import TransactionLogger

__all__ = [
    "bit_is_set",
    "ensure_width",
    "extract_bits",
    "MMUAssertions",
    "ValidationError",
]
