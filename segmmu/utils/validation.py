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

"""Validation utilities and improved assertions for testing.

Validation Utilities
====================

This module provides enhanced assertion and validation functions with
rich error reporting. Unlike standard Python assertions, these provide
detailed context to help debug failures quickly.

Key Features:
    - Rich error messages with context (cycle, expected, actual, etc.)
    - MMU-specific validations (index bounds, address width, status rules)
    - Structured error information for debugging

Provided Utilities:

    ValidationError: Enhanced AssertionError with context dict
        - Stores context as attributes
        - Formats context in error message
        - Includes random seed for reproducibility

    Assertion Functions:
        - assert_equals(): Compare values with detailed mismatch info
        - assert_in_range(): Check value bounds
        - assert_bit_width(): Ensure value fits in bit width

    MMUAssertions: Segment-unit-specific checks
        - assert_segment_valid(): Segment index in [0, 3]
        - assert_field_valid(): Field index in [0, 3]
        - assert_status_monotonic(): U/D/F never cleared by a translation
        - assert_software_bits_preserved(): E/WP/index never touched

Example:
    >>> try:
    ...     assert_equals(0xDEAD, 0xBEEF, "Status mismatch", cycle=123, segment=2)
    ... except ValidationError as e:
    ...     print(e.context['cycle'])  # 123
    ...     print(e.context['expected'])  # 0xBEEF
"""

from typing import Any
import cocotb

from segmmu.config import (
    FIELDS_PER_SEGMENT,
    NUM_SEGMENTS,
    PHYSICAL_ADDRESS_WIDTH,
    STATUS_STICKY_FLAGS,
)


class ValidationError(AssertionError):
    """Enhanced assertion error with context."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize with message and context."""
        self.context = context
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        super().__init__(f"{message}\nContext:\n{context_str}" if context else message)


def assert_equals(
    actual: Any, expected: Any, message: str = "", **context: Any
) -> None:
    """Assert equality with enhanced error reporting.

    Only call this from inside a running cocotb test; the failure path
    logs the random seed through ``cocotb.log``.
    """
    if actual != expected:
        base_msg = message or f"Expected {expected}, got {actual}"
        cocotb.log.info(f"cocotb RANDOM_SEED is {cocotb.RANDOM_SEED}")
        raise ValidationError(
            base_msg,
            actual=actual,
            expected=expected,
            difference=actual - expected if isinstance(actual, int) else None,
            **context,
        )


def assert_in_range(
    value: int, min_val: int, max_val: int, name: str = "value"
) -> None:
    """Assert value is within range."""
    if not min_val <= value <= max_val:
        raise ValidationError(
            f"{name} out of range",
            value=value,
            min=min_val,
            max=max_val,
            out_by=min(abs(value - min_val), abs(value - max_val)),
        )


def assert_bit_width(value: int, bits: int, name: str = "value") -> None:
    """Assert value fits in specified bit width."""
    max_val = (1 << bits) - 1
    if value < 0 or value > max_val:
        raise ValidationError(
            f"{name} exceeds {bits}-bit width",
            value=hex(value),
            bits=bits,
            max_value=hex(max_val),
        )


class MMUAssertions:
    """Segment-unit-specific assertion helpers."""

    @staticmethod
    def assert_segment_valid(segment: int) -> None:
        """Assert segment index is valid."""
        assert_in_range(segment, 0, NUM_SEGMENTS - 1, "segment")

    @staticmethod
    def assert_field_valid(field: int) -> None:
        """Assert descriptor field index is valid."""
        assert_in_range(field, 0, FIELDS_PER_SEGMENT - 1, "field")

    @staticmethod
    def assert_physical_address(address: int) -> None:
        """Assert a physical address fits the 42-bit output."""
        assert_bit_width(address, PHYSICAL_ADDRESS_WIDTH, "physical address")

    @staticmethod
    def assert_status_monotonic(before: int, after: int, segment: int) -> None:
        """Assert no sticky flag went from 1 to 0 across a translation."""
        cleared = before & ~after & STATUS_STICKY_FLAGS
        if cleared:
            raise ValidationError(
                "translation cleared a sticky status flag",
                segment=segment,
                before=hex(before),
                after=hex(after),
                cleared=hex(cleared),
            )

    @staticmethod
    def assert_software_bits_preserved(before: int, after: int, segment: int) -> None:
        """Assert a translation changed nothing but U/D/F."""
        changed = (before ^ after) & ~STATUS_STICKY_FLAGS
        if changed:
            raise ValidationError(
                "translation modified software-owned status bits",
                segment=segment,
                before=hex(before),
                after=hex(after),
                changed=hex(changed),
            )
