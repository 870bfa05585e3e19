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

"""Custom exceptions for model misuse and verification errors.

Exceptions
==========

This module defines a hierarchy of exception types for programming errors
against the model and for verification failure scenarios.

MMU faults are deliberately absent: a segmentation or protection fault is a
normal output of the unit (see ``BusOutputs.seg_fault`` and
``BusOutputs.prot_fault``), never an exception.
"""


class MMUError(Exception):
    """Base exception for all segmented-MMU errors.

    All package-specific exceptions inherit from this base class,
    allowing callers to catch them with a single handler.
    """

    pass


class RegisterAccessError(MMUError):
    """Invalid register file access attempt.

    Raised when a segment index or field index lies outside 0-3.
    """

    def __init__(
        self,
        message: str,
        segment: int | None = None,
        field: int | None = None,
    ):
        """Initialize register access error with context.

        Args:
            message: Error description
            segment: The segment index that was requested
            field: The field index that was requested
        """
        super().__init__(message)
        self.segment = segment
        self.field = field


class BusWidthError(MMUError):
    """Value does not fit the bus it is driven onto.

    Raised when an address or data value is negative or wider than its bus,
    instead of silently truncating it.
    """

    def __init__(self, message: str, value: int | None = None, bits: int | None = None):
        """Initialize bus width error with context.

        Args:
            message: Error description
            value: The offending value
            bits: Width of the bus in bits
        """
        super().__init__(message)
        self.value = value
        self.bits = bits


class CoverageError(MMUError):
    """Insufficient functional coverage.

    Raised when the random regression doesn't hit every coverage bin the
    minimum number of times.
    """

    def __init__(self, message: str, failed_bins: list[str] | None = None):
        """Initialize coverage error with failed bin list.

        Args:
            message: Error description
            failed_bins: Coverage bins that didn't meet the threshold
        """
        super().__init__(message)
        self.failed_bins = failed_bins or []


class MismatchError(MMUError):
    """Hardware-model mismatch detected.

    Raised when the DUT's outputs don't match the model's expectation,
    or when the DUT produces an unresolvable value on the data channel.
    """

    def __init__(
        self,
        message: str,
        signal: str | None = None,
        expected_value: object = None,
        actual_value: object = None,
        cycle: int | None = None,
    ):
        """Initialize mismatch error with comparison context.

        Args:
            message: Error description
            signal: Name of the output that mismatched
            expected_value: Expected value from the model
            actual_value: Actual value from hardware
            cycle: Simulation cycle when mismatch occurred
        """
        super().__init__(message)
        self.signal = signal
        self.expected_value = expected_value
        self.actual_value = actual_value
        self.cycle = cycle


class TraceFormatError(MMUError):
    """Malformed line in a stimulus trace file."""

    def __init__(self, message: str, line_number: int | None = None):
        """Initialize trace format error.

        Args:
            message: Error description
            line_number: 1-based line number of the offending line
        """
        super().__init__(
            f"line {line_number}: {message}" if line_number is not None else message
        )
        self.line_number = line_number
