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

"""Bit-field helpers for descriptor and address manipulation.

BIT UTILS
=========

This module provides utility functions for working with hardware-style
bit vectors held in Python ints:
- Field extraction with Verilog/VHDL-style [high:low] bounds
- Single-bit tests
- Width checks for values driven onto a bus

Constants like MASK32, OFFSET_BITS, etc. should be imported from config.
"""

from segmmu.exceptions import BusWidthError

__all__ = ["extract_bits", "bit_is_set", "ensure_width", "format_hex"]


def extract_bits(value: int, high: int, low: int) -> int:
    """Extract bits [high:low] of a value, shifted down to bit 0.

    Args:
        value: Source bit vector
        high: Index of the most significant bit to keep (inclusive)
        low: Index of the least significant bit to keep (inclusive)

    Returns:
        The selected field as a non-negative int

    Example:
        >>> hex(extract_bits(0xDEADBEEF, 31, 22))
        '0x37a'
        >>> extract_bits(0x403, 9, 0)
        3
    """
    width = high - low + 1
    return (value >> low) & ((1 << width) - 1)


def bit_is_set(value: int, bit: int) -> bool:
    """Return True if the given bit of value is 1."""
    return bool((value >> bit) & 1)


def ensure_width(value: int, bits: int, name: str = "value") -> int:
    """Ensure value fits an unsigned bus of the given width.

    Args:
        value: Value to validate
        bits: Bus width in bits
        name: Signal name for the error message

    Returns:
        The value (unchanged) if it fits

    Raises:
        BusWidthError: If value is negative or wider than the bus

    Examples:
        >>> ensure_width(0xFFFFFFFF, 32, "address")
        4294967295
        >>> ensure_width(1 << 32, 32, "address")  # doctest: +SKIP
        Traceback: BusWidthError
    """
    if value < 0 or value >> bits:
        raise BusWidthError(
            f"{name} 0x{value:x} does not fit a {bits}-bit bus",
            value=value,
            bits=bits,
        )
    return value


def format_hex(value: int, bits: int) -> str:
    """Format value as zero-padded hex sized for a bus of the given width."""
    return f"0x{value:0{(bits + 3) // 4}X}"
