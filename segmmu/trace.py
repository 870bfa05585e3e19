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

"""Replay a text stimulus file through the software model.

Trace Format
============

One bus cycle per line; ``#`` starts a comment; blank lines are skipped.
Numbers are decimal or prefixed hex/binary (``0x``, ``0b``):

    reg   w <address> <data>     # register write, address[3:0] = seg/field
    reg   r <address>            # register read
    xlate r <address>            # translate a read
    xlate w <address>            # translate a write

Example::

    # identity-map the first KiB through segment 0
    reg   w 0x0 0x00000000       # phys_base
    reg   w 0x1 0x00000000       # log_base
    reg   w 0x2 0xFFFFFC00       # mask
    reg   w 0x3 0x08000000       # status: E
    xlate w 0x00000123

Usage:
    segmmu-trace stimulus.txt
    segmmu-trace stimulus.txt --descriptors --warn-overlaps
"""

import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import combinations
from pathlib import Path

from segmmu.config import DATA_WIDTH, LOGICAL_ADDRESS_WIDTH
from segmmu.exceptions import BusWidthError, TraceFormatError
from segmmu.generators.transaction_generator import segments_overlap
from segmmu.mmu_types import AccessOutcome
from segmmu.models.bus_arbiter import BusInputs
from segmmu.models.mmu_model import BusOutputs, SegmentedMMU, classify_access
from segmmu.models.register_file import SegmentDescriptor
from segmmu.utils.bit_utils import ensure_width
from segmmu.utils.transaction_logger import TransactionLogger

logger = logging.getLogger(__name__)

_MODES = {"reg": False, "xlate": True}
_ACCESSES = {"r": False, "w": True}


@dataclass(frozen=True)
class TraceCycle:
    """One replayed cycle.

    Attributes:
        cycle: Cycle number (0 = first cycle after reset)
        inputs: Inputs applied
        outputs: Outputs the model produced
        outcome: Classification against the pre-edge descriptors
    """

    cycle: int
    inputs: BusInputs
    outputs: BusOutputs
    outcome: AccessOutcome

    def __str__(self) -> str:
        return TransactionLogger.format_cycle(
            self.cycle, self.inputs, self.outputs, self.outcome
        )


def _parse_number(token: str, bits: int, name: str, line_number: int) -> int:
    try:
        value = int(token, 0)
        ensure_width(value, bits, name)
    except (ValueError, BusWidthError) as e:
        raise TraceFormatError(f"bad {name} '{token}': {e}", line_number) from e
    return value


def parse_trace_line(line: str, line_number: int = 0) -> BusInputs | None:
    """Parse one stimulus line.

    Args:
        line: Raw line text
        line_number: 1-based line number for error messages

    Returns:
        BusInputs for the cycle, or None for blank and comment-only lines

    Raises:
        TraceFormatError: If the line is malformed

    Example:
        >>> parse_trace_line("xlate w 0x123")
        BusInputs(address=291, is_write=True, mode_select=True, data_in=0)
    """
    tokens = line.split("#", 1)[0].split()
    if not tokens:
        return None

    if len(tokens) < 2:
        raise TraceFormatError(
            "expected '<reg|xlate> <r|w> <address> [data]'", line_number
        )
    mode, access, *operands = [token.lower() for token in tokens]
    if mode not in _MODES:
        raise TraceFormatError(f"unknown mode '{tokens[0]}' (reg|xlate)", line_number)
    if access not in _ACCESSES:
        raise TraceFormatError(f"unknown access '{tokens[1]}' (r|w)", line_number)

    mode_select = _MODES[mode]
    is_write = _ACCESSES[access]
    expected = 2 if is_write and not mode_select else 1
    if len(operands) != expected:
        raise TraceFormatError(
            f"'{mode} {access}' takes {expected} operand(s), got {len(operands)}",
            line_number,
        )

    address = _parse_number(operands[0], LOGICAL_ADDRESS_WIDTH, "address", line_number)
    data_in = 0
    if expected == 2:
        data_in = _parse_number(operands[1], DATA_WIDTH, "data", line_number)
    return BusInputs(address, is_write=is_write, mode_select=mode_select, data_in=data_in)


def parse_trace(lines: Iterable[str]) -> list[BusInputs]:
    """Parse every cycle of a stimulus, skipping blanks and comments."""
    cycles = []
    for line_number, line in enumerate(lines, start=1):
        inputs = parse_trace_line(line, line_number)
        if inputs is not None:
            cycles.append(inputs)
    return cycles


def load_trace(path: Path) -> list[BusInputs]:
    """Read and parse a stimulus file."""
    with path.open() as f:
        return parse_trace(f)


def replay(
    cycles: Iterable[BusInputs], mmu: SegmentedMMU | None = None
) -> Iterator[TraceCycle]:
    """Clock every cycle through a model, yielding what each one did.

    Args:
        cycles: Inputs to apply, one per clock edge
        mmu: Model to drive (a freshly reset one if None)
    """
    if mmu is None:
        mmu = SegmentedMMU()
    for inputs in cycles:
        cycle = mmu.cycle
        outcome = classify_access(mmu.descriptors, inputs)
        outputs = mmu.clock(inputs)
        yield TraceCycle(cycle, inputs, outputs, outcome)


def overlapping_pairs(
    descriptors: tuple[SegmentDescriptor, ...],
) -> list[tuple[int, int]]:
    """Slot pairs whose logical ranges share an address."""
    return [
        (a, b)
        for a, b in combinations(range(len(descriptors)), 2)
        if segments_overlap(descriptors[a], descriptors[b])
    ]


def main() -> None:
    """Replay a stimulus file and print one line per cycle."""
    parser = argparse.ArgumentParser(
        description="Replay a bus-cycle stimulus file through the segmented MMU model"
    )
    parser.add_argument("trace", type=Path, help="Stimulus file")
    parser.add_argument(
        "--descriptors",
        action="store_true",
        help="Print the register file contents after the last cycle",
    )
    parser.add_argument(
        "--warn-overlaps",
        action="store_true",
        help="Warn about overlapping descriptors after the last cycle",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cycles = load_trace(args.trace)
    except (OSError, TraceFormatError) as e:
        print(f"Error: {args.trace}: {e}", file=sys.stderr)
        sys.exit(1)

    mmu = SegmentedMMU()
    for traced in replay(cycles, mmu):
        print(traced)

    if args.descriptors:
        for segment, descriptor in enumerate(mmu.descriptors):
            print(TransactionLogger.format_descriptor(segment, descriptor))

    if args.warn_overlaps:
        for a, b in overlapping_pairs(mmu.descriptors):
            logger.warning("Segments %d and %d overlap; shared addresses fault", a, b)


if __name__ == "__main__":
    main()
