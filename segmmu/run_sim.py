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

"""Build an HDL implementation of the unit and run the cocotb tests against it.

Usage:
    segmmu-sim mmu.vhd                      # build, run all tests, show waves
    segmmu-sim mmu.vhd --hide               # no waveform viewer
    segmmu-sim mmu.vhd --testcase test_identity_translation --seed 1234
"""

import argparse
import logging
import shutil
import subprocess
import sys
from pathlib import Path

from cocotb_tools.runner import get_results, get_runner

from segmmu.config import (
    COCOTB_TEST_MODULES,
    DEFAULT_HDL_TOPLEVEL,
    DEFAULT_MIN_COVERAGE_COUNT,
    DEFAULT_NUM_TEST_LOOPS,
    DEFAULT_SIMULATOR,
    DEFAULT_STOP_TIME,
    DEFAULT_WAVEFORM_VIEWER,
    VHDL_STANDARD_ARGS,
    DUTSignalPaths,
)
from segmmu.cocotb_tests.test_common import TestConfig

logger = logging.getLogger(__name__)

VHDL_SUFFIXES = {".vhd", ".vhdl"}
VERILOG_SUFFIXES = {".v", ".sv", ".vh", ".svh"}
WAVEFORM_SUFFIXES = (".ghw", ".vcd", ".fst")


def resolve_sources(sources: list[Path]) -> list[Path]:
    """Resolve HDL sources, keeping analysis order.

    Raises:
        ValueError: If a source is missing or has an unrecognized suffix
    """
    resolved = []
    for source in sources:
        if source.suffix.lower() not in VHDL_SUFFIXES | VERILOG_SUFFIXES:
            raise ValueError(f"Unrecognized HDL source suffix: {source}")
        if not source.is_file():
            raise ValueError(f"HDL source not found: {source}")
        resolved.append(source.resolve())
    return resolved


def build_test_config(args: argparse.Namespace) -> TestConfig:
    """Translate command-line options into the cocotb tests' configuration."""
    return TestConfig(
        num_loops=args.num_loops,
        min_coverage_count=args.min_coverage,
        seed=args.seed,
        use_structured_logging=args.structured_logging,
        signal_paths=DUTSignalPaths(
            faults_active_low=not args.active_high_faults,
            outputs_registered=not args.combinational_outputs,
        ),
    )


def find_waveform(build_dir: Path, toplevel: str) -> Path | None:
    """Return the newest waveform dump in the build directory, if any."""
    candidates = [
        path
        for suffix in WAVEFORM_SUFFIXES
        for path in build_dir.rglob(f"*{suffix}")
    ]
    if not candidates:
        return None
    # Prefer a dump named after the top level
    named = [path for path in candidates if path.stem == toplevel]
    return max(named or candidates, key=lambda path: path.stat().st_mtime)


def open_waveform(viewer: str, waveform: Path) -> None:
    """Open a waveform dump, reusing a saved viewer layout when one exists."""
    if shutil.which(viewer) is None:
        print(f"Error: waveform viewer not found: {viewer}", file=sys.stderr)
        return
    layout = waveform.with_suffix(".gtkw")
    target = layout if layout.exists() else waveform
    logger.info("Opening %s in %s", target, viewer)
    subprocess.run([viewer, str(target)], check=False)


def run_simulation(args: argparse.Namespace) -> int:
    """Build the DUT, run the cocotb tests and return the number of failures."""
    sources = resolve_sources(args.sources)
    config = build_test_config(args)
    is_ghdl = args.simulator == "ghdl"

    runner = get_runner(args.simulator)
    runner.build(
        sources=sources,
        hdl_toplevel=args.toplevel,
        build_args=list(VHDL_STANDARD_ARGS) if is_ghdl else [],
        build_dir=args.build_dir,
        always=True,
        waves=not args.hide,
    )

    results_xml = runner.test(
        hdl_toplevel=args.toplevel,
        test_module=list(COCOTB_TEST_MODULES),
        testcase=args.testcase,
        seed=args.seed,
        test_args=list(VHDL_STANDARD_ARGS) if is_ghdl else [],
        plusargs=[f"--stop-time={args.stop_time}"] if is_ghdl else [],
        extra_env=config.to_environment(),
        build_dir=args.build_dir,
        waves=not args.hide,
    )

    num_tests, num_failed = get_results(results_xml)
    print(f"Finished running: {num_tests - num_failed}/{num_tests} tests passed")
    return num_failed


def main() -> None:
    """Build the HDL unit and run the cocotb testbench.

    Mirrors the analyze/elaborate/run/view flow: GHDL with VHDL-2008 by
    default, a stop time of 1000 us, and the waveform viewer opened
    afterwards unless --hide is given.
    """
    parser = argparse.ArgumentParser(
        description="Build an HDL segmented MMU and run the cocotb testbench"
    )
    parser.add_argument(
        "sources", nargs="+", type=Path, help="HDL sources of the DUT, in analysis order"
    )
    parser.add_argument(
        "--toplevel",
        default=DEFAULT_HDL_TOPLEVEL,
        help=f"HDL top-level entity/module (default: {DEFAULT_HDL_TOPLEVEL})",
    )
    parser.add_argument(
        "--simulator",
        default=DEFAULT_SIMULATOR,
        help=f"cocotb simulator name (default: {DEFAULT_SIMULATOR})",
    )
    parser.add_argument(
        "--testcase",
        action="append",
        help="Run only this test (repeatable; default: all tests)",
    )
    parser.add_argument(
        "--build-dir",
        type=Path,
        default=Path("sim_build"),
        help="Build directory (default: sim_build)",
    )
    parser.add_argument(
        "--stop-time",
        default=DEFAULT_STOP_TIME,
        help=f"GHDL simulation stop time (default: {DEFAULT_STOP_TIME})",
    )
    parser.add_argument(
        "--hide", action="store_true", help="Don't dump or display waveforms"
    )
    parser.add_argument(
        "--waveform-viewer",
        default=DEFAULT_WAVEFORM_VIEWER,
        help=f"Waveform viewer executable (default: {DEFAULT_WAVEFORM_VIEWER})",
    )
    parser.add_argument(
        "--num-loops",
        type=int,
        default=DEFAULT_NUM_TEST_LOOPS,
        help=f"Random regression length in bus cycles (default: {DEFAULT_NUM_TEST_LOOPS})",
    )
    parser.add_argument(
        "--min-coverage",
        type=int,
        default=DEFAULT_MIN_COVERAGE_COUNT,
        help=f"Minimum hits per coverage bin (default: {DEFAULT_MIN_COVERAGE_COUNT})",
    )
    parser.add_argument("--seed", type=int, help="Random seed for stimulus")
    parser.add_argument(
        "--active-high-faults",
        action="store_true",
        help="DUT drives fault pins '1' on fault (default: active-low)",
    )
    parser.add_argument(
        "--combinational-outputs",
        action="store_true",
        help="Sample DUT outputs before the clock edge instead of after it",
    )
    parser.add_argument(
        "--structured-logging",
        action="store_true",
        help="Log every bus cycle and a coverage summary",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        num_failed = run_simulation(args)
    except (ValueError, subprocess.CalledProcessError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.hide:
        waveform = find_waveform(args.build_dir, args.toplevel)
        if waveform is None:
            print("Warning: no waveform dump found", file=sys.stderr)
        else:
            open_waveform(args.waveform_viewer, waveform)

    if num_failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
