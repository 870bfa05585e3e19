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

"""Functional coverage tracking for the random regression.

Coverage
========

Each bus cycle is classified into an ``AccessOutcome`` and counted. The
random regression requires every outcome, and a translation hit on every
segment slot, to be observed a minimum number of times.
"""

from collections import Counter
from dataclasses import dataclass, field

from segmmu.config import NUM_SEGMENTS
from segmmu.exceptions import CoverageError
from segmmu.mmu_types import AccessOutcome


@dataclass
class TestStatistics:
    """Counts of observed outcomes over a test run.

    Attributes:
        cycles_executed: Number of bus cycles driven
        outcomes: Hit count per AccessOutcome
        segment_hits: Successful translations per segment slot
    """

    __test__ = False

    cycles_executed: int = 0
    outcomes: Counter = field(default_factory=Counter)
    segment_hits: Counter = field(default_factory=Counter)

    def record(self, outcome: AccessOutcome, segment: int | None = None) -> None:
        """Record one classified cycle.

        Args:
            outcome: Classification of the cycle
            segment: Matched segment for successful translations
        """
        self.cycles_executed += 1
        self.outcomes[outcome] += 1
        if segment is not None and outcome in (
            AccessOutcome.TRANSLATED,
            AccessOutcome.PROTECTION_FAULT,
        ):
            self.segment_hits[segment] += 1

    @property
    def coverage(self) -> dict[str, int]:
        """Flat bin name -> count mapping, including zero-hit bins."""
        bins = {outcome.value: self.outcomes[outcome] for outcome in AccessOutcome}
        for segment in range(NUM_SEGMENTS):
            bins[f"segment_{segment}_hit"] = self.segment_hits[segment]
        return bins

    def check_coverage(self, min_count: int) -> list[str]:
        """Return a description of every bin below the threshold."""
        return [
            f"{name}: {count} hits (need {min_count})"
            for name, count in self.coverage.items()
            if count < min_count
        ]

    def require_coverage(self, min_count: int) -> None:
        """Raise CoverageError if any bin is below the threshold."""
        issues = self.check_coverage(min_count)
        if issues:
            raise CoverageError(
                "Coverage verification failed:\n"
                + "\n".join(f"  - {issue}" for issue in issues),
                failed_bins=[issue.split(":")[0] for issue in issues],
            )

    def report(self) -> str:
        lines = [f"Cycles executed: {self.cycles_executed}"]
        lines.extend(f"  {name:18s}: {count:6d}" for name, count in self.coverage.items())
        return "\n".join(lines)
