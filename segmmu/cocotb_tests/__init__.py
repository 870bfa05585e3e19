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

"""Test cases and infrastructure for segmented MMU verification.

This package contains all cocotb test cases for an HDL implementation of
the unit. Tests need a simulator; run them through ``segmmu-sim``.

Test Modules
------------

Random Regression Tests:
    test_mmu_random
        Constrained-random bus cycles with periodic reconfiguration and
        functional coverage checks.

Directed Tests:
    test_mmu_directed
        Disabled unit, register round trip, identity translation, no-match,
        protection fault, overlap, sticky status flags, same-cycle
        semantics and data channel release.

Infrastructure:
    test_common
        TestConfig (environment-driven test configuration)

    test_helpers
        DUTInterface (port access, polarity, tri-state data channel)

    transaction_executor
        TransactionExecutor: execute-and-model pattern for bus cycles,
        ``start_executor`` test setup

Running Tests
-------------
From the repository root::

    segmmu-sim path/to/mmu.vhd
    segmmu-sim path/to/mmu.vhd --testcase test_identity_translation
"""

# Re-export the simulator-independent configuration for convenience.
# DUTInterface and TransactionExecutor need a running simulator; import them
# directly from their modules.
from segmmu.cocotb_tests.test_common import TestConfig

__all__ = [
    "TestConfig",
]
