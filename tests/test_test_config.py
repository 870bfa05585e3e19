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

"""Tests for environment-driven test configuration."""

from segmmu.cocotb_tests.test_common import TestConfig
from segmmu.config import DEFAULT_NUM_TEST_LOOPS, DUTSignalPaths


def test_defaults_from_empty_environment():
    config = TestConfig.from_environment({})
    assert config == TestConfig()
    assert config.num_loops == DEFAULT_NUM_TEST_LOOPS
    assert config.seed is None
    assert config.signal_paths.faults_active_low


def test_environment_values_parsed():
    config = TestConfig.from_environment(
        {
            "SEGMMU_NUM_LOOPS": "250",
            "SEGMMU_SEED": "0x10",
            "SEGMMU_STRUCTURED_LOGGING": "yes",
            "SEGMMU_FAULTS_ACTIVE_LOW": "0",
            "SEGMMU_OUTPUTS_REGISTERED": "false",
            "UNRELATED": "1",
        }
    )
    assert config.num_loops == 250
    assert config.seed == 16
    assert config.use_structured_logging
    assert not config.signal_paths.faults_active_low
    assert not config.signal_paths.outputs_registered


def test_environment_round_trip():
    config = TestConfig(
        num_loops=100,
        min_coverage_count=3,
        reconfigure_interval=16,
        clock_period_ns=4,
        seed=1234,
        use_structured_logging=True,
        signal_paths=DUTSignalPaths(faults_active_low=False),
    )
    env = config.to_environment()
    assert env["SEGMMU_SEED"] == "1234"
    assert TestConfig.from_environment(env) == config


def test_seed_omitted_when_unset():
    assert "SEGMMU_SEED" not in TestConfig().to_environment()
