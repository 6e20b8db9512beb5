# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for StructlogAdapter — default LoggingPort implementation."""

import logging

import pytest
import structlog

from pyrepo.core.config import Config
from pyrepo.logging.port import LoggingPort
from pyrepo.logging.structlog_adapter import StructlogAdapter, configure_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    root_level = logging.getLogger().level
    yield
    logging.getLogger().setLevel(root_level)
    structlog.reset_defaults()
    logging.getLogger("pyrepo.criteria").setLevel(logging.NOTSET)


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_packaged_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyrepo": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyrepo": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_applies_per_logger_levels(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyrepo": {"logging": {"level": {"root": "INFO", "pyrepo.criteria": "DEBUG"}}}}))
        assert adapter._module_levels == {"pyrepo.criteria": "DEBUG"}
        assert logging.getLogger("pyrepo.criteria").level == logging.DEBUG


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("pyrepo.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("pyrepo.criteria", "warning")
        assert logging.getLogger("pyrepo.criteria").level == logging.WARNING


class TestConfigureLogging:
    def test_uses_packaged_defaults(self):
        adapter = configure_logging()
        assert isinstance(adapter, LoggingPort)
        assert adapter._format == "console"
        assert logging.getLogger().level == logging.INFO

    def test_applies_given_config(self):
        adapter = configure_logging(Config({"pyrepo": {"logging": {"format": "json", "level": {"root": "WARNING"}}}}))
        assert adapter._format == "json"
        assert logging.getLogger().level == logging.WARNING
