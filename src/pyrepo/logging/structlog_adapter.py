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
"""Logging setup for pyrepo, rendered by structlog through stdlib logging.

Applications call :func:`configure_logging` once at startup::

    configure_logging(Config.from_file("pyrepo.yaml"))

The ``pyrepo.logging`` section controls the output::

    pyrepo:
      logging:
        format: json            # or console
        level:
          root: INFO
          pyrepo.criteria: DEBUG
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from pyrepo.core.config import Config

LOGGING_PREFIX = "pyrepo.logging"


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


class StructlogAdapter:
    """:class:`~pyrepo.logging.port.LoggingPort` backed by structlog.

    Library loggers are obtained with ``structlog.get_logger(__name__)``, so
    per-logger levels use dotted module names such as ``pyrepo.criteria.engine``.
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = {name: str(level).upper() for name, level in config.get_section(f"{LOGGING_PREFIX}.level").items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        self._format = str(config.get(f"{LOGGING_PREFIX}.format", "console")).lower()

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                _renderer(self._format),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))


def configure_logging(config: Config | None = None) -> StructlogAdapter:
    """Configure pyrepo's logging from *config* (packaged defaults when omitted)."""
    adapter = StructlogAdapter()
    adapter.configure(config if config is not None else Config.defaults())
    return adapter
