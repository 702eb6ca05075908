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
"""Structlog output for the ``pyrewind`` logger tree.

The sequencer logs in two ways: lifecycle events through structlog
(``pyrewind.sequencer.events``) and engine internals through stdlib
``logging``.  :func:`configure_logging` routes both to one stream, rendered
as console lines or JSON, using the ``pyrewind.logging`` config section.

Only the ``pyrewind`` logger receives a handler.  The root logger and any
handlers the application installed are left alone.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import IO, Any

import structlog

from pyrewind.core.config import Config, config_properties

LIBRARY_LOGGER = "pyrewind"
_FORMATS = ("console", "json")


@config_properties(prefix="pyrewind.logging")
@dataclass
class LoggingProperties:
    """Settings under ``pyrewind.logging``.

    ``level`` maps logger names to level names.  Its ``root`` entry applies
    to the ``pyrewind`` logger; a plain string (e.g. from
    ``PYREWIND_LOGGING_LEVEL``) is read as the ``root`` entry.
    """

    enabled: bool = True
    format: str = "console"
    level: dict[str, str] = field(default_factory=lambda: {"root": "INFO"})

    def levels(self) -> dict[str, str]:
        if isinstance(self.level, dict):
            return {str(k): str(v).upper() for k, v in self.level.items()}
        return {"root": str(self.level).upper()}


class _LibraryHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Handler installed on the ``pyrewind`` logger by :class:`StructlogAdapter`."""


class StructlogAdapter:
    """Configures structlog and the ``pyrewind`` logger from :class:`LoggingProperties`.

    Args:
        stream: Where rendered lines go.  Defaults to ``sys.stdout``.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._properties = LoggingProperties()

    @property
    def properties(self) -> LoggingProperties:
        return self._properties

    def configure(self, config: Config) -> LoggingProperties:
        """Bind ``pyrewind.logging`` and apply it.

        Raises:
            ValueError: The configured format is neither ``console`` nor ``json``.
        """
        props = config.bind(LoggingProperties)
        processors = self._processors(props.format)

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        self._install_handler()
        for name, level in props.levels().items():
            self.set_level(LIBRARY_LOGGER if name == "root" else name, level)

        self._properties = props
        return props

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the level of stdlib logger *name*; unknown level names mean INFO."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    @staticmethod
    def _processors(fmt: str) -> list[structlog.types.Processor]:
        fmt = fmt.lower()
        if fmt not in _FORMATS:
            raise ValueError(
                f"Unknown logging format: '{fmt}'. Available formats: {', '.join(_FORMATS)}"
            )
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        if fmt == "json":
            processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors

    def _install_handler(self) -> None:
        library = logging.getLogger(LIBRARY_LOGGER)
        _remove_library_handlers(library)
        handler = _LibraryHandler(self._stream or sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        library.addHandler(handler)
        library.propagate = False


def _remove_library_handlers(library: logging.Logger) -> None:
    for handler in [h for h in library.handlers if isinstance(h, _LibraryHandler)]:
        library.removeHandler(handler)


def configure_logging(config: Config, stream: IO[str] | None = None) -> StructlogAdapter | None:
    """Apply ``pyrewind.logging`` from *config*.

    Returns the configured adapter, or ``None`` when
    ``pyrewind.logging.enabled`` is false.
    """
    if not config.bind(LoggingProperties).enabled:
        return None
    adapter = StructlogAdapter(stream)
    adapter.configure(config)
    return adapter


def reset_logging() -> None:
    """Undo :func:`configure_logging`: drop the handler and restore structlog defaults."""
    library = logging.getLogger(LIBRARY_LOGGER)
    _remove_library_handlers(library)
    library.propagate = True
    library.setLevel(logging.NOTSET)
    structlog.reset_defaults()
