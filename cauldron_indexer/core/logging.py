# cauldron_indexer/core/logging.py
"""
Logging for the cauldron indexer.

Every logger lives under the ``cauldron_indexer`` root. Handlers are attached
once by IndexerLogger.configure(); classes log through LoggingMixin, passing
event context (tx hash, block, cauldron address...) as keyword arguments.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from msgspec import Struct

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR

ROOT_LOGGER_NAME = 'cauldron_indexer'
LOG_FILE = 'cauldron_indexer.log'
ERROR_LOG_FILE = 'cauldron_indexer_errors.log'

# context keys printed first, in this order; the rest follow sorted
LEADING_CONTEXT = ('network', 'block_number', 'tx_hash', 'log_index', 'contract_address', 'event_name')


def _env_flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class LogSettings(Struct, kw_only=True):
    level: str = "INFO"
    directory: Optional[str] = None
    console: bool = True
    file: bool = False
    structured: bool = True

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> 'LogSettings':
        return cls(
            level=env.get("CAULDRON_LOG_LEVEL", "INFO"),
            directory=env.get("CAULDRON_LOG_DIR") or str(Path.cwd() / "logs"),
            console=_env_flag(env, "CAULDRON_LOG_CONSOLE", True),
            file=_env_flag(env, "CAULDRON_LOG_FILE", False),
            structured=_env_flag(env, "CAULDRON_LOG_STRUCTURED", True),
        )


class ContextFormatter(logging.Formatter):
    """Appends the record's context as key=value pairs after the message"""

    def __init__(self, with_context: bool = True):
        super().__init__()
        self.with_context = with_context

    @staticmethod
    def render_context(context: Dict[str, Any]) -> str:
        keys = [key for key in LEADING_CONTEXT if key in context]
        keys += sorted(key for key in context if key not in LEADING_CONTEXT)
        return ' '.join(f"{key}={context[key]}" for key in keys)

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        line = f"{stamp} {record.levelname:<7} {record.name}: {record.getMessage()}"

        context = getattr(record, 'context', None)
        if self.with_context and context:
            line = f"{line} | {self.render_context(context)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class IndexerLogger:
    """Process-wide handler setup for the cauldron_indexer logger tree"""

    _configured = False
    _settings: Optional[LogSettings] = None

    @classmethod
    def configure(cls, settings: Optional[LogSettings] = None) -> None:
        if cls._configured:
            return

        settings = settings or LogSettings()
        level = getattr(logging, settings.level.upper(), logging.INFO)
        formatter = ContextFormatter(with_context=settings.structured)

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(level)
        root.handlers.clear()

        if settings.console:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(level)
            console.setFormatter(formatter)
            root.addHandler(console)

        if settings.file and settings.directory:
            directory = Path(settings.directory)
            directory.mkdir(parents=True, exist_ok=True)
            file_formatter = ContextFormatter(with_context=True)

            main_log = logging.FileHandler(directory / LOG_FILE)
            main_log.setLevel(level)
            main_log.setFormatter(file_formatter)
            root.addHandler(main_log)

            errors_log = logging.FileHandler(directory / ERROR_LOG_FILE)
            errors_log.setLevel(logging.ERROR)
            errors_log.setFormatter(file_formatter)
            root.addHandler(errors_log)

        cls._settings = settings
        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        """Drop handlers so configure() can run again"""
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()
        cls._settings = None
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'
        return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={'context': context})


class LoggingMixin:
    """Gives a class a logger named after its module and class, plus context-aware log_* helpers"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            module = self.__class__.__module__
            prefix = f'{ROOT_LOGGER_NAME}.'
            if module.startswith(prefix):
                module = module[len(prefix):]
            self._logger = IndexerLogger.get_logger(f"{module}.{self.__class__.__name__}")
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, ERROR, message, **context)
