import os
import sys
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger as _loguru_logger


class LogFormat(StrEnum):
    """Supported logging output formats."""

    STANDARD = "standard"
    JSON = "json"


class LogLevel(StrEnum):
    """Supported log levels."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class LoggerConfig:
    """Configuration for logger sink setup.

    Args:
        level: Logging level
        format_type: Output format type
        service: Optional service name to include in log context
        use_stdout: Whether to use stdout instead of stderr
    """

    level: LogLevel = LogLevel.INFO
    format_type: LogFormat = LogFormat.STANDARD
    service: str | None = None
    use_stdout: bool = True

    @classmethod
    def from_env(cls, *, service: str | None = None) -> "LoggerConfig":
        """Build a logger configuration from LOG_LEVEL / LOG_JSON environment variables.

        Args:
            service: Optional service name to include in log context

        Returns:
            LoggerConfig resolved from the environment
        """
        level_env = os.getenv("LOGLEVEL", os.getenv("LOG_LEVEL", "INFO"))
        json_env = os.getenv("LOG_JSON", "false")
        serialize = json_env.lower() in {"1", "true", "yes", "on"}
        return cls(
            level=LogLevel(level_env.upper()),
            format_type=LogFormat.JSON if serialize else LogFormat.STANDARD,
            service=service,
        )


def _get_format_string(config: LoggerConfig) -> str:
    """Get the human-readable format string for the configuration.

    Args:
        config: Logger configuration

    Returns:
        Loguru format string
    """
    service_part = " | <blue>{extra[service]}</blue>" if config.service else ""
    return (
        "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level>"
        f"{service_part} | <cyan>{{name}}</cyan>:<cyan>{{function}}</cyan>:<cyan>{{line}}</cyan>"
        " - <level>{message}</level>"
    )


def configure_sinks(*, config: LoggerConfig) -> None:
    """Replace all loguru sinks with a single sink matching the configuration.

    Args:
        config: Logger configuration to apply
    """
    _loguru_logger.remove()

    output_stream = sys.stdout if config.use_stdout else sys.stderr

    if config.format_type == LogFormat.JSON:
        _loguru_logger.add(output_stream, level=config.level.value, serialize=True)
    else:
        _loguru_logger.add(
            output_stream,
            format=_get_format_string(config),
            level=config.level.value,
            colorize=True,
        )

    if config.service:
        _loguru_logger.configure(extra={"service": config.service})


class ReadingLogger:
    """Named logger facade over loguru.

    Sinks are shared process-wide and installed through ``configure_sinks``;
    this wrapper only binds the logger name and keeps call-site depth correct.

    Args:
        name: Logger name/identifier
    """

    def __init__(self, *, name: str) -> None:
        self._name = name
        self._logger = _loguru_logger.bind(logger_name=name)

    @property
    def name(self) -> str:
        """Name this logger was created with."""
        return self._name

    def trace(self, message: str, **kwargs: Any) -> None:
        """Log trace message."""
        self._logger.opt(depth=1).trace(message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.opt(depth=1).info(message, **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        """Log success message."""
        self._logger.opt(depth=1).success(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.opt(depth=1).error(message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical message."""
        self._logger.opt(depth=1).critical(message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.opt(depth=1).exception(message, **kwargs)


_loggers: dict[str, ReadingLogger] = {}


def get_logger(name: str) -> ReadingLogger:
    """Get or create a named logger instance.

    Args:
        name: Logger name/identifier (use __name__ for module loggers)

    Returns:
        Cached logger instance for the name

    Examples:
        logger = get_logger(__name__)
    """
    if name in _loggers:
        return _loggers[name]

    logger_instance = ReadingLogger(name=name)
    _loggers[name] = logger_instance
    return logger_instance
