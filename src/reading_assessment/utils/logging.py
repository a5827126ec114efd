from reading_pyutils.logging import LogFormat, LoggerConfig, LogLevel, configure_sinks
from src.reading_assessment.config import AssessmentConfig


def setup_logging(
    *,
    config: AssessmentConfig | None = None,
    service: str | None = None,
    use_stdout: bool = True,
) -> None:
    """Configure the loguru sink for the pipeline.

    Without an explicit configuration, LOG_LEVEL / LOG_JSON are read from the
    environment.

    Args:
        config: Assessment configuration providing log level and format.
        service: Optional service name to include in log context.
        use_stdout: Whether to log to stdout instead of stderr.
    """
    if config is None:
        env_config = LoggerConfig.from_env(service=service)
        logger_config = LoggerConfig(
            level=env_config.level,
            format_type=env_config.format_type,
            service=service,
            use_stdout=use_stdout,
        )
    else:
        logger_config = LoggerConfig(
            level=LogLevel(config.log_level),
            format_type=LogFormat.JSON if config.log_json else LogFormat.STANDARD,
            service=service,
            use_stdout=use_stdout,
        )
    configure_sinks(config=logger_config)
