import logging
import sys

import structlog

SERVICE_NAME = "todo-kv-api"


def _add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(env: str = "development", level: str = "INFO") -> None:
    """
    Configure structlog for the Lambda runtime.

    Production emits one JSON object per line (CloudWatch picks them up as-is),
    tracebacks flattened into the event. Anything else gets the console renderer.
    """
    log_level = logging.getLevelName(level)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    processors: list = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if env == "production":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    # SQL echo only when debugging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_level <= logging.DEBUG else logging.WARNING
    )
