import logging
import sys
import structlog

def _resolve_level(log_level_str: str) -> int:
    level = logging.getLevelName(log_level_str.upper())
    return level if isinstance(level, int) else logging.WARNING

def configure_logging(log_level_str: str = "warning", json_logs: bool = False):
    # routes structlog through the "tmplt" stdlib logger so stdout stays free for rendered output.
    log_level = _resolve_level(log_level_str)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_logs:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    app_logger = logging.getLogger("tmplt")
    app_logger.handlers.clear()
    app_logger.addHandler(handler)
    app_logger.setLevel(log_level)
    app_logger.propagate = False

    structlog.get_logger(__name__).debug("logging_configured", level=log_level_str, json=json_logs)
