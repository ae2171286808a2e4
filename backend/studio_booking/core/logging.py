"""
structlog setup for the API.

Application code logs through structlog; SDK and server libraries log
through the stdlib. Both end up on one stdout handler whose renderer is
picked by ENVIRONMENT: JSON lines in production, console text elsewhere.
Request fields bound by the logging middleware (request_id, method, path,
user_id) are merged into every event.
"""

import logging
import sys
import structlog
from studio_booking.core.config import Settings, get_settings

# Third-party loggers kept at WARNING so booking events stay readable
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "google.auth", "urllib3")


def _event_processors(production: bool) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if production:
        # JSON needs the traceback as a string field
        processors.append(structlog.processors.format_exc_info)
    return processors


def _renderer(settings: Settings):
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.DEBUG)


def _install_handler(settings: Settings) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ]
        )
    )

    root = logging.getLogger()
    # Drop the handler left by an earlier call (reload, second test app)
    root.handlers = [
        h for h in root.handlers if not isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))


def setup_logging() -> None:
    settings = get_settings()

    structlog.configure(
        processors=[
            *_event_processors(settings.ENVIRONMENT == "production"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _install_handler(settings)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
