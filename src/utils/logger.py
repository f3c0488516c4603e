"""
Structured JSON logging for the phone mode service.

Every record carries the service name and environment so that lookups and
mutations from several deployments can be told apart in one log stream.
Keyword arguments passed to the logging calls become JSON fields.
"""

import inspect
import logging
import os

from pythonjsonlogger import jsonlogger

# Attributes the logging module sets on every LogRecord; extra fields with
# these names would make makeRecord() raise
RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def resolve_log_level(name: str | None) -> int:
    """Map a LOG_LEVEL value to a logging level, defaulting to INFO."""
    if not name:
        return logging.INFO
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.INFO)


class Logger(logging.LoggerAdapter):
    _instance = None
    _initialized = False

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not Logger._initialized:
            formatter = jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(message)s",
                rename_fields={"asctime": "@timestamp", "levelname": "log_level"},
                static_fields={
                    "service": os.getenv("SERVICE_NAME", "phone-manager-api"),
                    "environment": os.getenv("ENVIRONMENT", "local"),
                },
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)

            logger = logging.getLogger("phone_mode")
            logger.setLevel(resolve_log_level(os.getenv("LOG_LEVEL")))
            logger.addHandler(handler)

            super().__init__(logger)
            Logger._initialized = True

    @staticmethod
    def _caller_location() -> str:
        # Two frames up: past this helper and the error/exception wrapper
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return "unknown:0"
        return f"{caller.f_code.co_filename}:{caller.f_lineno}"

    def error(self, msg: str, *args: tuple, **kwargs: dict) -> None:
        """Log an error with the caller's file and line attached."""
        kwargs["file"] = self._caller_location()
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(
        self, msg: str, *args: tuple, exc_info: bool = True, **kwargs: dict
    ) -> None:
        """Log an error with traceback and the caller's file and line attached."""
        kwargs["file"] = self._caller_location()
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        passthrough = {}
        for key in ("exc_info", "stack_info", "stacklevel"):
            value = kwargs.pop(key, None)
            if value is not None:
                passthrough[key] = value

        if kwargs:
            passthrough["extra"] = {
                (f"{key}_" if key in RESERVED_RECORD_KEYS else key): value
                for key, value in kwargs.items()
            }
        return msg, passthrough


logger = Logger()
logger.info(
    f"Logging level set to {logging.getLevelName(logger.logger.getEffectiveLevel())}"
)
