import os
import sys
import json
import logging
from loguru import logger

# Remove the default sink to have full control over logging.
logger.remove()

# Read directly from the environment so config.py can import the logger.
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")
PROD_LOG_LEVEL = os.environ.get("PROD_LOG_LEVEL", "INFO")

# Chatty library loggers that only matter at WARNING and above.
LOGS_TO_SILENCE = ["httpx", "httpcore"]


def log_record_filter(record):
    if (record["name"] or "").split(".")[0] in LOGS_TO_SILENCE and record["level"].no < logger.level("WARNING").no:
        return False
    return True


def json_sink(message):
    """
    Custom sink function for JSON output in production environments.
    Anything bound with logger.bind() (order_id, recipient, template...) ends up
    as a top-level key so log aggregation can filter on it.
    """
    record = message.record
    log_entry = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
        "module": record["module"],
        "process": record["process"].id if record["process"] else None,
        "thread": record["thread"].id if record["thread"] else None,
        **record["extra"],
    }
    if record["exception"]:
        log_entry["exception"] = repr(record["exception"].value)
    print(json.dumps(log_entry, default=str))


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages toward Loguru sinks.
    This allows us to capture logs from libraries like Uvicorn and httpx.
    """
    def emit(self, record):
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _setup_logger_sinks():
    """Set up logger sinks based on environment."""
    if ENVIRONMENT == "dev":
        stdout_fmt = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level> {extra}"
        )
        stderr_fmt = stdout_fmt.replace("<green>", "<red>").replace("</green>", "</red>")

        logger.add(
            sys.stdout,
            level="DEBUG",
            format=stdout_fmt,
            enqueue=True,
            backtrace=False,
            colorize=True,
            filter=log_record_filter,
        )

        logger.add(
            sys.stderr,
            level="WARNING",
            format=stderr_fmt,
            enqueue=True,
            backtrace=True,
            colorize=True,
        )
    else:
        # Production mode - JSON lines
        logger.add(
            json_sink,
            level=PROD_LOG_LEVEL,
            enqueue=True,
            backtrace=False,  # Keep JSON logs concise and predictable
            diagnose=False,   # Never dump local variables (tokens, phone numbers)
            filter=log_record_filter,
        )


def setup_logging_interception():
    """
    Set up interception of all Python standard logging calls.
    This ensures that logs from libraries like Uvicorn are formatted consistently.
    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.DEBUG)

    # Remove every other logger's handlers and propagate to root logger
    for name in logging.root.manager.loggerDict.keys():
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True


# Initial logger configuration
_setup_logger_sinks()

# Set up logging interception for unified logging
setup_logging_interception()

# Export the configured logger for use throughout the application.
__all__ = ["logger", "setup_logging_interception"]
