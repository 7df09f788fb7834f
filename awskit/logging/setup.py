import logging
import sys
import warnings

from awskit import config

from .format import CompactFormatter, RequestTraceFormatter

# The log levels for modules are evaluated incrementally for logging granularity,
# from highest (DEBUG) to lowest (TRACE). Hence, each module below should have
# higher level which serves as the default.

default_log_levels = {
    "asyncio": logging.INFO,
    "botocore": logging.ERROR,
    "requests": logging.WARNING,
    "urllib3": logging.WARNING,
    "awskit.request": logging.INFO,
}

trace_log_levels = {
    "awskit.request": logging.DEBUG,
    "botocore": logging.DEBUG,
}


def get_log_level_from_config():
    # overriding the log level if AWSKIT_LOG has been set
    if config.AWSKIT_LOG:
        log_level = str(config.AWSKIT_LOG).upper()
        if log_level.lower() in config.TRACE_LOG_LEVELS:
            log_level = "DEBUG"
        log_level = logging._nameToLevel[log_level]
        return log_level

    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logging_from_config():
    log_level = get_log_level_from_config()
    setup_logging(log_level)

    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)
        setup_request_trace_logging()


def create_default_handler(log_level: int):
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(CompactFormatter())
    return log_handler


def setup_request_trace_logging():
    """
    Routes the records of the ``awskit.request`` logger to a dedicated handler that prints the request and response
    bodies of each call.
    """
    logger = logging.getLogger("awskit.request")
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(RequestTraceFormatter())
    logger.handlers = [handler]
    logger.propagate = False


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for awskit.

    :param log_level: the optional log level.
    """
    # set create a default handler for the root logger (basically logging.basicConfig but explicit)
    log_handler = create_default_handler(log_level)

    # replace any existing handlers
    logging.basicConfig(level=log_level, handlers=[log_handler], force=True)

    # disable some logs and warnings
    warnings.filterwarnings("ignore")
    logging.captureWarnings(True)

    # set log levels of loggers
    logging.root.setLevel(log_level)
    logging.getLogger("awskit").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(level)
