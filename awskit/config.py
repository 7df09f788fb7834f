import logging
import os
from typing import Any, List, Optional, Tuple, Union

from awskit.constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REGION,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)

LOG = logging.getLogger(__name__)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    log_type = os.environ.get(env_var_name, "").lower().strip()
    return log_type if log_type in LOG_LEVELS else False


def parse_boolean_env(env_var_name: str) -> Optional[bool]:
    """Parse the value of the given env variable and return True/False, or None if it is not a boolean value."""
    value = os.environ.get(env_var_name, "").lower().strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    return None


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


def parse_int_env(env_var_name: str, default: int) -> int:
    """Parse the value of the given env variable as integer, falling back to the default if it is not a number."""
    value = os.environ.get(env_var_name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        LOG.warning("ignoring invalid value %r for %s, using %s", value, env_var_name, default)
        return default


# log level for awskit loggers (trace, debug, info, warn, error)
AWSKIT_LOG = eval_log_type("AWSKIT_LOG")

# whether debug mode is enabled
DEBUG = is_env_true("DEBUG") or AWSKIT_LOG in TRACE_LOG_LEVELS

# region used by clients which are not configured explicitly
DEFAULT_CLIENT_REGION = (
    os.environ.get("AWS_REGION", "").strip()
    or os.environ.get("AWS_DEFAULT_REGION", "").strip()
    or DEFAULT_REGION
)

# endpoint override for all clients (f.e. http://localhost:4566 for a local emulator)
ENDPOINT_URL = os.environ.get("AWS_ENDPOINT_URL", "").strip() or None

# HTTP timeout in seconds
HTTP_TIMEOUT = parse_int_env("AWSKIT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)

# number of retries for throttled or failed requests
MAX_RETRIES = parse_int_env("AWSKIT_MAX_RETRIES", DEFAULT_MAX_RETRIES)

# number of worker threads used to send requests in the background
MAX_WORKERS = parse_int_env("AWSKIT_MAX_WORKERS", DEFAULT_MAX_WORKERS)

# additional directories with botocore-style service models (os.pathsep separated)
EXTRA_MODEL_PATH = os.environ.get("AWSKIT_EXTRA_MODEL_PATH", "").strip()


def is_trace_logging_enabled() -> bool:
    return AWSKIT_LOG in TRACE_LOG_LEVELS


def extra_model_paths() -> List[str]:
    return [path for path in EXTRA_MODEL_PATH.split(os.pathsep) if path]


def collect_config_items() -> List[Tuple[str, Any]]:
    """Returns a list of key-value tuples of the environment-based configuration values."""
    return [
        ("AWSKIT_LOG", AWSKIT_LOG),
        ("DEBUG", DEBUG),
        ("DEFAULT_CLIENT_REGION", DEFAULT_CLIENT_REGION),
        ("ENDPOINT_URL", ENDPOINT_URL),
        ("HTTP_TIMEOUT", HTTP_TIMEOUT),
        ("MAX_RETRIES", MAX_RETRIES),
        ("MAX_WORKERS", MAX_WORKERS),
        ("EXTRA_MODEL_PATH", EXTRA_MODEL_PATH),
    ]
