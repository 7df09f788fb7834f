from typing import Any, Dict, Mapping, Optional, Union

from awskit import config
from awskit.core.exceptions import InvalidArgument

OPTION_REGION = "region"
OPTION_ENDPOINT = "endpoint"
OPTION_ACCESS_KEY_ID = "access_key_id"
OPTION_SECRET_ACCESS_KEY = "secret_access_key"
OPTION_SESSION_TOKEN = "session_token"
OPTION_PROFILE = "profile"
OPTION_TIMEOUT = "timeout"
OPTION_MAX_RETRIES = "max_retries"
OPTION_MAX_WORKERS = "max_workers"
OPTION_DEBUG = "debug"


def _defaults() -> Dict[str, Any]:
    # evaluated lazily, so tests can patch the config module
    return {
        OPTION_REGION: config.DEFAULT_CLIENT_REGION,
        OPTION_ENDPOINT: config.ENDPOINT_URL,
        OPTION_ACCESS_KEY_ID: None,
        OPTION_SECRET_ACCESS_KEY: None,
        OPTION_SESSION_TOKEN: None,
        OPTION_PROFILE: None,
        OPTION_TIMEOUT: config.HTTP_TIMEOUT,
        OPTION_MAX_RETRIES: config.MAX_RETRIES,
        OPTION_MAX_WORKERS: config.MAX_WORKERS,
        OPTION_DEBUG: config.DEBUG,
    }


class Configuration:
    """
    The options of a client. Unset options fall back to the environment-based defaults of ``awskit.config``.

    Example::

        Configuration.create({"region": "eu-west-1", "endpoint": "http://localhost:4566"})
    """

    _data: Dict[str, Any]
    _user_data: Dict[str, Any]

    def __init__(self, data: Dict[str, Any], user_data: Dict[str, Any]):
        self._data = data
        self._user_data = user_data

    @classmethod
    def create(cls, options: Optional[Mapping[str, Any]] = None) -> "Configuration":
        """
        Creates a configuration from the given options.

        :param options: option name to value, None values are ignored
        :return: the configuration
        :raises InvalidArgument: if an option is not known
        """
        options = {k: v for k, v in (options or {}).items() if v is not None}
        data = _defaults()

        if unknown := sorted(set(options) - set(data)):
            raise InvalidArgument(
                f'Invalid option(s) "{", ".join(unknown)}" passed to "{cls.__name__}". '
                f'Valid options are "{", ".join(sorted(data))}".'
            )

        if bool(options.get(OPTION_ACCESS_KEY_ID)) != bool(options.get(OPTION_SECRET_ACCESS_KEY)):
            raise InvalidArgument(
                f'The options "{OPTION_ACCESS_KEY_ID}" and "{OPTION_SECRET_ACCESS_KEY}" must be set together.'
            )

        data.update(options)
        return cls(data, options)

    def get(self, name: str) -> Any:
        if name not in self._data:
            raise InvalidArgument(f'Invalid option "{name}" passed to "{type(self).__name__}::get".')
        return self._data[name]

    def has(self, name: str) -> bool:
        return self._data.get(name) is not None

    def is_default(self, name: str) -> bool:
        """Whether the option was not set explicitly (i.e., its value comes from the environment or the defaults)."""
        return name not in self._user_data

    def __repr__(self):
        # never print credentials
        shown = {
            k: v
            for k, v in self._data.items()
            if k not in (OPTION_SECRET_ACCESS_KEY, OPTION_SESSION_TOKEN)
        }
        return f"Configuration({shown})"


ConfigurationLike = Union[Configuration, Mapping[str, Any], None]


def to_configuration(value: ConfigurationLike) -> Configuration:
    if isinstance(value, Configuration):
        return value
    return Configuration.create(value)
