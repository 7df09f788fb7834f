from typing import Any, Dict, Mapping, Optional

from awskit.core.exceptions import InvalidArgument
from awskit.core.request import Request
from awskit.core.value_object import member_arguments

# the key of the per-request region in the dict form of an input
REGION_KEY = "@region"


class Input:
    """
    Base class of the generated operation inputs. Inputs are mutable: paginators copy them and update the
    pagination tokens for each page.
    """

    _member_names: Dict[str, str] = {}

    region: Optional[str]

    def __init__(self, region: Optional[str] = None):
        # overrides the region of the client for this single request
        self.region = region

    @classmethod
    def create(cls, input=None):
        """
        Returns the given input, or creates one from a dict keyed by AWS member names (the ``@region`` key sets the
        region of the request). ``None`` creates an empty input.
        """
        if isinstance(input, cls):
            return input
        if input is None:
            return cls()
        if not isinstance(input, Mapping):
            raise InvalidArgument(
                f'Expected a "{cls.__name__}" or a dict, got "{type(input).__name__}".'
            )
        values = dict(input)
        region = values.pop(REGION_KEY, None)
        return cls(region=region, **member_arguments(cls, values))

    def request(self) -> Request:
        raise NotImplementedError

    def request_body(self) -> Dict[str, Any]:
        return {}

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        members = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if v is not None)
        return f"{type(self).__name__}({members})"
