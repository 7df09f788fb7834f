from typing import Any, Dict, Mapping

from awskit.core.exceptions import InvalidArgument


def member_arguments(owner: type, values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translates a dict keyed by AWS member names (``TableName``) into the keyword arguments of the generated
    constructor (``table_name``). The python names are accepted as keys as well.

    :raises InvalidArgument: if a key is not a member of the owner
    """
    member_names: Dict[str, str] = owner._member_names
    attributes = set(member_names.values())

    arguments = {}
    for key, value in values.items():
        if key in member_names:
            arguments[member_names[key]] = value
        elif key in attributes:
            arguments[key] = value
        else:
            raise InvalidArgument(f'Unknown parameter "{key}" for "{owner.__name__}".')
    return arguments


class ValueObject:
    """
    Base class of the generated value objects. Value objects are immutable: all members are set in the constructor
    and exposed as read-only properties.
    """

    # AWS member name to constructor argument, set by the generated subclasses
    _member_names: Dict[str, str] = {}

    @classmethod
    def create(cls, input):
        """
        Returns the given value object, or creates one from a dict keyed by AWS member names.
        """
        if isinstance(input, cls):
            return input
        if not isinstance(input, Mapping):
            raise InvalidArgument(
                f'Expected a "{cls.__name__}" or a dict, got "{type(input).__name__}".'
            )
        return cls(**member_arguments(cls, input))

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        members = ", ".join(
            f"{k.lstrip('_')}={v!r}" for k, v in vars(self).items() if v is not None
        )
        return f"{type(self).__name__}({members})"
