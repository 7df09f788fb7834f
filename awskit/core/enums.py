import enum
from typing import Any, List


class StringEnum(str, enum.Enum):
    """
    Base class of the generated enums. Members compare equal to their string values, so plain strings can be used
    wherever an enum member is expected.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def exists(cls, value: Any) -> bool:
        """Whether the given value is a member (or the value of a member) of this enum."""
        if isinstance(value, cls):
            return True
        try:
            return value in cls._value2member_map_
        except TypeError:
            # unhashable values are never members
            return False

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]
