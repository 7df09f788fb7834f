import keyword
import re
from typing import Iterable, Set

from awskit.utils.strings import camel_to_snake_case, snake_to_camel_case

# "type" is a soft keyword in recent python versions, treat it as reserved
KEYWORDS = list(keyword.kwlist) + ["type"]
is_keyword = KEYWORDS.__contains__

# names bound at module level in every generated module
GENERATED_MODULE_NAMES = {
    # typing and stdlib
    "annotations",
    "copy",
    "Any",
    "Dict",
    "Iterator",
    "List",
    "Optional",
    "Tuple",
    "Union",
    "datetime",
    "json",
    "uuid",
    # runtime
    "AbstractApi",
    "ClientException",
    "Input",
    "InvalidArgument",
    "Request",
    "Response",
    "Result",
    "ServerException",
    "StringEnum",
    "ValueObject",
    "build_uri",
    "conversion",
    # sibling modules
    "client",
    "enums",
    "exceptions",
    "inputs",
    "results",
    "value_objects",
}

# the generated constructors take one parameter per member, which must not shadow the names the constructors use
RESERVED_ATTRIBUTE_NAMES = {"self", "super", "value_objects"}


def to_valid_python_name(spec_name: str) -> str:
    sanitized = re.sub(r"[^0-9a-zA-Z_]+", "_", spec_name)

    if sanitized[0].isnumeric():
        sanitized = "i_" + sanitized

    if is_keyword(sanitized):
        sanitized += "_"

    if sanitized.startswith("__"):
        sanitized = sanitized[1:]

    return sanitized


def class_name(shape_name: str) -> str:
    """
    Returns the name of the class generated for a shape. Names which would shadow a name bound by the generated
    modules get an underscore suffix (f.e. MediaConvert's ``Input`` structure turns into ``Input_``).
    """
    name = to_valid_python_name(shape_name).lstrip("_") or "Shape"
    if name[0].isnumeric():
        name = "i_" + name
    # class names start upper case, so they never collide with the (snake_case) attribute names
    name = name[0].upper() + name[1:]
    while name in GENERATED_MODULE_NAMES or is_keyword(name):
        name += "_"
    return name


def attribute_name(member_name: str, reserved: Iterable[str] = ()) -> str:
    """
    Returns the snake_case attribute (and keyword argument) name for a member.

    :param member_name: the name of the member in the service description
    :param reserved: names which are already taken in the owning class
    :return: the attribute name
    """
    name = camel_to_snake_case(re.sub(r"[^0-9a-zA-Z_]+", "_", member_name)).strip("_")
    if not name:
        name = "member"
    if name[0].isnumeric():
        name = "i_" + name

    reserved = set(reserved) | RESERVED_ATTRIBUTE_NAMES
    while is_keyword(name) or name in reserved:
        name += "_"
    return name


def constant_name(value: str) -> str:
    """
    Returns the name of the enum member for the given value, f.e. ``HEVC_444`` for ``HEVC 444``.
    """
    name = re.sub(r"[^0-9a-zA-Z]+", "_", value).strip("_").upper()
    if not name:
        name = "EMPTY"
    if name[0].isnumeric():
        name = "V_" + name
    return name


class NameAllocator:
    """
    Allocates unique names within one generated class.
    """

    taken: Set[str]

    def __init__(self, reserved: Iterable[str] = ()):
        self.taken = set(reserved)

    def attribute(self, member_name: str) -> str:
        name = attribute_name(member_name, self.taken)
        self.taken.add(name)
        return name

    def constant(self, value: str) -> str:
        name = constant_name(value)
        while name in self.taken:
            name += "_"
        self.taken.add(name)
        return name


def client_class_name(service_id: str) -> str:
    """
    Returns the name of the client class of a service, f.e. ``DynamoDbClient`` for ``DynamoDB``.
    """
    name = re.sub(r"[^0-9a-zA-Z]+", "", service_id)
    return snake_to_camel_case(camel_to_snake_case(name)) + "Client"


def method_name(operation_name: str) -> str:
    """
    Returns the name of the client method of an operation, f.e. ``batch_get_item`` for ``BatchGetItem``.
    """
    name = camel_to_snake_case(operation_name)
    if is_keyword(name) or name in ("close", "configuration"):
        name += "_"
    return name


def package_name(service_name: str) -> str:
    """
    Returns the name of the generated package of a service (handles service names which are reserved keywords in
    python, f.e. lambda).
    """
    name = service_name.replace("-", "_")
    if is_keyword(name):
        name += "_"
    return name
