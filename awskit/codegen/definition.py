"""
An object model over the raw service description (botocore's ``service-2.json``) used by the code generator.

The objects wrap the raw dictionaries and resolve referenced shapes lazily through locator closures, so recursive
shapes (f.e. DynamoDB's ``AttributeValue``) can be represented without any special handling.
"""
from typing import Any, Callable, Dict, List, Optional

ShapeLocator = Callable[[str], "Shape"]
ServiceLocator = Callable[[], "ServiceDefinition"]


class UnknownShapeError(KeyError):
    pass


class UnknownOperationError(KeyError):
    pass


class Shape:
    _name: str
    _data: Dict[str, Any]
    _shape_locator: ShapeLocator
    _service_locator: ServiceLocator

    @staticmethod
    def create(
        name: str,
        data: Dict[str, Any],
        shape_locator: ShapeLocator,
        service_locator: ServiceLocator,
    ) -> "Shape":
        """
        Creates the shape wrapper matching the ``type`` of the raw shape.

        :param name: the name of the shape in the service description
        :param data: the raw shape dictionary
        :param shape_locator: resolves the name of a referenced shape to its Shape
        :param service_locator: returns the service the shape belongs to
        :return: an ExceptionShape, StructureShape, ListShape, MapShape, or a plain Shape for scalars
        """
        shape_type = data["type"]
        if shape_type == "structure":
            shape = ExceptionShape() if data.get("exception", False) else StructureShape()
        elif shape_type == "list":
            shape = ListShape()
        elif shape_type == "map":
            shape = MapShape()
        else:
            shape = Shape()

        shape._name = name
        shape._data = data
        shape._shape_locator = shape_locator
        shape._service_locator = service_locator
        return shape

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> str:
        return self._data["type"]

    @property
    def documentation_main(self) -> Optional[str]:
        return self._data.get("documentation")

    @property
    def enum(self) -> List[str]:
        return self._data.get("enum", [])

    @property
    def is_enum(self) -> bool:
        return self.type == "string" and bool(self.enum)

    @property
    def is_document(self) -> bool:
        return bool(self._data.get("document"))

    @property
    def timestamp_format(self) -> Optional[str]:
        return self._data.get("timestampFormat")

    @property
    def service(self) -> "ServiceDefinition":
        return self._service_locator()

    def get(self, name: str) -> Any:
        return self._data.get(name)

    def __repr__(self):
        return f"{type(self).__name__}({self._name})"


class Member:
    """
    A reference from a shape to another shape, carrying the serialization traits of the reference.
    """

    _data: Dict[str, Any]
    _shape_locator: ShapeLocator

    def __init__(self, data: Dict[str, Any], shape_locator: ShapeLocator):
        self._data = data
        self._shape_locator = shape_locator

    @property
    def shape(self) -> Shape:
        return self._shape_locator(self._data["shape"])

    @property
    def location(self) -> Optional[str]:
        return self._data.get("location")

    @property
    def location_name(self) -> Optional[str]:
        return self._data.get("locationName")

    @property
    def documentation(self) -> Optional[str]:
        return self._data.get("documentation")

    @property
    def timestamp_format(self) -> Optional[str]:
        return self._data.get("timestampFormat") or self.shape.timestamp_format

    def get(self, name: str) -> Any:
        return self._data.get(name)


class StructureMember(Member):
    _name: str
    _required: bool

    def __init__(
        self, name: str, data: Dict[str, Any], shape_locator: ShapeLocator, required: bool
    ):
        super().__init__(data, shape_locator)
        self._name = name
        self._required = required

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_required(self) -> bool:
        return self._required

    @property
    def is_idempotency_token(self) -> bool:
        return bool(self._data.get("idempotencyToken"))

    @property
    def is_streaming(self) -> bool:
        return bool(self._data.get("streaming") or self.shape.get("streaming"))

    @property
    def wire_name(self) -> str:
        """The name of the member in a JSON body."""
        return self.location_name or self._name

    @property
    def query_name(self) -> str:
        return self.location_name or self._name

    @property
    def header_name(self) -> str:
        return self.location_name or self._name

    def __repr__(self):
        return f"StructureMember({self._name}: {self._data['shape']})"


class ListMember(Member):
    pass


class MapKey(Member):
    pass


class MapValue(Member):
    pass


class StructureShape(Shape):
    @property
    def members(self) -> List[StructureMember]:
        required = set(self.required)
        return [
            StructureMember(name, data, self._shape_locator, name in required)
            for name, data in self._data.get("members", {}).items()
        ]

    def member(self, name: str) -> StructureMember:
        data = self._data.get("members", {}).get(name)
        if data is None:
            raise KeyError(f'Structure "{self.name}" has no member "{name}"')
        return StructureMember(name, data, self._shape_locator, name in self.required)

    def has_member(self, name: str) -> bool:
        return name in self._data.get("members", {})

    @property
    def required(self) -> List[str]:
        return self._data.get("required", [])

    @property
    def payload(self) -> Optional[str]:
        return self._data.get("payload")

    @property
    def is_union(self) -> bool:
        return bool(self._data.get("union"))


class ExceptionShape(StructureShape):
    @property
    def error(self) -> Dict[str, Any]:
        return self._data.get("error", {})

    @property
    def code(self) -> str:
        return self.error.get("code") or self.name

    @property
    def status_code(self) -> int:
        return self.error.get("httpStatusCode", 400)

    @property
    def sender_fault(self) -> bool:
        return bool(self.error.get("senderFault", False))


class ListShape(Shape):
    @property
    def member(self) -> ListMember:
        return ListMember(self._data["member"], self._shape_locator)

    @property
    def is_flattened(self) -> bool:
        return bool(self._data.get("flattened"))


class MapShape(Shape):
    @property
    def key(self) -> MapKey:
        return MapKey(self._data["key"], self._shape_locator)

    @property
    def value(self) -> MapValue:
        return MapValue(self._data["value"], self._shape_locator)


class Pagination:
    """
    The paginator configuration of one operation (an entry of botocore's ``paginators-1.json``).
    """

    _data: Dict[str, Any]

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    @staticmethod
    def _as_list(value) -> List[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]

    @property
    def input_token(self) -> List[str]:
        return self._as_list(self._data.get("input_token"))

    @property
    def output_token(self) -> List[str]:
        return self._as_list(self._data.get("output_token"))

    @property
    def result_key(self) -> List[str]:
        return self._as_list(self._data.get("result_key"))

    @property
    def more_results(self) -> Optional[str]:
        return self._data.get("more_results")

    @property
    def limit_key(self) -> Optional[str]:
        return self._data.get("limit_key")

    @property
    def is_simple(self) -> bool:
        """
        Whether all tokens and keys are plain member names. Paginators using JMESPath expressions (``A.B``,
        ``A || B``, ``A[-1].B``) are not supported by the generator.
        """
        names = self.input_token + self.output_token + self.result_key
        if self.more_results:
            names.append(self.more_results)
        return bool(names) and all(name.isidentifier() for name in names)


class Operation:
    _name: str
    _data: Dict[str, Any]
    _shape_locator: ShapeLocator
    _pagination: Optional[Pagination]

    def __init__(
        self,
        name: str,
        data: Dict[str, Any],
        shape_locator: ShapeLocator,
        pagination: Optional[Pagination] = None,
    ):
        self._name = name
        self._data = data
        self._shape_locator = shape_locator
        self._pagination = pagination

    @property
    def name(self) -> str:
        return self._name

    @property
    def method(self) -> str:
        return self._data.get("http", {}).get("method", "POST")

    @property
    def request_uri(self) -> str:
        return self._data.get("http", {}).get("requestUri", "/")

    @property
    def response_code(self) -> int:
        return self._data.get("http", {}).get("responseCode", 200)

    @property
    def documentation(self) -> Optional[str]:
        return self._data.get("documentation")

    @property
    def is_deprecated(self) -> bool:
        return bool(self._data.get("deprecated"))

    @property
    def input(self) -> Optional[StructureShape]:
        if "input" not in self._data:
            return None
        return self._shape_locator(self._data["input"]["shape"])

    @property
    def output(self) -> Optional[StructureShape]:
        if "output" not in self._data:
            return None
        return self._shape_locator(self._data["output"]["shape"])

    @property
    def errors(self) -> List[ExceptionShape]:
        return [self._shape_locator(error["shape"]) for error in self._data.get("errors", [])]

    @property
    def pagination(self) -> Optional[Pagination]:
        return self._pagination

    def __repr__(self):
        return f"Operation({self._name})"


class ServiceDefinition:
    """
    A service description, optionally combined with the paginator configuration of its operations.
    """

    _name: str
    _description: Dict[str, Any]
    _pagination: Dict[str, Any]
    _shapes: Dict[str, Shape]

    def __init__(
        self,
        name: str,
        description: Dict[str, Any],
        pagination: Optional[Dict[str, Any]] = None,
    ):
        self._name = name
        self._description = description
        self._pagination = (pagination or {}).get("pagination", {})
        self._shapes = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def metadata(self) -> Dict[str, Any]:
        return self._description.get("metadata", {})

    @property
    def api_version(self) -> str:
        return self.metadata["apiVersion"]

    @property
    def protocol(self) -> str:
        return self.metadata["protocol"]

    @property
    def protocols(self) -> List[str]:
        """All protocols the service supports, in order of preference."""
        return self.metadata.get("protocols") or [self.protocol]

    @property
    def endpoint_prefix(self) -> str:
        return self.metadata["endpointPrefix"]

    @property
    def signing_name(self) -> str:
        return self.metadata.get("signingName") or self.endpoint_prefix

    @property
    def target_prefix(self) -> Optional[str]:
        return self.metadata.get("targetPrefix")

    @property
    def json_version(self) -> str:
        return self.metadata.get("jsonVersion", "1.0")

    @property
    def service_id(self) -> str:
        return self.metadata.get("serviceId") or self.metadata.get(
            "serviceAbbreviation", self._name
        )

    @property
    def service_full_name(self) -> str:
        return self.metadata.get("serviceFullName", self.service_id)

    @property
    def global_endpoint(self) -> Optional[str]:
        return self.metadata.get("globalEndpoint")

    @property
    def documentation(self) -> Optional[str]:
        return self._description.get("documentation")

    @property
    def operation_names(self) -> List[str]:
        return list(self._description.get("operations", {}).keys())

    def get_operation(self, name: str) -> Operation:
        data = self._description.get("operations", {}).get(name)
        if data is None:
            raise UnknownOperationError(f'Operation "{name}" does not exist in "{self._name}"')

        pagination = self._pagination.get(name)
        return Operation(
            name,
            data,
            self.get_shape,
            Pagination(pagination) if pagination else None,
        )

    @property
    def shape_names(self) -> List[str]:
        return list(self._description.get("shapes", {}).keys())

    def get_shape(self, name: str) -> Shape:
        if name in self._shapes:
            return self._shapes[name]

        data = self._description.get("shapes", {}).get(name)
        if data is None:
            raise UnknownShapeError(f'Shape "{name}" does not exist in "{self._name}"')

        shape = Shape.create(name, data, self.get_shape, lambda: self)
        self._shapes[name] = shape
        return shape

    def __repr__(self):
        return f"ServiceDefinition({self._name}, {self.api_version})"
