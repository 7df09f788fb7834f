import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from awskit.codegen.definition import (
    ExceptionShape,
    ListShape,
    MapShape,
    Operation,
    Pagination,
    ServiceDefinition,
    Shape,
    StructureShape,
)
from awskit.codegen.naming import class_name

LOG = logging.getLogger(__name__)

SUPPORTED_PROTOCOLS = ["json", "rest-json"]

# the modules of a generated package, in the order they are written
MODULE_ENUMS = "enums"
MODULE_VALUE_OBJECTS = "value_objects"
MODULE_EXCEPTIONS = "exceptions"
MODULE_INPUTS = "inputs"
MODULE_RESULTS = "results"
MODULE_CLIENT = "client"

DIRECTION_INPUT = "input"
DIRECTION_OUTPUT = "output"


class UnsupportedProtocolError(Exception):
    def __init__(self, service: str, protocols: List[str]):
        self.service = service
        self.protocols = protocols
        super().__init__(
            f'The protocols of "{service}" ({", ".join(protocols)}) are not supported, '
            f'supported protocols are: {", ".join(SUPPORTED_PROTOCOLS)}'
        )


def select_protocol(service: ServiceDefinition) -> str:
    for protocol in service.protocols:
        if protocol in SUPPORTED_PROTOCOLS:
            return protocol
    raise UnsupportedProtocolError(service.name, service.protocols)


def _allocate(names: Iterable[str]) -> Dict[str, str]:
    """Assigns unique class names to the given shape names (in order)."""
    allocated: Dict[str, str] = {}
    taken: Set[str] = set()
    for name in names:
        candidate = class_name(name)
        while candidate in taken:
            candidate += "_"
        taken.add(candidate)
        allocated[name] = candidate
    return allocated


class GeneratorContext:
    """
    Everything the module generators need to know about the service: the selected operations, the shapes reachable
    from them (and in which direction they are used), and the class name of every generated class.
    """

    service: ServiceDefinition
    protocol: str
    operations: List[Operation]
    doc: bool

    # structure shape names which need request_body (input) / from_payload (output)
    input_structures: Set[str]
    output_structures: Set[str]
    enum_shapes: Set[str]
    exception_shapes: Set[str]

    def __init__(
        self,
        service: ServiceDefinition,
        operation_names: Optional[List[str]] = None,
        doc: bool = True,
    ):
        self.service = service
        self.protocol = select_protocol(service)
        self.doc = doc
        names = operation_names or service.operation_names
        self.operations = [service.get_operation(name) for name in names]

        self.input_structures = set()
        self.output_structures = set()
        self.enum_shapes = set()
        self.exception_shapes = set()
        self._visited: Set[Tuple[str, str]] = set()

        for operation in self.operations:
            if operation.input:
                self._walk_members(operation.input, DIRECTION_INPUT)
            if operation.output:
                self._walk_members(operation.output, DIRECTION_OUTPUT)
            for error in operation.errors:
                self.exception_shapes.add(error.name)
                self._walk_members(error, DIRECTION_OUTPUT)

        self.enum_names = _allocate(sorted(self.enum_shapes))
        self.value_object_names = _allocate(sorted(self.input_structures | self.output_structures))
        self.exception_names = _allocate(sorted(self.exception_shapes))
        self.input_names = _allocate(
            sorted({op.input.name for op in self.operations if op.input})
        )
        self.result_names = _allocate(
            sorted({op.output.name for op in self.operations if op.output})
        )

    def _walk_members(self, structure: StructureShape, direction: str):
        for member in structure.members:
            self._walk(member.shape, direction)

    def _walk(self, shape: Shape, direction: str):
        key = (shape.name, direction)
        if key in self._visited:
            return
        self._visited.add(key)

        if isinstance(shape, StructureShape):
            if shape.is_document:
                return
            if direction == DIRECTION_INPUT:
                self.input_structures.add(shape.name)
            else:
                self.output_structures.add(shape.name)
            self._walk_members(shape, direction)
        elif isinstance(shape, ListShape):
            self._walk(shape.member.shape, direction)
        elif isinstance(shape, MapShape):
            self._walk(shape.key.shape, direction)
            self._walk(shape.value.shape, direction)
        elif shape.is_enum:
            self.enum_shapes.add(shape.name)

    @property
    def value_object_shapes(self) -> List[StructureShape]:
        return [self.service.get_shape(name) for name in self.value_object_names]

    @property
    def error_shapes(self) -> List[ExceptionShape]:
        return [self.service.get_shape(name) for name in self.exception_names]

    def reference(self, shape: Shape, module: str) -> str:
        """
        Returns the expression referencing the generated class of the given shape from within the given module.
        """
        if shape.is_enum:
            target, name = MODULE_ENUMS, self.enum_names[shape.name]
        else:
            target, name = MODULE_VALUE_OBJECTS, self.value_object_names[shape.name]
        if target == module:
            return name
        return f"{target}.{name}"

    def pagination(self, operation: Operation) -> Optional[Pagination]:
        """
        Returns the pagination of the operation if it can be generated: all tokens and result keys have to be plain
        members of the input and output structures.
        """
        pagination = operation.pagination
        if pagination is None or operation.input is None or operation.output is None:
            return None

        if not pagination.is_simple:
            LOG.debug("skipping pagination of %s, unsupported expression", operation.name)
            return None

        if len(pagination.input_token) != len(pagination.output_token):
            LOG.debug("skipping pagination of %s, tokens do not match", operation.name)
            return None

        output_names = pagination.output_token + pagination.result_key
        if pagination.more_results:
            output_names.append(pagination.more_results)
        if not all(operation.input.has_member(name) for name in pagination.input_token) or not all(
            operation.output.has_member(name) for name in output_names
        ):
            LOG.debug("skipping pagination of %s, unknown member", operation.name)
            return None

        return pagination
