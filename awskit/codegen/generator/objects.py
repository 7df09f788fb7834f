"""
Generates the ``value_objects`` and ``exceptions`` modules, and the member handling shared with inputs and results.
"""
import json
from typing import Callable, List, Optional

from awskit.codegen.definition import (
    ListShape,
    MapShape,
    StructureMember,
    StructureShape,
)
from awskit.codegen.documentation import print_docstring
from awskit.codegen.generator.context import (
    MODULE_EXCEPTIONS,
    MODULE_VALUE_OBJECTS,
    GeneratorContext,
)
from awskit.codegen.generator.expressions import (
    coerce_expression,
    needs_coercion,
    populate_expression,
    serialize_expression,
    type_hint,
)
from awskit.codegen.naming import NameAllocator

VALUE_OBJECT_METHODS = ["create", "from_payload", "request_body", "member_names"]
EXCEPTION_ATTRIBUTES = [
    "message",
    "code",
    "response",
    "status_code",
    "aws_error",
    "aws_type",
    "aws_detail",
    "args",
    "with_traceback",
    "add_note",
]


class MemberSlot:
    """
    A member of a generated class: the modeled member and the python attribute it is stored in.
    """

    member: StructureMember
    attribute: str

    def __init__(self, member: StructureMember, attribute: str):
        self.member = member
        self.attribute = attribute

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def shape(self):
        return self.member.shape

    @property
    def is_collection(self) -> bool:
        return isinstance(self.shape, (ListShape, MapShape))

    @property
    def empty_value(self) -> str:
        return "{}" if isinstance(self.shape, MapShape) else "[]"


def allocate_members(
    structure: StructureShape, reserved: List[str], members: Optional[List[StructureMember]] = None
) -> List[MemberSlot]:
    names = NameAllocator(reserved)
    members = structure.members if members is None else members
    return [MemberSlot(member, names.attribute(member.name)) for member in members]


def write_member_names(output, slots: List[MemberSlot]):
    if not slots:
        return
    output.write("    _member_names = {\n")
    for slot in slots:
        output.write(f'        "{slot.name}": "{slot.attribute}",\n')
    output.write("    }\n")
    output.write("\n")


def write_constructor(
    output,
    context: GeneratorContext,
    slots: List[MemberSlot],
    module: str,
    field_prefix: str,
    extra_parameters: Optional[List[str]] = None,
    super_call: Optional[str] = None,
):
    """
    Writes the keyword-only constructor. Nested values given as dicts are turned into value objects.
    """
    parameters = [
        f"{slot.attribute}: Optional[{type_hint(context, slot.shape, module)}] = None" for slot in slots
    ] + (extra_parameters or [])

    if parameters:
        output.write("    def __init__(\n")
        output.write("        self,\n")
        output.write("        *,\n")
        for parameter in parameters:
            output.write(f"        {parameter},\n")
        output.write("    ):\n")
    else:
        output.write("    def __init__(self):\n")

    if super_call:
        output.write(f"        {super_call}\n")
    for slot in slots:
        field = f"{field_prefix}{slot.attribute}"
        if needs_coercion(slot.shape):
            value = coerce_expression(context, slot.shape, slot.attribute, module)
            output.write(
                f"        self.{field} = None if {slot.attribute} is None else {value}\n"
            )
        else:
            output.write(f"        self.{field} = {slot.attribute}\n")
    if not slots and not super_call:
        output.write("        pass\n")


def write_request_body(
    output,
    context: GeneratorContext,
    owner: str,
    slots: List[MemberSlot],
    module: str,
    accessor: Callable[[MemberSlot], str],
):
    """
    Writes ``request_body``, which renders the members into the dict which is sent as JSON body.

    :param owner: the modeled name of the structure (used in validation errors)
    :param accessor: returns the expression reading a member from ``self``
    """
    output.write("    def request_body(self) -> Dict[str, Any]:\n")
    if not slots:
        output.write("        return {}\n")
        return

    output.write("        payload: Dict[str, Any] = {}\n")
    for slot in slots:
        wire_name = slot.member.wire_name
        value = accessor(slot)
        if slot.member.is_idempotency_token:
            output.write(
                f'        payload["{wire_name}"] = {value} if {value} is not None else str(uuid.uuid4())\n'
            )
            continue

        if slot.member.is_required:
            required = f'conversion.ensure_required({value}, "{slot.name}", "{owner}")'
            expression = serialize_expression(
                context,
                slot.shape,
                required,
                module,
                slot.name,
                owner,
                slot.member.timestamp_format,
            )
            output.write(f'        payload["{wire_name}"] = {expression}\n')
            continue

        expression = serialize_expression(
            context, slot.shape, value, module, slot.name, owner, slot.member.timestamp_format
        )
        output.write(f"        if {value} is not None:\n")
        output.write(f'            payload["{wire_name}"] = {expression}\n')
    output.write("        return payload\n")


def read_expression(
    context: GeneratorContext,
    slot: MemberSlot,
    source: str,
    module: str,
    default: str = "None",
) -> str:
    """
    Returns the expression reading a member from a decoded JSON object named ``source``.
    """
    value = populate_expression(
        context, slot.shape, "value", module, slot.member.timestamp_format
    )
    return f'{value} if (value := {source}.get("{slot.member.wire_name}")) is not None else {default}'


def member_doc(slot: MemberSlot) -> Optional[str]:
    return slot.member.documentation or slot.shape.documentation_main


def generate_value_objects(output, context: GeneratorContext):
    output.write("import datetime\n")
    output.write("import uuid\n")
    output.write("from typing import Any, Dict, List, Optional\n")
    output.write("\n")
    output.write("from awskit.core import ValueObject, conversion\n")
    output.write("\n")
    output.write("from . import enums\n")

    for shape in context.value_object_shapes:
        output.write("\n\n")
        _print_value_object(output, context, shape)


def _print_value_object(output, context: GeneratorContext, shape: StructureShape):
    name = context.value_object_names[shape.name]
    module = MODULE_VALUE_OBJECTS
    slots = allocate_members(shape, VALUE_OBJECT_METHODS)

    output.write(f"class {name}(ValueObject):\n")
    if context.doc:
        if print_docstring(output, shape.documentation_main, "    "):
            output.write("\n")

    write_member_names(output, slots)
    write_constructor(output, context, slots, module, "_")

    for slot in slots:
        output.write("\n")
        output.write("    @property\n")
        hint = type_hint(context, slot.shape, module)
        if slot.is_collection:
            output.write(f"    def {slot.attribute}(self) -> {hint}:\n")
        else:
            output.write(f"    def {slot.attribute}(self) -> Optional[{hint}]:\n")
        if context.doc:
            print_docstring(output, member_doc(slot), "        ", summary=True)
        if slot.is_collection:
            output.write(
                f"        return self._{slot.attribute} if self._{slot.attribute} is not None "
                f"else {slot.empty_value}\n"
            )
        else:
            output.write(f"        return self._{slot.attribute}\n")

    if shape.name in context.output_structures:
        output.write("\n")
        output.write("    @classmethod\n")
        output.write(f"    def from_payload(cls, payload: Dict[str, Any]) -> {name}:\n")
        if not slots:
            output.write("        return cls()\n")
        else:
            output.write("        return cls(\n")
            for slot in slots:
                value = read_expression(context, slot, "payload", module)
                output.write(f"            {slot.attribute}=({value}),\n")
            output.write("        )\n")

    if shape.name in context.input_structures:
        output.write("\n")
        write_request_body(
            output, context, shape.name, slots, module, lambda s: f"self._{s.attribute}"
        )


def generate_exceptions(output, context: GeneratorContext):
    output.write("import datetime\n")
    output.write("from typing import Any, Dict, List, Optional\n")
    output.write("\n")
    output.write("from awskit.core import ClientException, Response, ServerException, conversion\n")
    output.write("\n")
    output.write("from . import value_objects\n")

    for shape in context.error_shapes:
        output.write("\n\n")
        _print_exception(output, context, shape)


def _print_exception(output, context: GeneratorContext, shape):
    name = context.exception_names[shape.name]
    module = MODULE_EXCEPTIONS
    base = "ServerException" if shape.status_code >= 500 else "ClientException"

    # message and code are read by the base class from any error response
    members = [m for m in shape.members if m.name.lower() not in ["message", "code"]]
    slots = allocate_members(shape, EXCEPTION_ATTRIBUTES, members)

    output.write(f"class {name}({base}):\n")
    if context.doc:
        if print_docstring(output, shape.documentation_main, "    "):
            output.write("\n")

    output.write(f"    code = {json.dumps(shape.code)}\n")
    if not slots:
        return

    output.write("\n")
    for slot in slots:
        hint = type_hint(context, slot.shape, module)
        output.write(f"    {slot.attribute}: Optional[{hint}] = None\n")

    output.write("\n")
    output.write("    def _populate_result(self, response: Response) -> None:\n")
    output.write("        data = self._get_error_data(response)\n")
    for slot in slots:
        value = read_expression(context, slot, "data", module)
        output.write(f"        self.{slot.attribute} = {value}\n")
