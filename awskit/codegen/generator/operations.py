"""
Generates the ``inputs``, ``results`` and ``client`` modules: everything which is specific to an operation.
"""
import json
from typing import Dict, List, Optional

from awskit.codegen.definition import (
    ListShape,
    MapShape,
    Operation,
    Pagination,
    StructureShape,
)
from awskit.codegen.documentation import print_docstring
from awskit.codegen.generator.context import (
    MODULE_INPUTS,
    MODULE_RESULTS,
    GeneratorContext,
)
from awskit.codegen.generator.expressions import populate_expression, type_hint
from awskit.codegen.generator.objects import (
    MemberSlot,
    allocate_members,
    member_doc,
    read_expression,
    write_constructor,
    write_member_names,
    write_request_body,
)
from awskit.codegen.naming import NameAllocator, client_class_name, method_name
from awskit.core.request import split_request_uri

INPUT_METHODS = ["create", "request", "request_body", "region", "member_names"]
# public methods and private fields of the Result base class
RESULT_METHODS = [
    "initialize",
    "resolve",
    "info",
    "cancel",
    "wait",
    "response",
    "client",
    "input",
    "initialized",
    "prefetch_results",
]

HEADER_CASTS = {
    "string": "str",
    "integer": "int",
    "long": "int",
    "float": "float",
    "double": "float",
    "boolean": "conversion.parse_boolean",
}


def input_slots(shape: StructureShape) -> List[MemberSlot]:
    return allocate_members(shape, INPUT_METHODS)


def result_slots(shape: StructureShape) -> List[MemberSlot]:
    return allocate_members(shape, RESULT_METHODS)


def _slot(slots: List[MemberSlot], name: str) -> MemberSlot:
    return next(slot for slot in slots if slot.name == name)


def _operations_by_input(context: GeneratorContext) -> Dict[str, Operation]:
    # an input shape shared by several operations is generated once, the first operation renders the request
    operations = {}
    for operation in context.operations:
        if operation.input and operation.input.name not in operations:
            operations[operation.input.name] = operation
    return operations


def _operations_by_output(context: GeneratorContext) -> Dict[str, Operation]:
    operations = {}
    for operation in context.operations:
        if operation.output and operation.output.name not in operations:
            operations[operation.output.name] = operation
    return operations


# ==================================== inputs


def generate_inputs(output, context: GeneratorContext):
    output.write("import datetime\n")
    output.write("import json\n")
    output.write("import uuid\n")
    output.write("from typing import Any, Dict, List, Optional\n")
    output.write("\n")
    output.write("from awskit.core import Input, Request, build_uri, conversion\n")
    output.write("\n")
    output.write("from . import enums, value_objects\n")

    for shape_name, operation in _operations_by_input(context).items():
        output.write("\n\n")
        _print_input(output, context, operation)


def _print_input(output, context: GeneratorContext, operation: Operation):
    shape = operation.input
    name = context.input_names[shape.name]
    module = MODULE_INPUTS
    slots = input_slots(shape)

    output.write(f"class {name}(Input):\n")
    if context.doc:
        if print_docstring(output, shape.documentation_main, "    "):
            output.write("\n")

    write_member_names(output, slots)
    for slot in slots:
        output.write(f"    {slot.attribute}: Optional[{type_hint(context, slot.shape, module)}]\n")
        if context.doc:
            print_docstring(output, member_doc(slot), "    ", summary=True)
    if slots:
        output.write("\n")

    write_constructor(
        output,
        context,
        slots,
        module,
        "",
        extra_parameters=["region: Optional[str] = None"],
        super_call="super().__init__(region)",
    )

    output.write("\n")
    if context.protocol == "json":
        _print_json_request(output, context, operation, slots)
        body_slots = slots
    else:
        body_slots = _print_rest_json_request(output, context, operation, slots)

    if body_slots:
        output.write("\n")
        write_request_body(
            output, context, shape.name, body_slots, module, lambda s: f"self.{s.attribute}"
        )


def _json_headers(context: GeneratorContext, operation: Operation) -> Dict[str, str]:
    service = context.service
    headers = {"Content-Type": f"application/x-amz-json-{service.json_version}"}
    if service.target_prefix:
        headers["X-Amz-Target"] = f"{service.target_prefix}.{operation.name}"
    return headers


def _write_dict(output, name: str, values: Dict[str, str], indent: str = "        "):
    if not values:
        output.write(f"{indent}{name}: Dict[str, Any] = {{}}\n")
        return
    output.write(f"{indent}{name}: Dict[str, Any] = {{\n")
    for key, value in values.items():
        output.write(f"{indent}    {json.dumps(key)}: {json.dumps(value)},\n")
    output.write(f"{indent}}}\n")


def _print_json_request(output, context: GeneratorContext, operation: Operation, slots):
    output.write("    def request(self) -> Request:\n")
    _write_dict(output, "headers", _json_headers(context, operation))
    output.write("        body = json.dumps(self.request_body())\n")
    output.write('        return Request("POST", "/", {}, headers, body)\n')


def _serialize_location_value(
    context: GeneratorContext, slot: MemberSlot, value: str, owner: str, renderer: str
) -> str:
    shape = slot.shape
    if isinstance(shape, ListShape) and shape.member.shape.is_enum:
        # lists are repeated parameters or comma separated header values, every item is validated
        enum = context.reference(shape.member.shape, MODULE_INPUTS)
        value = f'[conversion.ensure_enum({enum}, v, "{slot.name}", "{owner}") for v in {value}]'
    elif shape.is_enum:
        enum = context.reference(shape, MODULE_INPUTS)
        value = f'conversion.ensure_enum({enum}, {value}, "{slot.name}", "{owner}")'
    fmt = slot.member.timestamp_format
    if fmt:
        return f'conversion.{renderer}({value}, "{fmt}")'
    return f"conversion.{renderer}({value})"


def _print_location_members(
    output,
    context: GeneratorContext,
    slots: List[MemberSlot],
    owner: str,
    target: str,
    renderer: str,
):
    """Writes the members rendered into the querystring or the headers of the request."""
    for slot in slots:
        value = f"self.{slot.attribute}"
        if isinstance(slot.shape, MapShape):
            # maps are spread into individual parameters, header maps use the location name as prefix
            prefix = (slot.member.location_name or "") if target == "headers" else ""
            key = f'"{prefix}" + k' if prefix else "k"
            output.write(f"        if {value} is not None:\n")
            output.write(
                f"            {target}.update({{{key}: conversion.{renderer}(v) for k, v in {value}.items()}})\n"
            )
            continue

        wire_name = slot.member.location_name or slot.name
        if slot.member.is_required:
            required = f'conversion.ensure_required({value}, "{slot.name}", "{owner}")'
            expression = _serialize_location_value(context, slot, required, owner, renderer)
            output.write(f'        {target}["{wire_name}"] = {expression}\n')
        else:
            expression = _serialize_location_value(context, slot, value, owner, renderer)
            output.write(f"        if {value} is not None:\n")
            output.write(f'            {target}["{wire_name}"] = {expression}\n')


def _print_rest_json_request(
    output, context: GeneratorContext, operation: Operation, slots: List[MemberSlot]
) -> List[MemberSlot]:
    """
    Writes ``request`` for the rest-json protocol.

    :return: the members which are rendered into the JSON body
    """
    shape = operation.input
    owner = shape.name
    path, static_query = split_request_uri(operation.request_uri)

    by_location: Dict[Optional[str], List[MemberSlot]] = {}
    payload_slot = None
    for slot in slots:
        if shape.payload and slot.name == shape.payload:
            payload_slot = slot
            continue
        by_location.setdefault(slot.member.location, []).append(slot)
    body_slots = by_location.get(None, [])

    output.write("    def request(self) -> Request:\n")
    _write_dict(output, "headers", {"Content-Type": "application/json"})
    header_slots = by_location.get("header", []) + by_location.get("headers", [])
    _print_location_members(output, context, header_slots, owner, "headers", "to_header_value")

    _write_dict(output, "query", static_query)
    _print_location_members(
        output, context, by_location.get("querystring", []), owner, "query", "to_query_value"
    )

    uri_slots = by_location.get("uri", [])
    if uri_slots:
        output.write("        uri = build_uri(\n")
        output.write(f"            {json.dumps(path)},\n")
        output.write("            {\n")
        for slot in uri_slots:
            required = f'conversion.ensure_required(self.{slot.attribute}, "{slot.name}", "{owner}")'
            label = slot.member.location_name or slot.name
            output.write(f'                "{label}": conversion.scalar_to_str({required}),\n')
        output.write("            },\n")
        output.write("        )\n")
    else:
        output.write(f"        uri = {json.dumps(path)}\n")

    if payload_slot is not None:
        value = f"self.{payload_slot.attribute}"
        is_structure = isinstance(payload_slot.shape, StructureShape) and not payload_slot.shape.is_document
        if is_structure and payload_slot.member.is_required:
            reference = context.reference(payload_slot.shape, MODULE_INPUTS)
            required = f'conversion.ensure_required({value}, "{payload_slot.name}", "{owner}")'
            output.write(f"        body = json.dumps({reference}.create({required}).request_body())\n")
        elif is_structure:
            reference = context.reference(payload_slot.shape, MODULE_INPUTS)
            output.write(
                f'        body = "" if {value} is None else json.dumps({reference}.create({value}).request_body())\n'
            )
        elif payload_slot.shape.is_document:
            output.write(f'        body = "" if {value} is None else json.dumps({value})\n')
        else:
            # raw payload (blob or string)
            output.write(f'        body = "" if {value} is None else {value}\n')
    elif body_slots:
        output.write("        body = json.dumps(self.request_body())\n")
    else:
        output.write('        body = ""\n')

    output.write(f'        return Request("{operation.method}", uri, query, headers, body)\n')
    return body_slots


# ==================================== results


def generate_results(output, context: GeneratorContext):
    output.write("import copy\n")
    output.write("import datetime\n")
    output.write("from typing import Any, Dict, Iterator, List, Optional, Tuple\n")
    output.write("\n")
    output.write("from awskit.core import InvalidArgument, Response, Result, conversion\n")
    output.write("\n")
    output.write("from . import value_objects\n")

    for shape_name, operation in _operations_by_output(context).items():
        output.write("\n\n")
        _print_result(output, context, operation)


def _print_result(output, context: GeneratorContext, operation: Operation):
    shape = operation.output
    name = context.result_names[shape.name]
    module = MODULE_RESULTS
    slots = result_slots(shape)
    pagination = context.pagination(operation)

    output.write(f"class {name}(Result):\n")
    if context.doc:
        if print_docstring(output, shape.documentation_main, "    "):
            output.write("\n")
    if not slots:
        output.write("    pass\n")
        return

    iterators: Dict[str, str] = {}
    if pagination:
        names = NameAllocator([slot.attribute for slot in slots] + RESULT_METHODS)
        for key in pagination.result_key:
            iterators[key] = names.attribute("iter_" + _slot(slots, key).attribute)

    first = True
    for slot in slots:
        if not first:
            output.write("\n")
        first = False
        hint = type_hint(context, slot.shape, module)
        output.write("    @property\n")
        if slot.is_collection:
            output.write(f"    def {slot.attribute}(self) -> {hint}:\n")
        else:
            output.write(f"    def {slot.attribute}(self) -> Optional[{hint}]:\n")
        if context.doc:
            extra = None
            if slot.name in iterators:
                extra = [
                    "This is the value of the current page, "
                    f"use ``{iterators[slot.name]}`` to iterate all pages."
                ]
            print_docstring(output, member_doc(slot), "        ", extra, summary=True)
        output.write("        self.initialize()\n")
        output.write(f"        return self._{slot.attribute}\n")

    if pagination:
        for key in pagination.result_key:
            output.write("\n")
            _print_iterator(output, context, operation, pagination, slots, key, iterators[key])

        list_keys = [
            key
            for key in pagination.result_key
            if isinstance(_slot(slots, key).shape, (ListShape, MapShape))
        ]
        if len(pagination.result_key) == 1 and list_keys:
            item_hint = _item_hint(context, _slot(slots, list_keys[0]))
            output.write("\n")
            output.write(f"    def __iter__(self) -> Iterator[{item_hint}]:\n")
            output.write(f"        return self.{iterators[list_keys[0]]}()\n")

    output.write("\n")
    _print_populate_result(output, context, operation, slots)


def _item_hint(context: GeneratorContext, slot: MemberSlot) -> str:
    shape = slot.shape
    if isinstance(shape, ListShape):
        return type_hint(context, shape.member.shape, MODULE_RESULTS)
    if isinstance(shape, MapShape):
        key = type_hint(context, shape.key.shape, MODULE_RESULTS)
        value = type_hint(context, shape.value.shape, MODULE_RESULTS)
        return f"Tuple[{key}, {value}]"
    return f"Optional[{type_hint(context, shape, MODULE_RESULTS)}]"


def _print_iterator(
    output,
    context: GeneratorContext,
    operation: Operation,
    pagination: Pagination,
    slots: List[MemberSlot],
    key: str,
    iterator_name: str,
):
    """
    Writes the generator iterating a result key across all pages. The next page is requested before the items of
    the current page are yielded, so it is fetched while the caller processes the current page.
    """
    slot = _slot(slots, key)
    field = f"_{slot.attribute}"
    if isinstance(slot.shape, ListShape):
        yield_statement = f"yield from page.{field}"
    elif isinstance(slot.shape, MapShape):
        yield_statement = f"yield from page.{field}.items()"
    else:
        yield_statement = f"yield page.{field}"

    tokens = [
        (
            _slot(input_slots(operation.input), input_token).attribute,
            _slot(slots, output_token).attribute,
        )
        for input_token, output_token in zip(pagination.input_token, pagination.output_token)
    ]
    if pagination.more_results:
        condition = f"page._{_slot(slots, pagination.more_results).attribute}"
    else:
        condition = " or ".join(f"page._{output}" for _, output in tokens)

    output.write(
        f"    def {iterator_name}(self, current_page_only: bool = False) -> Iterator[{_item_hint(context, slot)}]:\n"
    )
    output.write('        """\n')
    output.write(f"        Iterates over the {key} of all pages, requesting the next pages as needed.\n")
    output.write("\n")
    output.write("        :param current_page_only: only iterate over the current page\n")
    output.write('        """\n')
    output.write("        if current_page_only:\n")
    output.write("            self.initialize()\n")
    output.write(f"            {yield_statement.replace('page.', 'self.')}\n")
    output.write("            return\n")
    output.write("\n")
    output.write("        client = self._client\n")
    output.write("        if client is None:\n")
    output.write('            raise InvalidArgument("missing client injected in paginated result")\n')
    output.write("        if self._input is None:\n")
    output.write('            raise InvalidArgument("missing last request injected in paginated result")\n')
    output.write("\n")
    output.write("        input = self._input\n")
    output.write("        page = self\n")
    output.write("        while True:\n")
    output.write("            page.initialize()\n")
    output.write(f"            if {condition}:\n")
    output.write("                input = copy.copy(input)\n")
    for input_attribute, output_attribute in tokens:
        output.write(f"                input.{input_attribute} = page._{output_attribute}\n")
    output.write(f"                next_page = client.{method_name(operation.name)}(input)\n")
    output.write("                self._register_prefetch(next_page)\n")
    output.write("            else:\n")
    output.write("                next_page = None\n")
    output.write("\n")
    output.write(f"            {yield_statement}\n")
    output.write("\n")
    output.write("            if next_page is None:\n")
    output.write("                break\n")
    output.write("\n")
    output.write("            self._unregister_prefetch(next_page)\n")
    output.write("            page = next_page\n")


def _header_expression(slot: MemberSlot) -> str:
    shape = slot.shape
    header = slot.member.location_name or slot.name
    if isinstance(shape, MapShape):
        prefix = (slot.member.location_name or "").lower()
        return (
            f"{{k[{len(prefix)}:]: v for k, v in response.headers.items() "
            f'if k.lower().startswith("{prefix}")}}'
        )
    if shape.type == "timestamp":
        fmt = slot.member.timestamp_format or "rfc822"
        value = f'conversion.parse_timestamp(value, "{fmt}")'
    else:
        cast = HEADER_CASTS.get(shape.type, "str")
        value = f"{cast}(value)"
    return f'{value} if (value := response.headers.get("{header}")) is not None else None'


def _print_populate_result(output, context: GeneratorContext, operation: Operation, slots):
    shape = operation.output
    module = MODULE_RESULTS
    rest = context.protocol == "rest-json"

    body_slots = []
    lines = []
    for slot in slots:
        field = f"self._{slot.attribute}"
        location = slot.member.location if rest else None
        if rest and slot.name == shape.payload:
            if isinstance(slot.shape, StructureShape):
                value = populate_expression(context, slot.shape, "data", module)
                lines.append(f"{field} = {value} if data else None")
            elif slot.shape.type == "blob":
                lines.append(f"{field} = response.content")
            else:
                lines.append(f"{field} = response.content.decode()")
        elif location in ("header", "headers"):
            lines.append(f"{field} = {_header_expression(slot)}")
        elif location == "statusCode":
            lines.append(f"{field} = response.status_code")
        else:
            body_slots.append(slot)
            default = slot.empty_value if slot.is_collection else "None"
            lines.append(f"{field} = {read_expression(context, slot, 'data', module, default)}")

    payload_slot = next((s for s in slots if rest and s.name == shape.payload), None)
    needs_data = body_slots or (
        payload_slot is not None and isinstance(payload_slot.shape, StructureShape)
    )

    output.write("    def _populate_result(self, response: Response) -> None:\n")
    if needs_data:
        output.write("        data = response.to_dict()\n")
    for line in lines:
        output.write(f"        {line}\n")


# ==================================== client


def generate_client(output, context: GeneratorContext):
    service = context.service
    output.write("from typing import Any, Dict, Optional, Union\n")
    output.write("\n")
    output.write("from awskit.core import AbstractApi, Request, Result\n")
    output.write("\n")
    output.write("from . import exceptions, inputs, results\n")
    output.write("\n\n")

    output.write(f"class {client_class_name(service.service_id)}(AbstractApi):\n")
    if context.doc:
        if print_docstring(output, service.documentation, "    "):
            output.write("\n")
    output.write(f"    service_name = {json.dumps(service.name)}\n")
    output.write(f"    endpoint_prefix = {json.dumps(service.endpoint_prefix)}\n")
    output.write(f"    signing_name = {json.dumps(service.signing_name)}\n")
    output.write(f"    api_version = {json.dumps(service.api_version)}\n")
    if service.global_endpoint:
        output.write(f"    global_endpoint = {json.dumps(service.global_endpoint)}\n")

    for operation in context.operations:
        output.write("\n")
        _print_operation(output, context, operation)


def _exception_mapping(context: GeneratorContext, operation: Operation) -> Dict[str, str]:
    mapping = {}
    for error in operation.errors:
        reference = f"exceptions.{context.exception_names[error.name]}"
        mapping[error.name] = reference
        mapping[error.code] = reference
    return mapping


def _print_operation(output, context: GeneratorContext, operation: Operation):
    name = method_name(operation.name)
    input_shape = operation.input
    if operation.output:
        result = f"results.{context.result_names[operation.output.name]}"
    else:
        result = "Result"

    if input_shape:
        input_class = f"inputs.{context.input_names[input_shape.name]}"
        default = "" if input_shape.required else " = None"
        output.write(
            f"    def {name}(self, input: Union[{input_class}, Dict[str, Any]]{default}) -> {result}:\n"
        )
    else:
        input_class = None
        output.write(f"    def {name}(self) -> {result}:\n")

    if context.doc:
        extra = []
        if operation.is_deprecated:
            extra.append(".. deprecated:: the operation is deprecated by the service")
        if input_class:
            extra.append(f":param input: the input, or a dict keyed by the member names of {input_class}")
        extra.append(f":return: the (lazy) {result}")
        for error in operation.errors:
            extra.append(f":raises {context.exception_names[error.name]}:")
        print_docstring(output, operation.documentation, "        ", extra)

    if input_class:
        output.write(f"        input = {input_class}.create(input)\n")
        output.write("        response = self._get_response(\n")
        output.write("            input.request(),\n")
    else:
        output.write("        response = self._get_response(\n")
        output.write(f"            {_inline_request(context, operation)},\n")
    output.write(f"            {json.dumps(operation.name)},\n")
    if input_class:
        output.write("            region=input.region,\n")

    mapping = _exception_mapping(context, operation)
    if mapping:
        output.write("            exception_mapping={\n")
        for code, reference in mapping.items():
            output.write(f"                {json.dumps(code)}: {reference},\n")
        output.write("            },\n")
    output.write("        )\n")

    if input_class:
        output.write(f"        return {result}(response, self, input)\n")
    else:
        output.write(f"        return {result}(response, self)\n")


def _inline_request(context: GeneratorContext, operation: Operation) -> str:
    """The request of an operation without input."""
    if context.protocol == "json":
        headers = json.dumps(_json_headers(context, operation))
        return f'Request("POST", "/", {{}}, {headers}, "{{}}")'
    path, static_query = split_request_uri(operation.request_uri)
    return f'Request("{operation.method}", {json.dumps(path)}, {json.dumps(static_query)})'

