"""
Builders for the python expressions the generated code uses to convert member values: type hints, serialization into
request bodies, population from response payloads, and coercion of constructor arguments.
"""
from typing import Optional

from awskit.codegen.definition import ListShape, MapShape, Shape, StructureShape
from awskit.codegen.generator.context import GeneratorContext

SCALAR_TYPES = {
    "string": "str",
    "character": "str",
    "integer": "int",
    "long": "int",
    "short": "int",
    "byte": "int",
    "float": "float",
    "double": "float",
    "boolean": "bool",
    "timestamp": "datetime.datetime",
    "blob": "bytes",
}

SCALAR_CASTS = {
    "string": "str",
    "character": "str",
    "integer": "int",
    "long": "int",
    "short": "int",
    "byte": "int",
    "float": "float",
    "double": "float",
    "boolean": "bool",
}


def _is_structure(shape: Shape) -> bool:
    return isinstance(shape, StructureShape) and not shape.is_document


def type_hint(context: GeneratorContext, shape: Shape, module: str) -> str:
    if shape.is_document:
        return "Any"
    if isinstance(shape, StructureShape):
        return context.reference(shape, module)
    if isinstance(shape, ListShape):
        return f"List[{type_hint(context, shape.member.shape, module)}]"
    if isinstance(shape, MapShape):
        key = type_hint(context, shape.key.shape, module)
        value = type_hint(context, shape.value.shape, module)
        return f"Dict[{key}, {value}]"
    if shape.is_enum:
        # plain strings are accepted as well, enum members are str instances
        return "str"
    return SCALAR_TYPES.get(shape.type, "Any")


def needs_coercion(shape: Shape) -> bool:
    """Whether constructor arguments of this shape may contain dicts which have to be turned into value objects."""
    if _is_structure(shape):
        return True
    if isinstance(shape, ListShape):
        return needs_coercion(shape.member.shape)
    if isinstance(shape, MapShape):
        return needs_coercion(shape.value.shape)
    return False


def coerce_expression(
    context: GeneratorContext, shape: Shape, expr: str, module: str, depth: int = 0
) -> str:
    if _is_structure(shape):
        return f"{context.reference(shape, module)}.create({expr})"
    if isinstance(shape, ListShape) and needs_coercion(shape):
        item = coerce_expression(context, shape.member.shape, f"v{depth}", module, depth + 1)
        return f"[{item} for v{depth} in {expr}]"
    if isinstance(shape, MapShape) and needs_coercion(shape):
        value = coerce_expression(context, shape.value.shape, f"v{depth}", module, depth + 1)
        return f"{{k{depth}: {value} for k{depth}, v{depth} in {expr}.items()}}"
    return expr


def serialize_expression(
    context: GeneratorContext,
    shape: Shape,
    expr: str,
    module: str,
    parameter: str,
    owner: str,
    timestamp_format: Optional[str] = None,
    depth: int = 0,
) -> str:
    """
    Returns the expression rendering the value of ``expr`` into its JSON representation.

    :param parameter: the member name (used in validation errors)
    :param owner: the name of the structure owning the member (used in validation errors)
    """
    if shape.is_document:
        return expr
    if isinstance(shape, StructureShape):
        return f"{context.reference(shape, module)}.create({expr}).request_body()"
    if isinstance(shape, ListShape):
        item_shape = shape.member.shape
        item = serialize_expression(
            context,
            item_shape,
            f"v{depth}",
            module,
            parameter,
            owner,
            shape.member.timestamp_format,
            depth + 1,
        )
        if item == f"v{depth}":
            return f"list({expr})"
        return f"[{item} for v{depth} in {expr}]"
    if isinstance(shape, MapShape):
        key = serialize_expression(
            context, shape.key.shape, f"k{depth}", module, parameter, owner, None, depth + 1
        )
        value = serialize_expression(
            context,
            shape.value.shape,
            f"v{depth}",
            module,
            parameter,
            owner,
            shape.value.timestamp_format,
            depth + 1,
        )
        if key == f"k{depth}" and value == f"v{depth}":
            return f"dict({expr})"
        return f"{{{key}: {value} for k{depth}, v{depth} in {expr}.items()}}"
    if shape.is_enum:
        enum = context.reference(shape, module)
        return f'conversion.ensure_enum({enum}, {expr}, "{parameter}", "{owner}")'
    if shape.type == "timestamp":
        fmt = timestamp_format or shape.timestamp_format
        if fmt:
            return f'conversion.serialize_timestamp({expr}, "{fmt}")'
        return f"conversion.serialize_timestamp({expr})"
    if shape.type == "blob":
        return f"conversion.serialize_blob({expr})"
    return expr


def populate_expression(
    context: GeneratorContext,
    shape: Shape,
    expr: str,
    module: str,
    timestamp_format: Optional[str] = None,
    depth: int = 0,
) -> str:
    """
    Returns the expression reading the decoded JSON value of ``expr`` into its python representation.
    """
    if shape.is_document:
        return expr
    if isinstance(shape, StructureShape):
        return f"{context.reference(shape, module)}.from_payload({expr})"
    if isinstance(shape, ListShape):
        item = populate_expression(
            context,
            shape.member.shape,
            f"v{depth}",
            module,
            shape.member.timestamp_format,
            depth + 1,
        )
        if item == f"v{depth}":
            return f"list({expr})"
        return f"[{item} for v{depth} in {expr}]"
    if isinstance(shape, MapShape):
        key = populate_expression(context, shape.key.shape, f"k{depth}", module, None, depth + 1)
        value = populate_expression(
            context,
            shape.value.shape,
            f"v{depth}",
            module,
            shape.value.timestamp_format,
            depth + 1,
        )
        return f"{{{key}: {value} for k{depth}, v{depth} in {expr}.items()}}"
    if shape.type == "timestamp":
        fmt = timestamp_format or shape.timestamp_format
        if fmt:
            return f'conversion.parse_timestamp({expr}, "{fmt}")'
        return f"conversion.parse_timestamp({expr})"
    if shape.type == "blob":
        return f"conversion.parse_blob({expr})"
    if cast := SCALAR_CASTS.get(shape.type):
        return f"{cast}({expr})"
    return expr
