import json

from awskit.codegen.documentation import print_docstring
from awskit.codegen.generator.context import GeneratorContext
from awskit.codegen.naming import NameAllocator


def generate_enums(output, context: GeneratorContext):
    output.write("from awskit.core import StringEnum\n")

    for shape_name, name in context.enum_names.items():
        shape = context.service.get_shape(shape_name)
        output.write("\n\n")
        output.write(f"class {name}(StringEnum):\n")
        if context.doc:
            if print_docstring(output, shape.documentation_main, "    "):
                output.write("\n")

        names = NameAllocator()
        for value in shape.enum:
            output.write(f"    {names.constant(value)} = {json.dumps(value)}\n")
