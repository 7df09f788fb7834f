"""
Generates the python package of an AWS service client from its service description.

The generated package consists of one module per kind of generated class (``enums``, ``value_objects``,
``exceptions``, ``inputs``, ``results``, ``client``). All modules use postponed evaluation of annotations and reference
the classes of sibling modules through the module (f.e. ``value_objects.AttributeValue``), so the order of the class
declarations does not matter and recursive shapes need no special treatment.
"""
import io
import logging
from pathlib import Path
from typing import Dict, List, Optional

from awskit.codegen.definition import ServiceDefinition
from awskit.codegen.generator.context import (
    MODULE_CLIENT,
    MODULE_ENUMS,
    MODULE_EXCEPTIONS,
    MODULE_INPUTS,
    MODULE_RESULTS,
    MODULE_VALUE_OBJECTS,
    GeneratorContext,
    UnsupportedProtocolError,
)
from awskit.codegen.generator.enums import generate_enums
from awskit.codegen.generator.objects import generate_exceptions, generate_value_objects
from awskit.codegen.generator.operations import (
    generate_client,
    generate_inputs,
    generate_results,
)
from awskit.codegen.loader import load_service
from awskit.codegen.naming import client_class_name, package_name

LOG = logging.getLogger(__name__)

__all__ = [
    "ServiceGenerator",
    "UnsupportedProtocolError",
    "create_package_directory",
    "generate_code",
]

MODULE_GENERATORS = [
    (MODULE_ENUMS, generate_enums),
    (MODULE_VALUE_OBJECTS, generate_value_objects),
    (MODULE_EXCEPTIONS, generate_exceptions),
    (MODULE_INPUTS, generate_inputs),
    (MODULE_RESULTS, generate_results),
    (MODULE_CLIENT, generate_client),
]


class ServiceGenerator:
    """
    Generates the modules of the client package of one service.
    """

    context: GeneratorContext

    def __init__(
        self,
        service: ServiceDefinition,
        operations: Optional[List[str]] = None,
        doc: bool = True,
    ):
        """
        :param service: the service description
        :param operations: the names of the operations to generate, all operations if not given
        :param doc: whether to render the documentation of the service description into docstrings
        :raises UnsupportedProtocolError: if the service does not support a JSON based protocol
        :raises UnknownOperationError: if one of the operations does not exist
        """
        self.context = GeneratorContext(service, operations, doc)

    @property
    def service(self) -> ServiceDefinition:
        return self.context.service

    @property
    def package_name(self) -> str:
        return package_name(self.service.name)

    @property
    def client_class_name(self) -> str:
        return client_class_name(self.service.service_id)

    def _header(self, output):
        output.write(
            f"# Code generated by awskit-codegen from the {self.service.name} {self.service.api_version} "
            f"service description. DO NOT EDIT.\n"
        )
        output.write("from __future__ import annotations\n")
        output.write("\n")

    def generate_module(self, module: str) -> str:
        generators = dict(MODULE_GENERATORS)
        output = io.StringIO()
        self._header(output)
        generators[module](output, self.context)
        return output.getvalue()

    def generate_init(self) -> str:
        output = io.StringIO()
        self._header(output)
        output.write(f"from .{MODULE_CLIENT} import {self.client_class_name}\n")
        output.write("\n")
        output.write(f'__all__ = ["{self.client_class_name}"]\n')
        return output.getvalue()

    def generate(self) -> Dict[str, str]:
        """
        Generates all modules of the package.

        :return: file name to source code
        """
        LOG.debug(
            "generating %s (%s) with %d operations",
            self.service.name,
            self.context.protocol,
            len(self.context.operations),
        )
        files = {f"{module}.py": self.generate_module(module) for module, _ in MODULE_GENERATORS}
        files["__init__.py"] = self.generate_init()
        return files


def generate_code(
    service_name: str, operations: Optional[List[str]] = None, doc: bool = True
) -> Dict[str, str]:
    """
    Loads the service description of the given service and generates its client package.

    :return: file name to source code
    """
    service = load_service(service_name)
    return ServiceGenerator(service, operations, doc=doc).generate()


def create_package_directory(service_name: str, files: Dict[str, str], base_path: str) -> Path:
    """
    Writes the generated files into ``<base_path>/<package name>/``, replacing the modules of a previous generation.

    :return: the path of the package
    """
    path = Path(base_path, package_name(service_name))
    if not path.exists():
        LOG.debug("creating directory %s", path)
        path.mkdir(parents=True)

    for file_name, code in files.items():
        file = path / file_name
        LOG.debug("writing to file %s", file)
        file.write_text(code, encoding="utf-8")
    return path
