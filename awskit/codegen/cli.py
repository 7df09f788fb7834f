import json
import logging
from multiprocessing import Pool
from pathlib import Path
from typing import Dict, List, Optional

import click
from botocore.exceptions import UnknownServiceError

from awskit import config
from awskit.codegen.definition import UnknownOperationError
from awskit.codegen.generator import (
    ServiceGenerator,
    UnsupportedProtocolError,
    create_package_directory,
    generate_code,
)
from awskit.codegen.loader import load_service
from awskit.constants import MANIFEST_FILE_NAME
from awskit.logging.setup import setup_logging_from_config

LOG = logging.getLogger(__name__)

DEFAULT_PATH = "./generated"


def read_manifest(path: str) -> Dict[str, dict]:
    """
    Reads the manifest of the generated packages in the given directory: service name to the generation settings
    (``operations``, ``None`` for all operations, and ``doc``).
    """
    file = Path(path, MANIFEST_FILE_NAME)
    if not file.exists():
        return {}
    return json.loads(file.read_text())


def write_manifest(path: str, manifest: Dict[str, dict]):
    file = Path(path, MANIFEST_FILE_NAME)
    file.write_text(json.dumps(manifest, indent=2, sort_keys=True) + "\n")


def _generate(service: str, operations: Optional[List[str]], doc: bool) -> Dict[str, str]:
    try:
        return generate_code(service, operations, doc=doc)
    except UnknownServiceError:
        raise click.ClickException(f"unknown service {service}")
    except UnknownOperationError as e:
        raise click.ClickException(f"unknown operation: {e.args[0]}")
    except UnsupportedProtocolError as e:
        raise click.ClickException(str(e))


@click.group()
def codegen():
    """Generate typed AWS service clients from the botocore service descriptions."""
    setup_logging_from_config()
    LOG.debug("configuration: %s", config.collect_config_items())


@codegen.command(name="generate")
@click.argument("service", type=str)
@click.option(
    "--operation",
    "-o",
    "operations",
    multiple=True,
    help="the operations to generate (can be given multiple times), all operations if omitted",
)
@click.option("--doc/--no-doc", default=True, help="whether or not to generate docstrings")
@click.option(
    "--save/--print",
    default=False,
    help="whether or not to save the result into the package directory",
)
@click.option("--path", default=DEFAULT_PATH, help="the path where the package should be saved")
def generate(service: str, operations: List[str], doc: bool, save: bool, path: str):
    """
    Generate the client package for a given AWS service.

    SERVICE is the service to generate the client for (e.g., dynamodb, or mediaconvert)
    """
    operations = list(operations) or None
    files = _generate(service, operations, doc)

    if not save:
        # either just print the code to stdout
        for file_name, code in files.items():
            click.echo(f"# ---- {file_name}")
            click.echo(code)
        return

    # or write the package and record it in the manifest
    Path(path).mkdir(parents=True, exist_ok=True)
    package = create_package_directory(service, files, path)
    click.echo(f"wrote {len(files)} files to {package}")

    manifest = read_manifest(path)
    manifest[service] = {"operations": sorted(operations) if operations else None, "doc": doc}
    write_manifest(path, manifest)
    click.echo("done!")


@codegen.command()
@click.option(
    "--doc/--no-doc",
    default=None,
    help="whether or not to generate docstrings (defaults to the setting in the manifest)",
)
@click.option("--path", default=DEFAULT_PATH, help="the path in which to upgrade the generated packages")
def upgrade(path: str, doc: Optional[bool] = None):
    """
    Execute the code generation for all services in the manifest.
    """
    manifest = read_manifest(path)
    if not manifest:
        raise click.ClickException(f"no {MANIFEST_FILE_NAME} found in {path}")

    tasks = [
        (service, settings.get("operations"), settings.get("doc", True) if doc is None else doc, path)
        for service, settings in manifest.items()
    ]
    with Pool(config.MAX_WORKERS) as pool:
        results = pool.starmap(_do_generate_code, tasks)

    failed = [service for service, ok in zip(manifest, results) if not ok]
    if failed:
        click.echo(f"failed to upgrade: {', '.join(failed)}")
    click.echo("done!")


def _do_generate_code(
    service: str, operations: Optional[List[str]], doc: bool, path: str
) -> bool:
    try:
        files = generate_code(service, operations, doc=doc)
    except UnknownServiceError:
        click.echo(f"unknown service {service}! skipping...")
        return False
    except (UnknownOperationError, UnsupportedProtocolError) as e:
        click.echo(f"cannot generate {service}: {e}! skipping...")
        return False
    create_package_directory(service, files, path)
    click.echo(f"upgraded {service}")
    return True


@codegen.command(name="operations")
@click.argument("service", type=str)
def list_operations(service: str):
    """
    List the operations of a given AWS service. Paginated operations are listed with their result keys.
    """
    try:
        generator = ServiceGenerator(load_service(service), doc=False)
    except UnknownServiceError:
        raise click.ClickException(f"unknown service {service}")
    except UnsupportedProtocolError as e:
        raise click.ClickException(str(e))

    context = generator.context
    for operation in context.operations:
        pagination = context.pagination(operation)
        if pagination:
            click.echo(f"{operation.name} (paginated: {', '.join(pagination.result_key)})")
        else:
            click.echo(operation.name)


def main():
    codegen()


if __name__ == "__main__":
    main()
