import json
import logging
import os
from functools import lru_cache
from typing import Dict, List, Optional

import jsonpatch
from botocore.exceptions import DataNotFoundError
from botocore.loaders import Loader, instance_cache

from awskit import config
from awskit.codegen.definition import ServiceDefinition

LOG = logging.getLogger(__name__)

ServiceName = str

spec_patches_json = os.path.join(os.path.dirname(__file__), "spec-patches.json")


def load_spec_patches() -> Dict[str, list]:
    if not os.path.exists(spec_patches_json):
        return {}
    with open(spec_patches_json) as fd:
        return json.load(fd)


class PatchingLoader(Loader):
    """
    A custom botocore Loader that applies JSON patches from the given json patch file to the specs as they are loaded.
    """

    patches: Dict[str, list]

    def __init__(self, patches: Dict[str, list], *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.patches = patches

    @instance_cache
    def load_data(self, name: str):
        result = super(PatchingLoader, self).load_data(name)

        if patches := self.patches.get(name):
            LOG.debug("applying %d patches to %s", len(patches), name)
            return jsonpatch.apply_patch(result, patches)

        return result


def create_loader(extra_search_paths: Optional[List[str]] = None) -> PatchingLoader:
    """
    Creates a loader which searches botocore's data directory and the given extra paths (which take precedence).
    """
    return PatchingLoader(
        load_spec_patches(), extra_search_paths=extra_search_paths or config.extra_model_paths()
    )


@lru_cache()
def _default_loader() -> PatchingLoader:
    return create_loader()


def list_services(loader: Optional[Loader] = None) -> List[ServiceName]:
    loader = loader or _default_loader()
    return sorted(loader.list_available_services("service-2"))


def load_service(
    service: ServiceName, version: str = None, loader: Optional[Loader] = None
) -> ServiceDefinition:
    """
    Loads the service description and the paginator configuration of the given service.
    For example: load_service("dynamodb", "2012-08-10")

    :param service: the name of the service (the botocore data directory name)
    :param version: the API version, defaults to the latest
    :param loader: the loader to use, defaults to a PatchingLoader over botocore's data
    :return: the service definition
    :raises UnknownServiceError: if the service does not exist
    """
    loader = loader or _default_loader()
    description = loader.load_service_model(service, "service-2", version)

    try:
        pagination = loader.load_service_model(
            service, "paginators-1", description["metadata"]["apiVersion"]
        )
    except DataNotFoundError:
        LOG.debug("no paginators found for %s", service)
        pagination = None

    return ServiceDefinition(service, description, pagination)
