import logging
from typing import Callable, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from matte.application.controller import EntityController
from matte.domain.exceptions import RegistrationException
from matte.infrastructure.codec import escape
from matte.infrastructure.repository import InMemoryRepository

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"
# GET /api/entities lists the registered resource names
ENTITIES_RESOURCE = "entities"


class ResourceBinding(BaseModel):
    """
    Everything registered under one resource name. Frozen once created;
    only the repository's contents change afterwards.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resource_name: str = Field(..., min_length=1, description="Path segment under /api/")
    repository: InMemoryRepository = Field(..., description="Store backing the resource")
    controller: EntityController = Field(..., description="CRUD router for the resource")
    factory: Callable = Field(..., description="Builds a fresh, empty entity of the resource's kind")


class Matte:
    """
    Registry binding resource names to their repository and controller,
    and the entry point the HTTP transport dispatches requests through.
    """

    def __init__(self, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST):
        self.port = port
        self.host = host
        self._bindings: Dict[str, ResourceBinding] = {}

    def register(self, resource_name: str, factory: Callable) -> "Matte":
        """
        Registers an entity kind under `resource_name`.

        Args:
            resource_name (str): Path segment, e.g. "users" for /api/users.
            factory (Callable): Zero-argument callable returning a fresh entity.

        Returns:
            Matte: self, so registrations can be chained.
        """
        if not resource_name or "/" in resource_name:
            raise RegistrationException(f"Invalid resource name: {resource_name!r}")
        if resource_name == ENTITIES_RESOURCE:
            raise RegistrationException(f"'{ENTITIES_RESOURCE}' is reserved for the resource listing.")
        if resource_name in self._bindings:
            raise RegistrationException(f"Resource '{resource_name}' is already registered.")

        repository = InMemoryRepository(resource_name)
        controller = EntityController(repository, resource_name, factory)
        self._bindings[resource_name] = ResourceBinding(
            resource_name=resource_name,
            repository=repository,
            controller=controller,
            factory=factory,
        )

        logger.info(f"Registered entity: {resource_name}")
        return self

    def get_repository(self, resource_name: str) -> Optional[InMemoryRepository]:
        binding = self._bindings.get(resource_name)
        return binding.repository if binding else None

    def get_controller(self, resource_name: str) -> Optional[EntityController]:
        binding = self._bindings.get(resource_name)
        return binding.controller if binding else None

    def get_binding(self, resource_name: str) -> Optional[ResourceBinding]:
        return self._bindings.get(resource_name)

    def resource_names(self) -> List[str]:
        return list(self._bindings)

    def entities_json(self) -> str:
        return "[" + ",".join(f'"{escape(name)}"' for name in self._bindings) + "]"

    def dispatch(self, method: str, path: str, body: str = "") -> Optional[str]:
        """
        Routes a request to the controller whose base path matches `path`.

        Returns:
            Optional[str]: The controller's JSON response, or None when no
            registered resource owns the path.
        """
        for binding in self._bindings.values():
            base_path = binding.controller.base_path
            if path == base_path or path.startswith(base_path + "/"):
                return binding.controller.handle_request(method, path, body)
        return None
