import logging
from typing import Callable, Generic, Optional, TypeVar

from matte.domain.exceptions import EntityNotFoundException, InvalidIdFormatException
from matte.domain.fields import INT64_MAX, INT64_MIN, parse_integer
from matte.domain.models import Entity
from matte.infrastructure.codec import JsonCodec, escape
from matte.infrastructure.repository import InMemoryRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)

EntityFactory = Callable[[], E]


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def error_response(message: str, status: int) -> str:
    return f'{{"error":"{escape(message)}","status":{status}}}'


def message_response(message: str) -> str:
    return f'{{"message":"{escape(message)}"}}'


class EntityController(Generic[E]):
    """
    Generic CRUD router for one resource.

    Maps (method, path, body) onto repository and codec operations under
    `/api/<resource_name>` and always answers with a JSON string. Errors are
    reported inside the payload as `{"error": ..., "status": ...}`.
    """

    def __init__(
            self,
            repository: InMemoryRepository[E],
            resource_name: str,
            entity_factory: EntityFactory,
    ):
        self.repository = repository
        self.resource_name = resource_name
        self.base_path = f"/api/{resource_name}"
        self.entity_factory = entity_factory

    def handle_request(self, method: str, path: str, body: Optional[str] = "") -> str:
        try:
            id_segment = self._id_segment(path)

            if method == "GET" and path == self.base_path:
                return self._get_all()
            if method == "GET" and id_segment is not None:
                return self._get_by_id(self._parse_id(id_segment))
            if method == "POST" and path == self.base_path:
                return self._create(body or "")
            if method == "PUT" and id_segment is not None:
                return self._update(self._parse_id(id_segment), body or "")
            if method == "DELETE" and id_segment is not None:
                return self._delete(self._parse_id(id_segment))
            return error_response("Not Found", 404)

        except InvalidIdFormatException as e:
            return error_response(str(e), 400)
        except EntityNotFoundException as e:
            return error_response(str(e), 404)
        except Exception as e:
            logger.exception(f"Unhandled error for {method} {path}: {e}")
            return error_response(f"Internal Server Error: {e}", 500)

    def _id_segment(self, path: str) -> Optional[str]:
        prefix = self.base_path + "/"
        if path.startswith(prefix):
            return path[len(prefix):]
        return None

    @staticmethod
    def _parse_id(raw_id: str) -> int:
        try:
            return parse_integer(raw_id, INT64_MIN, INT64_MAX)
        except ValueError:
            raise InvalidIdFormatException(raw_id)

    def _require(self, entity_id: int) -> E:
        entity = self.repository.find_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundException(self.resource_name, entity_id)
        return entity

    def _get_all(self) -> str:
        return JsonCodec.serialize_all(self.repository.find_all())

    def _get_by_id(self, entity_id: int) -> str:
        return JsonCodec.serialize(self._require(entity_id))

    def _create(self, body: str) -> str:
        entity = JsonCodec.deserialize(body, self.entity_factory())
        self.repository.save(entity)
        logger.info(f"Created {self.resource_name} #{entity.id.get()}")
        return JsonCodec.serialize(entity)

    def _update(self, entity_id: int, body: str) -> str:
        entity = JsonCodec.deserialize(body, self._require(entity_id))
        self.repository.save(entity)
        logger.info(f"Updated {self.resource_name} #{entity_id}")
        return JsonCodec.serialize(entity)

    def _delete(self, entity_id: int) -> str:
        self._require(entity_id)
        self.repository.delete_by_id(entity_id)
        logger.info(f"Deleted {self.resource_name} #{entity_id}")
        return message_response(f"{capitalize(self.resource_name)} deleted successfully")
