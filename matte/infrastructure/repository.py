import threading
from typing import Dict, Generic, List, Optional, TypeVar

from matte.domain.models import Entity

E = TypeVar("E", bound=Entity)


class InMemoryRepository(Generic[E]):
    """
    In-memory store for the entities of one resource.
    Assigns auto-incrementing ids starting at 1; ids are never reused.
    """

    def __init__(self, name: str):
        self.name = name
        self._store: Dict[int, E] = {}
        self._next_id = 1
        # Guards both the map and the id counter
        self._lock = threading.Lock()

    def save(self, entity: E) -> E:
        """
        Stores the entity, assigning the next id first if it has none.

        Args:
            entity (E): The entity to insert or overwrite.

        Returns:
            E: The same entity reference, now carrying its id.
        """
        with self._lock:
            entity_id = entity.id.get()
            if entity_id is None:
                entity_id = self._next_id
                self._next_id += 1
                entity.id.set(entity_id)
            self._store[entity_id] = entity
        return entity

    def find_by_id(self, entity_id: int) -> Optional[E]:
        with self._lock:
            return self._store.get(entity_id)

    def find_all(self) -> List[E]:
        with self._lock:
            return list(self._store.values())

    def delete_by_id(self, entity_id: int) -> None:
        with self._lock:
            self._store.pop(entity_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id
