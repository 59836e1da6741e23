import threading
import unittest

from matte.domain.fields import TypeTag
from matte.domain.models import Entity, field
from matte.infrastructure.repository import InMemoryRepository


class _Item(Entity):
    name = field("name", TypeTag.STRING)


def _item(name: str) -> _Item:
    item = _Item()
    item.name.set(name)
    return item


class TestInMemoryRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = InMemoryRepository("items")

    def test_save_assigns_incrementing_ids(self) -> None:
        first = self.repository.save(_item("a"))
        second = self.repository.save(_item("b"))

        self.assertEqual(first.id.get(), 1)
        self.assertEqual(second.id.get(), 2)
        self.assertEqual(self.repository.next_id, 3)

    def test_save_returns_same_reference(self) -> None:
        item = _item("a")

        self.assertIs(self.repository.save(item), item)
        self.assertIs(self.repository.find_by_id(1), item)

    def test_save_keeps_existing_id(self) -> None:
        item = _item("a")
        item.id.set(100)
        self.repository.save(item)

        self.assertIs(self.repository.find_by_id(100), item)
        self.assertEqual(self.repository.next_id, 1)

    def test_saving_again_overwrites(self) -> None:
        item = self.repository.save(_item("a"))
        item.name.set("b")
        self.repository.save(item)

        self.assertEqual(self.repository.count(), 1)
        self.assertEqual(self.repository.find_by_id(1).name.get(), "b")

    def test_find_missing_returns_none(self) -> None:
        self.assertIsNone(self.repository.find_by_id(42))

    def test_find_all(self) -> None:
        self.assertEqual(self.repository.find_all(), [])

        self.repository.save(_item("a"))
        self.repository.save(_item("b"))

        names = sorted(item.name.get() for item in self.repository.find_all())
        self.assertEqual(names, ["a", "b"])

    def test_ids_are_not_reused_after_delete(self) -> None:
        self.repository.save(_item("a"))
        self.repository.delete_by_id(1)
        item = self.repository.save(_item("b"))

        self.assertEqual(item.id.get(), 2)
        self.assertIsNone(self.repository.find_by_id(1))

    def test_deleting_missing_id_is_noop(self) -> None:
        self.repository.save(_item("a"))
        self.repository.delete_by_id(999)

        self.assertEqual(self.repository.count(), 1)

    def test_repositories_are_independent(self) -> None:
        other = InMemoryRepository("others")
        self.repository.save(_item("a"))

        self.assertEqual(other.save(_item("b")).id.get(), 1)
        self.assertEqual(other.count(), 1)

    def test_concurrent_saves_get_unique_ids(self) -> None:
        def worker() -> None:
            for _ in range(200):
                self.repository.save(_item("x"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        ids = {item.id.get() for item in self.repository.find_all()}
        self.assertEqual(len(ids), 1600)
        self.assertEqual(ids, set(range(1, 1601)))
