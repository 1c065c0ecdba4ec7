"""
Tests for local durable storage.
"""

from cart_client.storage import FileStorage
from cart_client.store import CartStore

from conftest import line_item


class TestFileStorage:
    def test_set_get_remove(self, tmp_path):
        storage = FileStorage(tmp_path / "storage.json")

        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        FileStorage(path).set_item("k", "v")

        assert FileStorage(path).get_item("k") == "v"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("not json at all")

        storage = FileStorage(path)
        assert storage.get_item("k") is None

        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

    def test_cart_survives_restart(self, tmp_path):
        path = tmp_path / "storage.json"
        store = CartStore(FileStorage(path))
        store.add_item(line_item("a", quantity=3, price=4.5))

        restored = CartStore(FileStorage(path))

        assert [(i.id, i.quantity) for i in restored.items] == [("a", 3)]
        assert restored.total_price() == 13.5
