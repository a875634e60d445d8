from client.storage import FileStorage, MemoryStorage


def test_memory_storage():
    storage = MemoryStorage({"a": "1"})
    storage.set_item("b", 2)
    storage.remove_item("a")
    storage.remove_item("missing")
    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_file_storage_survives_a_restart(tmp_path):
    path = tmp_path / "nested" / "local_storage.json"
    FileStorage(path).set_item("token", "tok-1")

    reopened = FileStorage(path)
    assert reopened.get_item("token") == "tok-1"
    reopened.remove_item("token")
    assert FileStorage(path).get_item("token") is None


def test_file_storage_ignores_an_unreadable_file(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("{broken", encoding="utf-8")
    assert FileStorage(path).get_item("token") is None
