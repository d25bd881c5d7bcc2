"""Tests for _storage.py: FileConfigStorage and FakeConfigStorage."""

import pytest

from sealed_config._storage import ConfigStorage, FakeConfigStorage, FileConfigStorage
from sealed_config._types import ConfigReadError, ConfigWriteError


class TestFileConfigStorage:
    def test_write_then_read(self, tmp_path):
        storage = FileConfigStorage()
        path = str(tmp_path / "app.json")
        storage.write_text(path, '{"a": 1}')
        assert storage.read_text(path) == '{"a": 1}'

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "app.json"
        FileConfigStorage().write_text(str(path), "{}")
        assert path.read_text() == "{}"

    def test_missing_directory_without_create_parents(self, tmp_path):
        path = str(tmp_path / "nested" / "app.json")
        with pytest.raises(ConfigWriteError, match="Directory not found") as exc_info:
            FileConfigStorage(create_parents=False).write_text(path, "{}")
        assert exc_info.value.path == path

    def test_parent_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(ConfigWriteError):
            FileConfigStorage().write_text(str(blocker / "app.json"), "{}")

    def test_missing_file(self, tmp_path):
        path = str(tmp_path / "missing.json")
        with pytest.raises(ConfigReadError, match="File does not exist") as exc_info:
            FileConfigStorage().read_text(path)
        assert exc_info.value.path == path

    @pytest.mark.parametrize("content", ["", "   \n\t"])
    def test_empty_file(self, tmp_path, content):
        path = tmp_path / "empty.json"
        path.write_text(content)
        with pytest.raises(ConfigReadError, match="empty"):
            FileConfigStorage().read_text(str(path))

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(ConfigReadError):
            FileConfigStorage().read_text(str(tmp_path))

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ConfigReadError, match="Could not read file"):
            FileConfigStorage().read_text(str(path))

    def test_satisfies_protocol(self):
        assert isinstance(FileConfigStorage(), ConfigStorage)

    @pytest.mark.asyncio
    async def test_async_round_trip(self, tmp_path):
        storage = FileConfigStorage()
        path = str(tmp_path / "app.json")
        await storage.awrite_text(path, "{}")
        assert await storage.aread_text(path) == "{}"

    @pytest.mark.asyncio
    async def test_async_missing_file(self, tmp_path):
        with pytest.raises(ConfigReadError):
            await FileConfigStorage().aread_text(str(tmp_path / "missing.json"))


class TestFakeConfigStorage:
    def test_initial_files(self):
        assert FakeConfigStorage({"a.json": "{}"}).read_text("a.json") == "{}"

    def test_write_then_read(self):
        storage = FakeConfigStorage()
        storage.write_text("a.json", "{}")
        assert storage.files == {"a.json": "{}"}

    def test_missing_file(self):
        with pytest.raises(ConfigReadError):
            FakeConfigStorage().read_text("a.json")

    def test_empty_file(self):
        with pytest.raises(ConfigReadError):
            FakeConfigStorage({"a.json": " "}).read_text("a.json")

    def test_satisfies_protocol(self):
        assert isinstance(FakeConfigStorage(), ConfigStorage)
