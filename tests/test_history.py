"""
Tests for the comparison history store.

Tests:
- Saving, ordering and de-duplication of file pairs
- Truncation to the configured maximum
- Corrupt history files
- Validation and loading of recorded files
"""

import json

import pytest

from bpmn_diff.core.errors import HistoryError
from bpmn_diff.tools.history import ComparisonHistory, HistoryFile, HistoryItem


@pytest.fixture
def store(tmp_path):
    return ComparisonHistory(tmp_path / "state" / "history.json", max_items=3)


def make_files(tmp_path, *names):
    paths = []
    for name in names:
        path = tmp_path / name
        path.write_text(f"<definitions id='{name}' />", encoding="utf-8")
        paths.append(path)
    return paths


class TestSaveComparison:

    def test_empty_history(self, store):
        assert store.get_history() == []

    def test_save_creates_file_and_entry(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        item = store.save_comparison(a, b)

        assert store.path.exists()
        history = store.get_history()
        assert len(history) == 1
        assert history[0].id == item.id
        assert history[0].file1 == HistoryFile(path=str(a.resolve()), name="a.bpmn")

    def test_newest_first(self, store, tmp_path):
        a, b, c = make_files(tmp_path, "a.bpmn", "b.bpmn", "c.bpmn")
        store.save_comparison(a, b)
        store.save_comparison(b, c)

        names = [(i.file1.name, i.file2.name) for i in store.get_history()]
        assert names == [("b.bpmn", "c.bpmn"), ("a.bpmn", "b.bpmn")]

    def test_same_pair_in_either_order_is_deduplicated(self, store, tmp_path):
        a, b, c = make_files(tmp_path, "a.bpmn", "b.bpmn", "c.bpmn")
        store.save_comparison(a, b)
        store.save_comparison(a, c)
        store.save_comparison(b, a)

        history = store.get_history()
        assert len(history) == 2
        assert (history[0].file1.name, history[0].file2.name) == ("b.bpmn", "a.bpmn")
        assert history[1].file2.name == "c.bpmn"

    def test_truncated_to_max_items(self, store, tmp_path):
        files = make_files(tmp_path, *[f"v{i}.bpmn" for i in range(5)])
        for first, second in zip(files, files[1:]):
            store.save_comparison(first, second)

        history = store.get_history()
        assert len(history) == 3
        assert history[0].file2.name == "v4.bpmn"

    def test_get_item(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        store.save_comparison(a, b)
        assert store.get_item(0).file1.name == "a.bpmn"
        assert store.get_item(1) is None
        assert store.get_item(-1) is None


class TestCorruptHistory:

    @pytest.mark.parametrize("content", ["not json", "{\"a\": 1}", "[{\"file1\": 3}]", "42"])
    def test_unreadable_history_is_empty(self, store, content):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(content, encoding="utf-8")
        assert store.get_history() == []

    def test_saving_over_corrupt_history(self, store, tmp_path):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("garbage", encoding="utf-8")
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")

        store.save_comparison(a, b)

        assert len(store.get_history()) == 1
        assert isinstance(json.loads(store.path.read_text(encoding="utf-8")), list)


class TestValidateAndLoad:

    def test_validate_existing_files(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        item = store.save_comparison(a, b)
        validation = store.validate_item(item)
        assert validation.valid
        assert validation.missing_files == []

    def test_validate_reports_missing_files_by_name(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        item = store.save_comparison(a, b)
        b.unlink()

        validation = store.validate_item(item)
        assert not validation.valid
        assert validation.missing_files == ["b.bpmn"]

    def test_load_files(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        item = store.save_comparison(a, b)
        content1, content2 = store.load_files(item)
        assert "a.bpmn" in content1
        assert "b.bpmn" in content2

    def test_load_missing_files_raises(self, store, tmp_path):
        item = HistoryItem(
            file1=HistoryFile(path=str(tmp_path / "gone1.bpmn"), name="gone1.bpmn"),
            file2=HistoryFile(path=str(tmp_path / "gone2.bpmn"), name="gone2.bpmn"),
        )
        with pytest.raises(HistoryError, match="gone1.bpmn") as exc_info:
            store.load_files(item)
        assert exc_info.value.missing_files == ["gone1.bpmn", "gone2.bpmn"]


class TestClear:

    def test_clear(self, store, tmp_path):
        a, b = make_files(tmp_path, "a.bpmn", "b.bpmn")
        store.save_comparison(a, b)
        store.clear()
        assert store.get_history() == []
        assert not store.path.exists()

    def test_clear_without_file(self, store):
        store.clear()
        assert store.get_history() == []
