"""Tests for property store implementations."""

import sqlite3
import threading

import pytest
import yaml

from shratna.configuration import AtnaConfiguration
from shratna.services import (
    InMemoryPropertyStore,
    SQLitePropertyStore,
    YamlPropertyStore,
)


@pytest.fixture(params=["memory", "sqlite", "yaml"])
def any_store(request, tmp_path):
    """Provide each store type in turn."""
    if request.param == "memory":
        store = InMemoryPropertyStore()
    elif request.param == "sqlite":
        store = SQLitePropertyStore(tmp_path / "props.db")
    else:
        store = YamlPropertyStore(tmp_path / "props.yaml")
    yield store
    store.close()


class TestPropertyStoreContract:
    """Behaviour shared by every store."""

    def test_read_absent(self, any_store):
        """Unknown properties read as None."""
        assert any_store.read("missing") is None

    def test_write_then_read(self, any_store):
        """Written text comes back unchanged."""
        any_store.write("shr.id.root", "1.2.3.4.5.6")

        assert any_store.read("shr.id.root") == "1.2.3.4.5.6"

    def test_numeric_text_stays_text(self, any_store):
        """Numeric-looking values are stored and returned as text."""
        any_store.write("shr-atna.auditRepository.port", "514")

        assert any_store.read("shr-atna.auditRepository.port") == "514"

    def test_empty_value(self, any_store):
        """An empty value is distinct from an absent one."""
        any_store.write("shr.id.ecidRoot", "")

        assert any_store.read("shr.id.ecidRoot") == ""

    def test_overwrite(self, any_store):
        """A second write replaces the value, leaving one entry."""
        any_store.write("shr-atna.deviceName", "a")
        any_store.write("shr-atna.deviceName", "b")

        assert any_store.read("shr-atna.deviceName") == "b"
        assert any_store.names() == ["shr-atna.deviceName"]

    def test_names_sorted(self, any_store):
        any_store.write("b", "1")
        any_store.write("a", "2")

        assert any_store.names() == ["a", "b"]

    def test_close_is_idempotent(self, any_store):
        any_store.close()
        any_store.close()


class TestInMemoryPropertyStore:
    """Tests for InMemoryPropertyStore."""

    def test_initial_values(self):
        """Initial values are copied, not shared."""
        initial = {"shr.id.root": "1.1"}
        store = InMemoryPropertyStore(initial)
        store.write("shr.id.root", "2.2")

        assert initial["shr.id.root"] == "1.1"
        assert store.as_dict() == {"shr.id.root": "2.2"}
        assert len(store) == 1

    def test_counts_reads_and_writes(self):
        store = InMemoryPropertyStore()
        store.read("a")
        store.write("a", "1")
        store.read("a")

        assert store.reads == 2
        assert store.writes == 1


class TestSQLitePropertyStore:
    """Tests for SQLitePropertyStore."""

    def test_persists_across_reopen(self, tmp_path):
        """Values survive closing and reopening the database."""
        db_path = tmp_path / "props.db"
        with SQLitePropertyStore(db_path) as store:
            store.write("shr.id.root", "1.3.6.1")

        with SQLitePropertyStore(db_path) as store:
            assert store.read("shr.id.root") == "1.3.6.1"

    def test_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "props.db"
        with SQLitePropertyStore(db_path):
            pass

        assert db_path.exists()

    def test_wal_mode_enabled(self, tmp_path):
        """WAL journaling lets other processes read during writes."""
        with SQLitePropertyStore(tmp_path / "props.db") as store:
            mode = store._conn.execute("PRAGMA journal_mode").fetchone()[0]

        assert mode.upper() == "WAL"

    def test_custom_table_name(self, tmp_path):
        """Properties land in the configured table."""
        db_path = tmp_path / "props.db"
        with SQLitePropertyStore(db_path, table_name="atna_property") as store:
            store.write("shr-atna.deviceName", "node-1")

        conn = sqlite3.connect(db_path)
        try:
            row = conn.execute(
                "SELECT property_value FROM atna_property WHERE property = ?",
                ("shr-atna.deviceName",),
            ).fetchone()
        finally:
            conn.close()

        assert row == ("node-1",)

    def test_invalid_table_name(self, tmp_path):
        """Table names must be plain identifiers."""
        with pytest.raises(ValueError, match="Invalid table name"):
            SQLitePropertyStore(tmp_path / "props.db", table_name="x; DROP TABLE y")

    def test_use_after_close(self, tmp_path):
        """A closed store refuses further operations."""
        store = SQLitePropertyStore(tmp_path / "props.db")
        store.close()

        with pytest.raises(RuntimeError, match="closed"):
            store.read("shr.id.root")

    def test_concurrent_writes(self, tmp_path):
        """Writes from many threads on one connection all land."""
        errors = []

        with SQLitePropertyStore(tmp_path / "props.db") as store:
            def writer(n: int):
                try:
                    for i in range(20):
                        store.write(f"prop.{n}.{i}", str(i))
                except Exception as e:
                    errors.append(e)

            threads = [threading.Thread(target=writer, args=(n,)) for n in range(5)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            assert errors == []
            assert len(store.names()) == 100
            assert store.read("prop.4.19") == "19"


class TestYamlPropertyStore:
    """Tests for YamlPropertyStore."""

    def test_missing_file_is_empty(self, tmp_path):
        store = YamlPropertyStore(tmp_path / "absent.yaml")

        assert store.read("shr.id.root") is None
        assert store.names() == []

    def test_writes_readable_yaml(self, tmp_path):
        """The file is a flat mapping of quoted text values."""
        path = tmp_path / "conf" / "props.yaml"
        store = YamlPropertyStore(path)
        store.write("shr-atna.auditRepository.port", "514")

        data = yaml.safe_load(path.read_text())

        assert data == {"shr-atna.auditRepository.port": "514"}

    @pytest.mark.parametrize("raw,expected", [
        ("6514", "6514"),
        ("1.10", "1.10"),
        ("yes", "yes"),
        ("0514", "0514"),
        ("1.3.6.1.4.1", "1.3.6.1.4.1"),
        ("'quoted'", "quoted"),
    ])
    def test_hand_edited_scalars_read_verbatim(self, tmp_path, raw, expected):
        """Unquoted values in an edited file come back exactly as typed."""
        path = tmp_path / "props.yaml"
        path.write_text(f"some.property: {raw}\n")

        assert YamlPropertyStore(path).read("some.property") == expected

    def test_hand_edited_blank_reads_empty(self, tmp_path):
        path = tmp_path / "props.yaml"
        path.write_text("shr.id.ecidRoot:\n")

        assert YamlPropertyStore(path).read("shr.id.ecidRoot") == ""

    def test_nested_value_rejected(self, tmp_path):
        """Properties must be flat scalars."""
        path = tmp_path / "props.yaml"
        path.write_text("shr.id.root:\n  nested: 1\n")

        with pytest.raises(ValueError, match="must be a scalar"):
            YamlPropertyStore(path).read("shr.id.root")

    def test_hand_edited_values_through_configuration(self, tmp_path):
        """Derived roots and the port follow hand-edited text unchanged."""
        path = tmp_path / "props.yaml"
        path.write_text(
            "shr.id.root: 1.10\n"
            "shr-atna.deviceName: yes\n"
            "shr-atna.auditRepository.port: 0514\n"
        )
        config = AtnaConfiguration(YamlPropertyStore(path))

        assert config.get_shr_root() == "1.10"
        assert config.get_visit_root() == "1.10.1"
        assert config.get_device_name() == "yes"
        assert config.get_audit_repository_port() == 514

    def test_external_edit_visible(self, tmp_path):
        """Edits to the file show up on the next read."""
        path = tmp_path / "props.yaml"
        store = YamlPropertyStore(path)
        store.write("shr-atna.deviceName", "before")

        path.write_text("shr-atna.deviceName: after\n")

        assert store.read("shr-atna.deviceName") == "after"

    def test_write_keeps_other_entries(self, tmp_path):
        path = tmp_path / "props.yaml"
        path.write_text("existing.key: kept\n")
        store = YamlPropertyStore(path)

        store.write("new.key", "added")

        assert store.read("existing.key") == "kept"
        assert store.read("new.key") == "added"
        assert not (tmp_path / "props.yaml.tmp").exists()

    def test_non_mapping_file(self, tmp_path):
        """A file that isn't a mapping is rejected."""
        path = tmp_path / "props.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            YamlPropertyStore(path).read("anything")
