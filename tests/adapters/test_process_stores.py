"""
Tests for the process stores.

The contract tests run against both implementations; SQLite-specific
behaviour (JSON columns, charter fallback) is tested separately.
"""

from __future__ import annotations

import sqlite3

import pytest

from procsync.adapters.store import InMemoryProcessStore, SQLiteProcessStore
from procsync.core.domain.entities import ImprovementJournalEntry, ProcessRecord, RemoteTaskIds
from procsync.core.domain.enums import Dimension
from procsync.core.exceptions import ProcessNotFoundError, StoreError


def _seed_memory(tmp_path) -> InMemoryProcessStore:
    store = InMemoryProcessStore()
    store.add_process(ProcessRecord(id=1, name="Onboarding", description_source="Purpose"))
    store.add_process(ProcessRecord(id=2, name="Billing", remote_project_id="p2"))
    store.add_journal_entry(ImprovementJournalEntry(id=10, process_id=1, section_affected="approach", title="A"))
    store.add_journal_entry(
        ImprovementJournalEntry(
            id=11,
            process_id=1,
            section_affected="learning",
            title="B",
            remote_task_url="https://tracker/t",
        )
    )
    return store


def _seed_sqlite(tmp_path) -> SQLiteProcessStore:
    store = SQLiteProcessStore(tmp_path / "procsync.db")
    store.insert_process(1, "Onboarding", description="Purpose")
    store.insert_process(2, "Billing")
    store.update_process_sync_fields(
        2,
        remote_project_id="p2",
        remote_project_url=None,
        workspace_id=None,
        remote_task_ids=RemoteTaskIds(),
    )
    store.insert_journal_entry(10, 1, "approach", "A")
    store.insert_journal_entry(11, 1, "learning", "B")
    store.set_journal_entry_remote_link(11, "https://tracker/t")
    return store


@pytest.fixture(params=[_seed_memory, _seed_sqlite], ids=["memory", "sqlite"])
def seeded_store(request, tmp_path):
    return request.param(tmp_path)


class TestStoreContract:
    """Behaviour every ProcessStorePort implementation shares."""

    def test_get_process(self, seeded_store):
        process = seeded_store.get_process(1)
        assert process.name == "Onboarding"
        assert process.description_source == "Purpose"
        assert not process.is_linked

    def test_missing_process(self, seeded_store):
        with pytest.raises(ProcessNotFoundError):
            seeded_store.get_process(999)

    def test_sync_fields_round_trip(self, seeded_store):
        seeded_store.update_process_sync_fields(
            1,
            remote_project_id="p1",
            remote_project_url="https://tracker/p1",
            workspace_id="ws-1",
            remote_task_ids=RemoteTaskIds({Dimension.APPROACH: "t1", Dimension.INTEGRATION: "t4"}),
        )

        process = seeded_store.get_process(1)

        assert process.remote_project_id == "p1"
        assert process.remote_project_url == "https://tracker/p1"
        assert process.workspace_id == "ws-1"
        assert process.remote_task_ids.to_dict() == {"approach": "t1", "integration": "t4"}

    def test_update_missing_process(self, seeded_store):
        with pytest.raises(ProcessNotFoundError):
            seeded_store.update_process_sync_fields(
                999,
                remote_project_id=None,
                remote_project_url=None,
                workspace_id=None,
                remote_task_ids=RemoteTaskIds(),
            )

    def test_save_sync_fields_from_record(self, seeded_store):
        process = seeded_store.get_process(1)
        process.remote_project_id = "p1"
        process.remote_task_ids.set(Dimension.LEARNING, "t3")

        seeded_store.save_sync_fields(process)

        assert seeded_store.get_process(1).remote_task_ids.get(Dimension.LEARNING) == "t3"

    def test_list_process_ids(self, seeded_store):
        assert seeded_store.list_process_ids() == [1, 2]
        assert seeded_store.list_process_ids(linked_only=True) == [2]

    def test_unlinked_journal_entries(self, seeded_store):
        entries = seeded_store.list_unlinked_journal_entries(1)
        assert [e.id for e in entries] == [10]

    def test_set_remote_link(self, seeded_store):
        seeded_store.set_journal_entry_remote_link(10, "https://tracker/t10")

        assert seeded_store.get_journal_entry(10).remote_task_url == "https://tracker/t10"
        assert seeded_store.list_unlinked_journal_entries(1) == []

    def test_set_remote_link_on_missing_entry(self, seeded_store):
        with pytest.raises(StoreError):
            seeded_store.set_journal_entry_remote_link(999, "https://tracker/t")

    def test_get_missing_entry(self, seeded_store):
        assert seeded_store.get_journal_entry(999) is None

    def test_audit_records_append(self, seeded_store):
        seeded_store.append_audit_record(1, "Synced to Asana project")
        seeded_store.append_audit_record(1, "Synced again")
        assert seeded_store.audit_records(1) == ["Synced to Asana project", "Synced again"]


class TestInMemoryProcessStore:
    def test_returns_copies(self):
        store = InMemoryProcessStore()
        store.add_process(ProcessRecord(id=1, name="P"))

        process = store.get_process(1)
        process.remote_project_id = "changed"

        assert store.get_process(1).remote_project_id is None


class TestSQLiteProcessStore:
    """SQLite-specific mapping."""

    @pytest.fixture
    def store(self, tmp_path) -> SQLiteProcessStore:
        return SQLiteProcessStore(tmp_path / "nested" / "procsync.db")

    def test_creates_parent_directory(self, store, tmp_path):
        assert (tmp_path / "nested" / "procsync.db").exists()

    def test_charter_content_wins_over_description(self, store):
        store.insert_process(1, "P", description="fallback", charter={"content": "Charter text"})
        assert store.get_process(1).description_source == "Charter text"

    def test_charter_purpose_used_without_content(self, store):
        store.insert_process(1, "P", description="fallback", charter={"purpose": "Why we exist"})
        assert store.get_process(1).description_source == "Why we exist"

    def test_description_fallback(self, store):
        store.insert_process(1, "P", description="fallback")
        assert store.get_process(1).description_source == "fallback"

    def test_documentation_rendered(self, store):
        store.insert_process(
            1,
            "P",
            documentation={
                "approach": {"content": "Step by step"},
                "deployment": {"owners": ["Ops", "Sales"], "cadence": "Weekly"},
                "charter": {"content": "ignored"},
            },
        )

        process = store.get_process(1)

        assert process.documentation[Dimension.APPROACH] == "Step by step"
        assert process.documentation[Dimension.DEPLOYMENT] == "**Owners:**\n- Ops\n- Sales\n\n**Cadence:** Weekly"
        assert set(process.documentation) == {Dimension.APPROACH, Dimension.DEPLOYMENT}

    def test_corrupt_task_ids_treated_as_empty(self, store):
        store.insert_process(1, "P")
        with sqlite3.connect(store.path) as conn:
            conn.execute("UPDATE processes SET remote_task_ids = 'not json' WHERE id = 1")

        assert len(store.get_process(1).remote_task_ids) == 0

    def test_sqlite_errors_become_store_errors(self, store):
        store.insert_process(1, "P")
        with pytest.raises(StoreError):
            store.insert_process(1, "Duplicate")
