"""Tests for link resolution and stale-link repair."""

from __future__ import annotations

import pytest

from procsync.application.sync.link import LinkResolver
from procsync.core.domain.enums import Dimension
from procsync.core.exceptions import AuthenticationError, TransientError, WorkspaceNotResolvedError


@pytest.fixture
def resolver(tracker, store):
    return LinkResolver(tracker, store, default_workspace_id="ws-default")


def link(store, tracker, process_id: int = 1) -> str:
    project = tracker.create_project("Existing", "", "ws-live")
    process = store.get_process(process_id)
    process.remote_project_id = project.gid
    process.remote_project_url = tracker.project_url(project.gid)
    process.workspace_id = "ws-live"
    process.remote_task_ids.set(Dimension.APPROACH, "old-task")
    store.save_sync_fields(process)
    return project.gid


class TestLinked:
    def test_live_project(self, resolver, tracker, store):
        project_id = link(store, tracker)

        resolution = resolver.resolve(store.get_process(1))

        assert resolution.linked
        assert resolution.project_id == project_id
        assert resolution.workspace_id == "ws-live"
        assert resolution.unlinked_stale is None

    def test_deleted_project_clears_link(self, resolver, tracker, store):
        project_id = link(store, tracker)
        tracker.delete_project(project_id)
        process = store.get_process(1)

        resolution = resolver.resolve(process)

        assert not resolution.linked
        assert resolution.unlinked_stale == project_id
        assert resolution.workspace_id == "ws-live"
        stored = store.get_process(1)
        assert stored.remote_project_id is None
        assert stored.remote_project_url is None
        assert len(stored.remote_task_ids) == 0
        assert not process.is_linked

    def test_other_probe_failures_propagate(self, resolver, tracker, store):
        link(store, tracker)
        tracker.fail_on("get_project", TransientError("timeout"))

        with pytest.raises(TransientError):
            resolver.resolve(store.get_process(1))

        assert store.get_process(1).is_linked

    def test_authentication_failure_propagates(self, resolver, tracker, store):
        link(store, tracker)
        tracker.fail_on("get_project", AuthenticationError("bad token"))

        with pytest.raises(AuthenticationError):
            resolver.resolve(store.get_process(1))

    def test_force_new_skips_probe(self, resolver, tracker, store):
        link(store, tracker)

        resolution = resolver.resolve(store.get_process(1), force_new=True)

        assert not resolution.linked
        assert tracker.call_count("get_project") == 0


class TestUnlinked:
    def test_target_workspace_wins(self, resolver, store):
        resolution = resolver.resolve(store.get_process(1), target_workspace_id="ws-target")
        assert resolution.workspace_id == "ws-target"

    def test_process_workspace_before_default(self, resolver, store):
        process = store.get_process(1)
        process.workspace_id = "ws-process"

        assert resolver.resolve(process).workspace_id == "ws-process"

    def test_default_workspace(self, resolver, store):
        assert resolver.resolve(store.get_process(1)).workspace_id == "ws-default"

    def test_no_workspace_is_fatal(self, tracker, store):
        resolver = LinkResolver(tracker, store)

        with pytest.raises(WorkspaceNotResolvedError):
            resolver.resolve(store.get_process(1))
