"""
Asana Adapter - Implements TrackerPort for Asana.

Maps the engine's project/section/task operations onto Asana endpoints and
Asana JSON onto the domain's remote objects.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from procsync.core.domain.entities import RemoteProject, RemoteSection, RemoteTask
from procsync.core.exceptions import TrackerError
from procsync.core.ports.config_provider import TrackerConfig
from procsync.core.ports.tracker import TrackerPort

from .client import AsanaClient


PROJECT_FIELDS = "name,notes,workspace.gid,permalink_url"
TASK_FIELDS = "name,notes,permalink_url,memberships.section.gid"
APP_URL = "https://app.asana.com/0"


class AsanaAdapter(TrackerPort):
    """Asana implementation of the TrackerPort."""

    def __init__(
        self,
        config: TrackerConfig,
        *,
        client: AsanaClient | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the Asana adapter.

        Args:
            config: Tracker configuration (uses access_token, url and timeout).
            client: Optional prebuilt client.
            session: Optional custom requests session for testing.
        """
        self.config = config
        self.client = client or AsanaClient(
            config.access_token,
            base_url=config.url,
            session=session,
            timeout=config.timeout,
        )
        self.logger = logging.getLogger("AsanaAdapter")

    @property
    def name(self) -> str:
        return "Asana"

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    def _parse_project(self, data: dict[str, Any]) -> RemoteProject:
        workspace = data.get("workspace") or {}
        gid = str(data.get("gid", ""))
        return RemoteProject(
            gid=gid,
            name=data.get("name", ""),
            notes=data.get("notes") or "",
            workspace_id=workspace.get("gid"),
            permalink_url=data.get("permalink_url") or self.project_url(gid),
        )

    def _parse_task(self, data: dict[str, Any]) -> RemoteTask:
        section_ids = [
            str(m["section"]["gid"])
            for m in data.get("memberships") or []
            if (m.get("section") or {}).get("gid")
        ]
        return RemoteTask(
            gid=str(data.get("gid", "")),
            name=data.get("name", ""),
            notes=data.get("notes") or "",
            permalink_url=data.get("permalink_url"),
            section_ids=section_ids,
        )

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def get_project(self, project_id: str) -> RemoteProject:
        data = self.client.request(
            "GET", f"/projects/{project_id}", params={"opt_fields": PROJECT_FIELDS}
        )
        return self._parse_project(data)

    def update_project(self, project_id: str, notes: str) -> RemoteProject:
        data = self.client.request(
            "PUT",
            f"/projects/{project_id}",
            {"notes": notes},
            params={"opt_fields": PROJECT_FIELDS},
        )
        return self._parse_project(data)

    def create_project(self, name: str, notes: str, workspace_id: str) -> RemoteProject:
        payload: dict[str, Any] = {"name": name, "notes": notes, "workspace": workspace_id}
        team_id = self._find_team(workspace_id)
        if team_id:
            payload["team"] = team_id

        data = self.client.request(
            "POST", "/projects", payload, params={"opt_fields": PROJECT_FIELDS}
        )
        project = self._parse_project(data)
        if not project.workspace_id:
            project.workspace_id = workspace_id
        self.logger.info(f"Created Asana project {project.gid} in workspace {workspace_id}")
        return project

    def _find_team(self, workspace_id: str) -> str | None:
        """First team of an organization; plain workspaces have none."""
        result = self.client.call(
            "GET", f"/organizations/{workspace_id}/teams", params={"limit": 1}
        )
        if result.is_err():
            self.logger.debug(f"No team for workspace {workspace_id}: {result.err()}")
            return None
        teams = result.unwrap() or []
        return str(teams[0]["gid"]) if teams else None

    def project_url(self, project_id: str) -> str:
        return f"{APP_URL}/{project_id}"

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def list_sections(self, project_id: str) -> list[RemoteSection]:
        result = self.client.call_paginated(
            f"/projects/{project_id}/sections", params={"opt_fields": "name"}
        )
        if result.is_err():
            raise result.err()
        return [
            RemoteSection(gid=str(s["gid"]), name=s.get("name", ""), project_id=project_id)
            for s in result.unwrap()
        ]

    def create_section(self, project_id: str, name: str) -> RemoteSection:
        data = self.client.request("POST", f"/projects/{project_id}/sections", {"name": name})
        return RemoteSection(gid=str(data["gid"]), name=data.get("name", name), project_id=project_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def create_task(
        self,
        name: str,
        notes: str,
        project_id: str,
        section_id: str | None = None,
        workspace_id: str | None = None,
    ) -> RemoteTask:
        payload: dict[str, Any] = {"name": name, "notes": notes, "projects": [project_id]}
        if section_id:
            payload["memberships"] = [{"project": project_id, "section": section_id}]
        if workspace_id:
            payload["workspace"] = workspace_id

        data = self.client.request("POST", "/tasks", payload, params={"opt_fields": TASK_FIELDS})
        task = self._parse_task(data)
        if not task.gid:
            raise TrackerError("Asana did not return a task id")
        return task

    def update_task(self, task_id: str, name: str, notes: str) -> RemoteTask:
        data = self.client.request(
            "PUT",
            f"/tasks/{task_id}",
            {"name": name, "notes": notes},
            params={"opt_fields": TASK_FIELDS},
        )
        return self._parse_task(data)

    def add_task_to_section(self, section_id: str, task_id: str) -> None:
        self.client.request("POST", f"/sections/{section_id}/addTask", {"task": task_id})
