"""
Output - What the CLI prints on stdout.

Logs go to stderr through the logging setup; this module renders sync
results for people (colored text) or for scripts (one JSON document).
"""

import json
import sys
from typing import Any

from procsync.application.sync import BatchSyncResult, SyncResult
from procsync.core.domain.entities import ProcessRecord
from procsync.core.domain.enums import Dimension, SyncAction


class Colors:
    """ANSI escape codes used by Console."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


class Symbols:
    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    BULLET = "•"
    WARN = "⚠"
    INFO = "ℹ"
    LINK = "🔗"
    RULE = "─"


class Console:
    """
    Terminal output for the procsync commands.

    In JSON mode nothing but the final document reaches stdout: errors are
    collected and emitted with it.
    """

    def __init__(
        self,
        color: bool = True,
        verbose: bool = False,
        quiet: bool = False,
        json_mode: bool = False,
    ):
        """
        Args:
            color: Use ANSI colors when stdout is a terminal.
            verbose: Show debug lines.
            quiet: Show only errors and final results.
            json_mode: Emit a single JSON document instead of text.
        """
        self.json_mode = json_mode
        self.quiet = quiet or json_mode
        self.verbose = verbose and not self.quiet
        self.color = color and not json_mode and sys.stdout.isatty()
        self._json_errors: list[str] = []

    def _c(self, text: str, *codes: str) -> str:
        return "".join(codes) + text + Colors.RESET if self.color else text

    def print(self, text: str = "", force: bool = False) -> None:
        """Print a line unless quiet; ``force`` prints regardless."""
        if force or not self.quiet:
            print(text)

    def header(self, text: str) -> None:
        if self.quiet:
            return
        rule = self._c((Symbols.RULE if self.color else "-") * max(len(text) + 4, 50), Colors.CYAN)
        self.print()
        self.print(rule)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(rule)
        self.print()

    def error(self, text: str) -> None:
        """Always shown; in JSON mode kept for the final document."""
        if self.json_mode:
            self._json_errors.append(text)
        else:
            print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED))

    def config_errors(self, errors: list[str]) -> None:
        """List configuration problems and where settings are read from."""
        if self.json_mode:
            self._json_errors.extend(errors)
            return
        print(self._c(f"  {Symbols.CROSS} Configuration error(s):", Colors.RED, Colors.BOLD))
        for error in errors:
            print(self._c(f"    {Symbols.BULLET} {error}", Colors.RED))
        print(self._c("    Settings are read from the environment or a .env file.", Colors.DIM))

    def warning(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def debug(self, text: str) -> None:
        if self.verbose:
            self.print(self._c(f"  [DEBUG] {text}", Colors.DIM))

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Left-aligned columns sized to their widest cell."""
        if self.quiet:
            return
        cells = [[str(cell) for cell in row] for row in rows]
        widths = [
            max([len(header)] + [len(row[i]) for row in cells if i < len(row)])
            for i, header in enumerate(headers)
        ]

        self.print("  " + "  ".join(self._c(h.ljust(w), Colors.BOLD) for h, w in zip(headers, widths)))
        self.print("  " + "  ".join("-" * w for w in widths))
        for row in cells:
            self.print("  " + "  ".join(cell.ljust(w) for cell, w in zip(row, widths)))

    def emit_json(self, payload: dict[str, Any]) -> None:
        """Print the final JSON document, including any collected errors."""
        if self._json_errors:
            payload = {**payload, "errors": list(self._json_errors)}
        print(json.dumps(payload, indent=2))

    def sync_result(self, result: SyncResult) -> None:
        """
        Print the outcome of one sync.

        Warnings are listed under the success line: a sync with warnings
        still succeeded.
        """
        if self.json_mode:
            self.emit_json({"success": True, **result.to_dict()})
            return

        verb = "Created" if result.action is SyncAction.CREATED else "Updated"
        self.print(force=True)
        self.print(
            self._c(f"  {Symbols.CHECK} {verb} remote project for process {result.process_id}", Colors.GREEN),
            force=True,
        )
        if result.remote_project_url:
            self.print(f"    {Symbols.LINK} {result.remote_project_url}", force=True)

        if not self.quiet:
            self.print()
            self.table(
                ["Item", "Count"],
                [
                    ["Documentation tasks", f"{result.docs_created} created, {result.docs_updated} updated"],
                    ["Improvements backfilled", str(result.backfill_count)],
                ],
            )
            if result.description_condensed:
                self.info("Project description was condensed to fit the tracker")

        if result.warnings:
            self.print(force=True)
            self.print(self._c(f"  {Symbols.WARN} {len(result.warnings)} warning(s):", Colors.YELLOW), force=True)
            for warning in result.warnings:
                self.print(self._c(f"    {warning}", Colors.DIM), force=True)

    def batch_result(self, batch: BatchSyncResult) -> None:
        """Print the outcome of syncing several processes."""
        if self.json_mode:
            self.emit_json(
                {
                    "success": batch.success,
                    "results": [result.to_dict() for result in batch.results.values()],
                    "failures": {str(pid): error for pid, error in batch.failures.items()},
                }
            )
            return

        rows = []
        for process_id, result in batch.results.items():
            status = f"{len(result.warnings)} warning(s)" if result.warnings else "ok"
            rows.append([str(process_id), result.action.value if result.action else "-", status])
        for process_id, error in batch.failures.items():
            rows.append([str(process_id), "failed", error])
        self.table(["Process", "Action", "Status"], rows)

        self.print(force=True)
        if batch.success:
            self.print(self._c(f"  {Symbols.CHECK} Synced {len(batch.results)} process(es)", Colors.GREEN), force=True)
        else:
            self.print(
                self._c(
                    f"  {Symbols.WARN} Synced {len(batch.results)} process(es), {len(batch.failures)} failed",
                    Colors.YELLOW,
                ),
                force=True,
            )

    def process_status(self, process: ProcessRecord, unsynced_improvements: int) -> None:
        """Print the local link state of a process."""
        data = {
            "processId": process.id,
            "name": process.name,
            "linked": process.is_linked,
            "remoteProjectId": process.remote_project_id,
            "remoteProjectUrl": process.remote_project_url,
            "workspaceId": process.workspace_id,
            "remoteTaskIds": process.remote_task_ids.to_dict(),
            "unsyncedImprovements": unsynced_improvements,
        }
        if self.json_mode:
            self.emit_json(data)
            return

        self.print(self._c(f"  {process.name} (#{process.id})", Colors.BOLD), force=True)
        if not process.is_linked:
            self.print("    Not linked to a remote project", force=True)
        else:
            self.print(f"    Project: {process.remote_project_url or process.remote_project_id}", force=True)
            self.print(f"    Workspace: {process.workspace_id or '-'}", force=True)
            self.print(f"    Documentation tasks: {len(process.remote_task_ids)}/{len(Dimension.ordered())}", force=True)
        self.print(f"    Improvements awaiting backfill: {unsynced_improvements}", force=True)
