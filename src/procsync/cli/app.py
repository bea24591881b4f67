"""
CLI App - Main entry point for the procsync command line tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from procsync import __version__
from procsync.adapters import (
    AnthropicCondenser,
    AsanaAdapter,
    EnvironmentConfigProvider,
    SQLiteProcessStore,
)
from procsync.application.sync import ContentFitter, SyncOptions, SyncOrchestrator
from procsync.core.domain.events import DomainEvent, EventBus
from procsync.core.exceptions import ProcessNotFoundError, ProcsyncError
from procsync.core.ports.config_provider import AppConfig
from procsync.core.ports.process_store import ProcessStorePort

from .exit_codes import ExitCode
from .output import Console, Symbols


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for procsync.

    Returns:
        Configured ArgumentParser instance.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--db", help="Path to the SQLite process database (default: PROCSYNC_DB)")
    common.add_argument("--env-file", help="Path to a .env file (default: ./.env)")
    common.add_argument("--app-url", help="Base URL of the process application, for back-links")
    common.add_argument("--notes-limit", type=int, help="Maximum description length accepted by the tracker")
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    common.add_argument("-q", "--quiet", action="store_true", help="Only print errors and the final summary")
    common.add_argument("--no-color", action="store_true", help="Disable colored output")
    common.add_argument("--json", action="store_true", help="Print the result as JSON")
    common.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log output format (default: text)",
    )
    common.add_argument("--log-file", help="Also write logs to this file")

    parser = argparse.ArgumentParser(
        prog="procsync",
        description="Sync documented processes with Asana projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync one process, creating its project on first run
  procsync sync 42

  # Create the project in a specific workspace
  procsync sync 42 --workspace 1203456789

  # Start over in a brand-new project
  procsync sync 42 --force-new

  # Refresh every process that is already linked
  procsync sync-all --linked-only

Environment:
  ASANA_ACCESS_TOKEN (required), ASANA_WORKSPACE_ID, PROCSYNC_DB,
  PROCSYNC_APP_URL, PROCSYNC_NOTES_LIMIT, ANTHROPIC_API_KEY
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    sync = subparsers.add_parser("sync", parents=[common], help="Sync one process")
    sync.add_argument("process_id", type=int, help="Local process id")
    sync.add_argument("--workspace", help="Workspace for a newly created project")
    sync.add_argument(
        "--force-new",
        action="store_true",
        help="Ignore the existing link and create a new project",
    )

    sync_all = subparsers.add_parser("sync-all", parents=[common], help="Sync every process")
    sync_all.add_argument("--workspace", help="Workspace for newly created projects")
    sync_all.add_argument(
        "--linked-only",
        action="store_true",
        help="Only refresh processes that already have a project",
    )

    status = subparsers.add_parser("status", parents=[common], help="Show the link state of a process")
    status.add_argument("process_id", type=int, help="Local process id")

    return parser


def load_config(console: Console, args: argparse.Namespace, require_tracker: bool = True) -> AppConfig | None:
    """
    Load and validate configuration from .env, environment and flags.

    Returns:
        The configuration, or None after printing the errors.
    """
    env_file = Path(args.env_file) if getattr(args, "env_file", None) else None
    config_provider = EnvironmentConfigProvider(env_file=env_file, cli_overrides=vars(args))

    errors = config_provider.validate()
    if not require_tracker:
        errors = [e for e in errors if "ASANA_ACCESS_TOKEN" not in e]
    if errors:
        console.config_errors(errors)
        return None

    if config_provider.env_file_path:
        console.debug(f"Config: {config_provider.env_file_path}")
    return config_provider.load()


def build_orchestrator(
    config: AppConfig,
    store: ProcessStorePort,
    event_bus: EventBus | None = None,
) -> SyncOrchestrator:
    """Wire the tracker, the optional condenser and the store into an orchestrator."""
    tracker = AsanaAdapter(config.tracker)
    condenser = AnthropicCondenser(config.condenser) if config.condenser.enabled else None
    fitter = ContentFitter(condenser, limit=config.sync.notes_limit)
    return SyncOrchestrator(
        tracker,
        store,
        fitter=fitter,
        config=config.sync,
        default_workspace_id=config.tracker.workspace_id,
        event_bus=event_bus,
    )


def _event_logger(console: Console):
    def on_event(event: DomainEvent) -> None:
        console.debug(f"{event.event_type}: {event}")

    return on_event


def run_sync(console: Console, args: argparse.Namespace) -> int:
    """
    Sync a single process.

    Args:
        console: Console instance for output.
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    config = load_config(console, args)
    if config is None:
        return ExitCode.CONFIG_ERROR

    store = SQLiteProcessStore(config.database_path)
    event_bus = EventBus()
    event_bus.subscribe(DomainEvent, _event_logger(console))
    orchestrator = build_orchestrator(config, store, event_bus)

    console.header(f"procsync {Symbols.ARROW} {orchestrator.tracker.name}")
    console.info(f"Process: {args.process_id}")
    if args.force_new:
        console.info("Mode: new project (existing link ignored)")

    options = SyncOptions(target_workspace_id=args.workspace, force_new=args.force_new)
    try:
        result = orchestrator.sync(args.process_id, options)
    except ProcessNotFoundError as e:
        console.error(str(e))
        if console.json_mode:
            console.emit_json({"success": False})
        return ExitCode.NOT_FOUND

    console.sync_result(result)
    return ExitCode.SUCCESS


def run_sync_all(console: Console, args: argparse.Namespace) -> int:
    """
    Sync every process in the store, one after another.

    Returns:
        SUCCESS, or PARTIAL_SUCCESS when any process failed.
    """
    config = load_config(console, args)
    if config is None:
        return ExitCode.CONFIG_ERROR

    store = SQLiteProcessStore(config.database_path)
    event_bus = EventBus()
    event_bus.subscribe(DomainEvent, _event_logger(console))
    orchestrator = build_orchestrator(config, store, event_bus)

    process_ids = store.list_process_ids(linked_only=args.linked_only)
    console.header(f"procsync {Symbols.ARROW} {orchestrator.tracker.name}")
    console.info(f"Processes: {len(process_ids)}")

    if not process_ids:
        console.warning("No processes to sync")
        if console.json_mode:
            console.emit_json({"success": True, "results": [], "failures": {}})
        return ExitCode.SUCCESS

    batch = orchestrator.sync_many(process_ids, SyncOptions(target_workspace_id=args.workspace))
    console.batch_result(batch)

    if batch.success:
        return ExitCode.SUCCESS
    if batch.results:
        return ExitCode.PARTIAL_SUCCESS
    return ExitCode.ERROR


def run_status(console: Console, args: argparse.Namespace) -> int:
    """Show what a process is linked to, without contacting the tracker."""
    config = load_config(console, args, require_tracker=False)
    if config is None:
        return ExitCode.CONFIG_ERROR

    store = SQLiteProcessStore(config.database_path)
    try:
        process = store.get_process(args.process_id)
    except ProcessNotFoundError as e:
        console.error(str(e))
        if console.json_mode:
            console.emit_json({"success": False})
        return ExitCode.NOT_FOUND

    pending = [e for e in store.list_unlinked_journal_entries(process.id) if not e.is_local_only]
    console.process_status(process, len(pending))
    return ExitCode.SUCCESS


COMMANDS = {
    "sync": run_sync,
    "sync-all": run_sync_all,
    "status": run_status,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the procsync CLI.

    Parses arguments, sets up logging, and runs the chosen command.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    from .logging import setup_logging

    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet or args.json:
        log_level = logging.ERROR
    else:
        log_level = logging.WARNING
    redacting = setup_logging(
        level=log_level,
        log_format=args.log_format,
        log_file=args.log_file,
        static_fields={"service": "procsync"} if args.log_format == "json" else None,
    )

    console = Console(
        color=not args.no_color,
        verbose=args.verbose,
        quiet=args.quiet,
        json_mode=args.json,
    )

    try:
        # Tokens never reach the logs, whichever source they came from
        env_file = Path(args.env_file) if args.env_file else None
        secrets = EnvironmentConfigProvider(env_file=env_file)
        redacting.register_secrets(secrets.get("asana_access_token"), secrets.get("anthropic_api_key"))

        return COMMANDS[args.command](console, args)

    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted by user")
        return ExitCode.SIGINT

    except ProcsyncError as e:
        console.error(str(e))
        if console.json_mode:
            console.emit_json({"success": False})
        return ExitCode.from_exception(e)

    except Exception as e:
        console.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback

            console.print()
            traceback.print_exc()
        return ExitCode.from_exception(e)


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
