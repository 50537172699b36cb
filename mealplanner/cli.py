"""CLI argument parsing and main entry point.

Subcommands:

* ``mealplanner status``  — show which API keys are available.
* ``mealplanner set``     — store a key (prompted when omitted).
* ``mealplanner get``     — print a stored key.
* ``mealplanner delete``  — remove a key; ``clear`` removes all of them.
* ``mealplanner demo``    — switch USDA food search to demo mode.
* ``mealplanner migrate`` — move keys from env vars / a key file into the vault.
* ``mealplanner tui``     — launch the Textual key-setup screen.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Dict

from mealplanner.config.loader import load_config
from mealplanner.config.schema import MealPlannerConfig
from mealplanner.constants import APP_NAME, APP_VERSION
from mealplanner.credentials.kinds import CredentialKind
from mealplanner.credentials.store import CredentialStore
from mealplanner.display.logging_config import setup_logging
from mealplanner.errors import ConfigurationError

module_logger = logging.getLogger(__name__)


def _kind_arg(text: str) -> CredentialKind:
    try:
        return CredentialKind.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _open_store(args: argparse.Namespace) -> CredentialStore:
    """Load config, set up logging, and build the store for *args*."""
    config: MealPlannerConfig = load_config(getattr(args, "config", None))
    level = getattr(args, "log_level", None) or config.logging.level
    setup_logging(level, log_dir=config.logging.dir)
    args.loaded_config = config
    return CredentialStore.from_config(config.vault)


# ── ``mealplanner status`` ──────────────────────────────────────────────


def _cmd_status(args: argparse.Namespace, store: CredentialStore) -> None:
    from mealplanner.credentials.status import key_statuses
    from mealplanner.display.console import render_key_status

    kinds = list(CredentialKind) if args.all else args.loaded_config.status.kinds
    render_key_status(key_statuses(store, kinds), verbose=args.verbose)


# ── ``mealplanner set / get / delete / clear / demo`` ───────────────────


def _cmd_set(args: argparse.Namespace, store: CredentialStore) -> None:
    value = args.value
    if value is None:
        value = getpass.getpass(f"{args.kind.label} API key: ")
    if not store.store(args.kind, value):
        print(f"Could not store the {args.kind.label} key.", file=sys.stderr)
        sys.exit(1)
    print(f"{args.kind.label} key stored.")


def _cmd_get(args: argparse.Namespace, store: CredentialStore) -> None:
    value = store.retrieve(args.kind)
    if value is None:
        print(f"No {args.kind.label} key stored.", file=sys.stderr)
        sys.exit(1)
    print(value)


def _cmd_delete(args: argparse.Namespace, store: CredentialStore) -> None:
    if not store.delete(args.kind):
        print(f"Could not delete the {args.kind.label} key.", file=sys.stderr)
        sys.exit(1)
    print(f"{args.kind.label} key deleted.")


def _cmd_clear(args: argparse.Namespace, store: CredentialStore) -> None:
    if not args.yes:
        answer = input("Delete every stored API key? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return
    store.clear_all()
    print("All API keys cleared.")


def _cmd_demo(args: argparse.Namespace, store: CredentialStore) -> None:
    if not store.set_demo_mode():
        print("Could not enable demo mode.", file=sys.stderr)
        sys.exit(1)
    print("USDA food search switched to demo mode.")


# ── ``mealplanner migrate`` ─────────────────────────────────────────────


def _cmd_migrate(args: argparse.Namespace, store: CredentialStore) -> None:
    from mealplanner.credentials.migration import (
        collect_env_keys,
        load_key_file,
        migrate_keys,
    )
    from mealplanner.display.console import render_migration_report

    keys: Dict[CredentialKind, str] = {}
    if args.file:
        keys.update(load_key_file(args.file))
    if args.from_env or not args.file:
        keys.update(collect_env_keys())

    report = migrate_keys(store, keys)
    render_migration_report(report)
    if not report.ok:
        sys.exit(1)
    if report.stored and args.file:
        print(f"You should now delete {args.file} or remove the keys from it.")


# ── ``mealplanner tui`` ─────────────────────────────────────────────────


def _cmd_tui(args: argparse.Namespace, store: CredentialStore) -> None:
    from mealplanner.tui.app import KeySetupApp

    KeySetupApp(store, args.loaded_config.status.kinds).run()


# ── CLI parser construction ──────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with the key-management subcommands."""
    parser = argparse.ArgumentParser(
        prog="mealplanner",
        description=f"{APP_NAME} v{APP_VERSION} — API key storage",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Path to configuration file (YAML). "
            "Default: $MEALPLANNER_CONFIG, then config.yaml/config.yml"
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set file logging level (default: from config, else info)",
    )

    subparsers = parser.add_subparsers(dest="command")
    kind_help = "Credential kind: " + ", ".join(k.short_name for k in CredentialKind)

    # ── status ───────────────────────────────────────────────────
    sp_status = subparsers.add_parser("status", help="Show which API keys are available")
    sp_status.add_argument(
        "-a", "--all", action="store_true", default=False, help="Show every credential kind"
    )
    sp_status.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show vault namespaces and lookup results",
    )
    sp_status.set_defaults(func=_cmd_status)

    # ── set ──────────────────────────────────────────────────────
    sp_set = subparsers.add_parser("set", help="Store an API key")
    sp_set.add_argument("kind", type=_kind_arg, help=kind_help)
    sp_set.add_argument("value", nargs="?", default=None, help="Key value (prompted if omitted)")
    sp_set.set_defaults(func=_cmd_set)

    # ── get ──────────────────────────────────────────────────────
    sp_get = subparsers.add_parser("get", help="Print a stored API key")
    sp_get.add_argument("kind", type=_kind_arg, help=kind_help)
    sp_get.set_defaults(func=_cmd_get)

    # ── delete ───────────────────────────────────────────────────
    sp_del = subparsers.add_parser("delete", help="Delete a stored API key")
    sp_del.add_argument("kind", type=_kind_arg, help=kind_help)
    sp_del.set_defaults(func=_cmd_delete)

    # ── clear ────────────────────────────────────────────────────
    sp_clear = subparsers.add_parser("clear", help="Delete every stored API key")
    sp_clear.add_argument(
        "-y", "--yes", action="store_true", default=False, help="Do not ask for confirmation"
    )
    sp_clear.set_defaults(func=_cmd_clear)

    # ── demo ─────────────────────────────────────────────────────
    sp_demo = subparsers.add_parser("demo", help="Switch USDA food search to demo mode")
    sp_demo.set_defaults(func=_cmd_demo)

    # ── migrate ──────────────────────────────────────────────────
    sp_migrate = subparsers.add_parser(
        "migrate",
        help="Move API keys from environment variables or a key file into secure storage",
    )
    sp_migrate.add_argument(
        "--from-env",
        action="store_true",
        default=False,
        help="Read MEALPLANNER_<KIND>_API_KEY variables (default when --file is absent)",
    )
    sp_migrate.add_argument(
        "--file",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML file mapping kind name to key",
    )
    sp_migrate.set_defaults(func=_cmd_migrate)

    # ── tui ──────────────────────────────────────────────────────
    sp_tui = subparsers.add_parser("tui", help="Launch the Textual key-setup screen")
    sp_tui.set_defaults(func=_cmd_tui)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        store = _open_store(args)
        args.func(args, store)
    except ConfigurationError as exc:
        print(f"❌ Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        module_logger.info("%s interrupted by KeyboardInterrupt.", APP_NAME)
        sys.exit(130)
