"""
openclaw-secure CLI: keep OpenClaw API keys out of openclaw.json.

Usage:
    openclaw-secure discover     # Preview secrets found in the config
    openclaw-secure store        # Move secrets into the backend, leave placeholders
    openclaw-secure start        # Restore keys -> start gateway -> scrub keys
    openclaw-secure check        # Verify every key exists in the backend
    openclaw-secure restore      # Write backend values back into the config
    openclaw-secure list         # Show managed config paths and key names
    openclaw-secure migrate      # Rename v1.x backend keys to path-derived names
    openclaw-secure install      # Patch the LaunchAgent to boot via `start`
    openclaw-secure uninstall    # Undo `install`
    openclaw-secure version      # Show version
"""

from __future__ import annotations

import argparse
import logging
import sys

from openclaw_secure.config import Settings, get_settings
from openclaw_secure.constants import DEFAULT_SECRET_MAP, LEGACY_KEY_NAMES
from openclaw_secure.errors import OpenclawSecureError
from openclaw_secure.models import MatchType, SecretEntry, StoreResult
from openclaw_secure.preferences import Preferences, load_preferences

MATCH_LABELS = {
    MatchType.KNOWN_PATH: "known",
    MatchType.KEY_PATTERN: "pattern",
    MatchType.VALUE_PATTERN: "value",
}


def _common_options() -> argparse.ArgumentParser:
    """Options accepted after any subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="OpenClaw config file (default: ~/.openclaw/openclaw.json)")
    common.add_argument("--backend", help="Secret backend (default: keychain)")
    common.add_argument("--timeout", type=int, help="Gateway health timeout in ms (default: 10000)")
    common.add_argument("--verbose", action="store_true", help="Log diagnostics to stderr")

    backend = common.add_argument_group("backend options")
    backend.add_argument("--vault", help="1Password vault name")
    backend.add_argument("--region", help="AWS region (e.g. us-east-1)")
    backend.add_argument("--project", help="Google Cloud project ID")
    backend.add_argument("--vault-name", help="Azure Key Vault name (required for azure)")
    backend.add_argument("--addr", help="HashiCorp Vault server address")
    backend.add_argument("--doppler-project", help="Doppler project name")
    backend.add_argument("--doppler-config", help="Doppler config/environment name")

    discovery = common.add_argument_group("discovery options")
    discovery.add_argument(
        "--auto", dest="auto", action="store_true", default=None,
        help="Auto-discover secrets in the config (default)",
    )
    discovery.add_argument(
        "--no-auto", "--manual", dest="auto", action="store_false",
        help="Use the built-in path list instead of auto-discovery",
    )
    discovery.add_argument(
        "--exclude", action="append", default=[], metavar="PATH",
        help="Exclude path from discovery (repeatable, supports *)",
    )
    discovery.add_argument(
        "--also", action="append", default=[], metavar="PATH",
        help="Treat an additional path as a secret (repeatable)",
    )
    discovery.add_argument(
        "--include-unknown", action="store_true", default=None,
        help="Include secrets matched by value shape only",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="openclaw-secure",
        description="openclaw-secure: secure OpenClaw API keys with a pluggable secret backend.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("discover", parents=[common], help="Preview secrets found in the config")
    subparsers.add_parser("store", parents=[common], help="Store secrets in the backend, scrub config")
    subparsers.add_parser("start", parents=[common], help="Restore keys, start gateway, scrub keys")
    subparsers.add_parser("check", parents=[common], help="Verify all keys exist in the backend")
    subparsers.add_parser("restore", parents=[common], help="Write backend values back into config")
    subparsers.add_parser("list", parents=[common], help="List managed secret paths")
    subparsers.add_parser("migrate", parents=[common], help="Migrate v1.x legacy key names")
    install = subparsers.add_parser("install", parents=[common], help="Patch LaunchAgent to boot securely")
    install.add_argument("--dry-run", action="store_true", help="Patch without reloading launchd")
    uninstall = subparsers.add_parser("uninstall", parents=[common], help="Restore original LaunchAgent")
    uninstall.add_argument("--dry-run", action="store_true", help="Restore without reloading launchd")
    subparsers.add_parser("version", help="Show version")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from openclaw_secure import __version__

        print(f"openclaw-secure {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = get_settings()
    prefs = load_preferences(settings.preferences_path)

    try:
        if args.command == "discover":
            return _cmd_discover(args, settings, prefs)
        elif args.command == "list":
            return _cmd_list(args, settings, prefs)
        elif args.command == "install":
            return _cmd_install(args, settings, prefs)
        elif args.command == "uninstall":
            return _cmd_uninstall(args)
        else:
            return _cmd_with_backend(args, settings, prefs)
    except OpenclawSecureError as e:
        print(f"\nError: {e}\n", file=sys.stderr)
        return 1


# ── Option resolution: flag > preferences > environment/default ───────


def _config_path(args: argparse.Namespace, settings: Settings) -> str:
    return args.config or settings.config_path


def _backend_name(args: argparse.Namespace, settings: Settings, prefs: Preferences) -> str:
    return args.backend or prefs.backend or settings.backend


def _backend_options(args: argparse.Namespace, prefs: Preferences):
    from openclaw_secure.backends import BackendOptions

    return BackendOptions(
        vault=args.vault or prefs.vault,
        region=args.region or prefs.region,
        project=args.project or prefs.project,
        vault_name=args.vault_name or prefs.vault_name,
        addr=args.addr or prefs.addr,
        doppler_project=args.doppler_project or prefs.doppler_project,
        doppler_config=args.doppler_config or prefs.doppler_config,
    )


def _is_auto(args: argparse.Namespace, prefs: Preferences) -> bool:
    if args.auto is not None:
        return args.auto
    if prefs.discovery.enabled is not None:
        return prefs.discovery.enabled
    return True


def _discovery_options(
    args: argparse.Namespace, prefs: Preferences, *, include_stored: bool = False
):
    from openclaw_secure.discovery import DiscoveryOptions

    include_unknown = args.include_unknown
    if include_unknown is None:
        include_unknown = bool(prefs.discovery.include_unknown)
    return DiscoveryOptions(
        include_unknown_patterns=include_unknown,
        additional_paths=[*prefs.discovery.additional_paths, *args.also],
        exclude_paths=[*prefs.discovery.exclude_paths, *args.exclude],
        include_stored=include_stored,
    )


def _secret_map(
    args: argparse.Namespace, settings: Settings, prefs: Preferences
) -> list[SecretEntry]:
    if not _is_auto(args, prefs):
        return list(DEFAULT_SECRET_MAP)

    from openclaw_secure.discovery import discover_secrets, discovered_to_secret_map
    from openclaw_secure.document import read_config

    # after a store the secrets are placeholders; they are still managed paths
    config = read_config(_config_path(args, settings))
    options = _discovery_options(args, prefs, include_stored=True)
    return discovered_to_secret_map(discover_secrets(config, options))


def _mode(args: argparse.Namespace, prefs: Preferences) -> str:
    return "auto-discovery" if _is_auto(args, prefs) else "hardcoded paths"


# ── Commands ───────────────────────────────────────────────────────────


def _cmd_discover(args: argparse.Namespace, settings: Settings, prefs: Preferences) -> int:
    from openclaw_secure.discovery import discover_secrets
    from openclaw_secure.document import read_config

    config_path = _config_path(args, settings)
    print(f"\nDiscovering secrets in {config_path}...\n")

    config = read_config(config_path)
    discovered = discover_secrets(config, _discovery_options(args, prefs))
    if not discovered:
        print("  No secrets found.\n")
        print("  Tip: Check if your config has any tokens/apiKeys configured.\n")
        return 0

    for secret in discovered:
        print(f"  * {secret.config_path}")
        print(f"    -> {secret.key_name} ({MATCH_LABELS[secret.match_type]})")

    print(f"\nFound {len(discovered)} secret(s).")
    print("\nRun 'openclaw-secure store' to store them.\n")
    return 0


def _cmd_list(args: argparse.Namespace, settings: Settings, prefs: Preferences) -> int:
    secret_map = _secret_map(args, settings, prefs)
    mode = "auto-discovered" if _is_auto(args, prefs) else "hardcoded"
    print(f"\nManaged secret paths ({mode}):\n")
    for entry in secret_map:
        print(f"  {entry.key_name}")
        print(f"    Config path: {entry.config_path}")
        print()
    return 0


def _cmd_install(args: argparse.Namespace, settings: Settings, prefs: Preferences) -> int:
    from openclaw_secure.constants import DEFAULT_BACKEND
    from openclaw_secure.launchagent import install_secure

    print("\nPatching OpenClaw LaunchAgent...\n")
    backend = _backend_name(args, settings, prefs)
    result = install_secure(
        backend if backend != DEFAULT_BACKEND else None, dry_run=args.dry_run
    )
    print(f"  Plist:    {result.plist_path}")
    print(f"  Backup:   {result.backup_path}")
    print()
    print(f"  Before:  {' '.join(result.old_args)}")
    print(f"  After:   {' '.join(result.new_args)}")
    print()
    print("LaunchAgent patched. Gateway will start via openclaw-secure on boot.\n")
    return 0


def _cmd_uninstall(args: argparse.Namespace) -> int:
    from openclaw_secure.launchagent import uninstall_secure

    print("\nRestoring original OpenClaw LaunchAgent...\n")
    result = uninstall_secure(dry_run=args.dry_run)
    source = "from backup (.bak)" if result.restored_from == "backup" else "reconstructed"
    print(f"  Plist:     {result.plist_path}")
    print(f"  Restored:  {source}")
    print()
    print(f"  Before:  {' '.join(result.old_args)}")
    print(f"  After:   {' '.join(result.new_args)}")
    print()
    print("LaunchAgent restored. Gateway starts directly on boot.\n")
    return 0


def _cmd_with_backend(args: argparse.Namespace, settings: Settings, prefs: Preferences) -> int:
    from openclaw_secure.backends import create_backend, ensure_available

    backend = create_backend(
        _backend_name(args, settings, prefs),
        _backend_options(args, prefs),
        timeout=settings.command_timeout,
    )
    ensure_available(backend)

    if args.command == "migrate":
        return _cmd_migrate(backend)

    secret_map = _secret_map(args, settings, prefs)
    config_path = _config_path(args, settings)
    mode = _mode(args, prefs)

    if args.command == "store":
        return _cmd_store(config_path, secret_map, backend, mode)
    elif args.command == "check":
        return _cmd_check(secret_map, backend, mode)
    elif args.command == "restore":
        return _cmd_restore(config_path, secret_map, backend, mode)
    elif args.command == "start":
        timeout_ms = args.timeout if args.timeout is not None else settings.timeout_ms
        return _cmd_start(
            config_path, secret_map, backend, mode, settings, timeout_ms, _is_auto(args, prefs)
        )
    print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
    return 1


def _print_store_result(result: StoreResult) -> None:
    if result.stored:
        print(f"  + {result.config_path} -> {result.key_name}")
    else:
        print(f"  - {result.config_path} ({result.reason})")


def _cmd_store(config_path: str, secret_map: list[SecretEntry], backend, mode: str) -> int:
    from openclaw_secure.lifecycle import store_keys

    print(f"\nStoring secrets via {backend.name} backend ({mode})...\n")
    stored = 0

    def report(result: StoreResult) -> None:
        nonlocal stored
        stored += int(result.stored)
        _print_store_result(result)

    try:
        store_keys(config_path, secret_map, backend, on_result=report)
    except OpenclawSecureError:
        print(
            f"\n  {stored} of {len(secret_map)} key(s) reached {backend.name} before the error."
            "\n  The config was not modified; run 'openclaw-secure store' again to finish."
        )
        raise
    print(f"\n{stored} key(s) stored. Config scrubbed.\n")
    return 0


def _cmd_check(secret_map: list[SecretEntry], backend, mode: str) -> int:
    from openclaw_secure.lifecycle import check_keys

    print(f"\nChecking {backend.name} backend ({mode})...\n")
    results = check_keys(secret_map, backend)
    for r in results:
        mark = "+" if r.exists else "x"
        print(f"  {mark} {r.key_name} ({r.config_path})")

    if all(r.exists for r in results):
        print("\nAll keys present.\n")
        return 0
    print("\nSome keys are missing. Run 'openclaw-secure store' first.\n")
    return 1


def _cmd_restore(config_path: str, secret_map: list[SecretEntry], backend, mode: str) -> int:
    from openclaw_secure.lifecycle import restore_keys

    print(f"\nRestoring secrets from {backend.name} ({mode})...\n")
    restored = restore_keys(config_path, secret_map, backend)
    print(f"Config restored with real values ({len(restored)} of {len(secret_map)} key(s)).\n")
    return 0


def _cmd_migrate(backend) -> int:
    from openclaw_secure.lifecycle import migrate_keys

    print(f"\nMigrating legacy key names ({backend.name} backend)...\n")
    if not LEGACY_KEY_NAMES:
        print("  No legacy names to migrate.\n")
        return 0
    print(f"  Checking {len(LEGACY_KEY_NAMES)} legacy name mapping(s).\n")

    results = migrate_keys(backend)
    for r in results:
        if r.migrated:
            print(f"  + {r.old_name} -> {r.new_name}")
            if r.reason:
                print(f"    {r.reason}")
        else:
            print(f"  - {r.old_name} ({r.reason})")

    migrated = sum(1 for r in results if r.migrated)
    if migrated:
        print(f"\n{migrated} key(s) migrated.\n")
    else:
        print("\nNo keys needed migration.\n")
    return 0


def _cmd_start(
    config_path: str,
    secret_map: list[SecretEntry],
    backend,
    mode: str,
    settings: Settings,
    timeout_ms: int,
    auto: bool,
) -> int:
    from openclaw_secure.gateway import SecureStart

    print(f"\nSecure gateway start ({backend.name}, {mode})...\n")
    result = SecureStart(
        config_path,
        secret_map,
        backend,
        gateway_command=settings.gateway_command,
        health_url=settings.health_url,
        timeout_ms=timeout_ms,
        # the hardcoded map still uses v1.x names, so renaming them would orphan it
        legacy_names=None if auto else {},
    ).run()
    print(f"\nGateway started securely (PID {result.pid}).\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
