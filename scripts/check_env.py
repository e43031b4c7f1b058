"""Pre-flight check for the catalog proxy's ``.env``.

Loads ``AppSettings`` from the file so missing reseller or OAuth credentials
show up before the proxy starts answering 502s, and keeps a SHA256 baseline of
the file so a rotated API key that never got deployed is noticed::

    python -m scripts.check_env record --env-file .env --hash-file .env.sha256
    python -m scripts.check_env verify --env-file .env --hash-file .env.sha256
    python -m scripts.check_env show --env-file .env
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path

from pydantic import ValidationError

from app.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


def _digest(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{secret[:2]}{'*' * (len(secret) - 4)}{secret[-2:]}"


def _load_settings(env_file: Path) -> AppSettings:
    _load_env_file(str(env_file))
    return AppSettings(_env_file=str(env_file))  # type: ignore[call-arg]


def describe_settings(settings: AppSettings) -> list[str]:
    """Summarize the resolved configuration with secrets masked."""
    vendor, oauth, catalog = settings.vendor, settings.oauth, settings.catalog
    rows = [
        ("environment", settings.environment),
        ("catalog url", vendor.catalog_url),
        ("customer number", vendor.customer_number),
        ("country code", vendor.country_code),
        ("api key", _mask(vendor.api_key)),
        ("token url", oauth.token_url),
        ("client id", oauth.client_id),
        ("client secret", _mask(oauth.client_secret)),
        ("scope", oauth.scope),
        ("cache ttl", f"{catalog.cache_ttl_seconds}s"),
        ("response mode", catalog.response_mode),
    ]
    return [f"{label + ':':<20}{value}" for label, value in rows]


def _record(env_file: Path, hash_file: Path) -> int:
    digest = _digest(env_file)
    hash_file.write_text(f"{digest}\n", encoding="utf-8")
    print(f"Baseline {digest} written to {hash_file}")
    return EXIT_OK


def _verify(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(f"No baseline at {hash_file}; run 'record' first.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    baseline = hash_file.read_text(encoding="utf-8").strip()
    current = _digest(env_file)
    if baseline != current:
        print(
            f"{env_file} changed since the baseline was recorded "
            f"(baseline {baseline}, now {current}). "
            "Confirm the reseller and OAuth credentials before restarting the proxy.",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR

    print(f"{env_file} matches the recorded baseline.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check catalog proxy settings and detect .env drift."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text, needs_baseline in (
        ("record", "store a checksum baseline for the env file", True),
        ("verify", "compare the env file with its baseline", True),
        ("check", "only validate the settings", False),
        ("show", "print the settings with secrets masked", False),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("--env-file", default=".env", type=Path)
        if needs_baseline:
            command.add_argument("--hash-file", required=True, type=Path)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(f"{env_file} not found.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = _load_settings(env_file)
    except ValidationError as exc:
        print(f"Invalid settings in {env_file}:\n{exc.json(indent=2)}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if args.command == "record":
        return _record(env_file, args.hash_file)
    if args.command == "verify":
        return _verify(env_file, args.hash_file)
    if args.command == "show":
        for line in describe_settings(settings):
            print(line)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
