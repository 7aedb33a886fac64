"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "code_bundler.toml"
DEFAULT_AUDIT_PATH = ".code_bundler/audit.jsonl"
DEFAULT_ENCODING = "utf-8"
DEFAULT_SORT = "name"

READ_ERROR_ABORT = "abort"
READ_ERROR_SKIP = "skip"
READ_ERROR_POLICIES = (READ_ERROR_ABORT, READ_ERROR_SKIP)


@dataclass(slots=True, frozen=True)
class BundleDefaults:
    """Bundle settings applied when the command line leaves them unset."""

    sort: str
    note: bool
    remove_empty_lines: bool
    author: str | None
    on_read_error: str
    encoding: str


@dataclass(slots=True, frozen=True)
class AuditConfig:
    """Audit log toggle and location."""

    enabled: bool
    path: Path


@dataclass(slots=True, frozen=True)
class BundlerConfig:
    """Fully merged configuration for one invocation."""

    root: Path
    bundle: BundleDefaults
    audit: AuditConfig


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line values applied at highest precedence."""

    sort: str | None = None
    note: bool | None = None
    remove_empty_lines: bool | None = None
    author: str | None = None


def default_config(root: Path) -> BundlerConfig:
    """Build default config for a given bundling root."""
    resolved_root = root.resolve()
    return BundlerConfig(
        root=resolved_root,
        bundle=BundleDefaults(
            sort=DEFAULT_SORT,
            note=False,
            remove_empty_lines=False,
            author=None,
            on_read_error=READ_ERROR_ABORT,
            encoding=DEFAULT_ENCODING,
        ),
        audit=AuditConfig(enabled=False, path=resolved_root / DEFAULT_AUDIT_PATH),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional code_bundler.toml from the bundling root."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except OSError as error:
        raise ValueError(f"Cannot read {CONFIG_FILE_NAME}: {error}") from error
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_str(table: dict[str, object], section: str, field: str, default: str) -> str:
    if field not in table:
        return default
    value = table[field]
    if not isinstance(value, str):
        raise ValueError(f"Config field '{section}.{field}' must be a string.")
    return value


def _optional_bool(table: dict[str, object], section: str, field: str, default: bool) -> bool:
    if field not in table:
        return default
    value = table[field]
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{section}.{field}' must be a boolean.")
    return value


def merge_config(
    base: BundlerConfig, payload: dict[str, object], overrides: CliOverrides
) -> BundlerConfig:
    """Merge defaults, config file, then command-line overrides."""
    bundle_payload = _get_table(payload, "bundle")
    audit_payload = _get_table(payload, "audit")

    on_read_error = _optional_str(
        bundle_payload, "bundle", "on_read_error", base.bundle.on_read_error
    )
    if on_read_error not in READ_ERROR_POLICIES:
        raise ValueError(
            "Config field 'bundle.on_read_error' must be one of: "
            + ", ".join(READ_ERROR_POLICIES)
            + "."
        )

    author = base.bundle.author
    if "author" in bundle_payload:
        author = _optional_str(bundle_payload, "bundle", "author", "")

    audit_path = base.audit.path
    if "path" in audit_payload:
        audit_path = base.root / _optional_str(audit_payload, "audit", "path", DEFAULT_AUDIT_PATH)

    merged = BundlerConfig(
        root=base.root,
        bundle=BundleDefaults(
            sort=_optional_str(bundle_payload, "bundle", "sort", base.bundle.sort),
            note=_optional_bool(bundle_payload, "bundle", "note", base.bundle.note),
            remove_empty_lines=_optional_bool(
                bundle_payload, "bundle", "remove_empty_lines", base.bundle.remove_empty_lines
            ),
            author=author,
            on_read_error=on_read_error,
            encoding=_optional_str(bundle_payload, "bundle", "encoding", base.bundle.encoding),
        ),
        audit=AuditConfig(
            enabled=_optional_bool(audit_payload, "audit", "enabled", base.audit.enabled),
            path=audit_path,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: BundlerConfig, overrides: CliOverrides) -> BundlerConfig:
    """Apply command-line values at highest precedence."""
    bundle = config.bundle
    return BundlerConfig(
        root=config.root,
        bundle=BundleDefaults(
            sort=overrides.sort if overrides.sort is not None else bundle.sort,
            note=overrides.note if overrides.note is not None else bundle.note,
            remove_empty_lines=(
                overrides.remove_empty_lines
                if overrides.remove_empty_lines is not None
                else bundle.remove_empty_lines
            ),
            author=overrides.author if overrides.author is not None else bundle.author,
            on_read_error=bundle.on_read_error,
            encoding=bundle.encoding,
        ),
        audit=config.audit,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> BundlerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())
