from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from apps.capture.settings import CaptureSettings
from apps.viewer.settings import ViewerSettings

ENV_PREFIX = "SSC_"

# --- paths --------------------------------------------------------------------


def _repo_root() -> Path:
    """Heuristic: walk up from this file until we find pyproject.toml."""
    p = Path(__file__).resolve()
    for ancestor in [p, *p.parents]:
        if (ancestor / "pyproject.toml").exists():
            return ancestor
    return Path.cwd()


def _profiles_dir(env: Mapping[str, str]) -> Path:
    # SSC_CONFIG_DIR points *at* profiles/
    override = env.get(f"{ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override)
    return _repo_root() / "configs" / "profiles"


def _load_profile_table(env: Mapping[str, str], profile: str) -> dict[str, Any]:
    f = _profiles_dir(env) / f"{profile}.toml"
    if not f.exists():
        return {}
    text = f.read_text("utf-8")
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise RuntimeError(f"Failed to parse profile TOML: {f}") from e


# --- env overlay helpers ------------------------------------------------------


def _coerce_env_value(raw: str) -> Any:
    """
    Try to parse JSON first (so lists/dicts/numbers/bools work),
    then fall back to the original string.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _collect_env_for(
    fields: set[str], env: Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    """
    Collect overrides like SSC_MONITOR, SSC_DETECTOR -> {'monitor': 2, 'detector': {...}}.
    Case-insensitive after the prefix.
    """
    out: dict[str, Any] = {}
    upper_to_field = {f.upper(): f for f in fields}
    plen = len(prefix)
    for k, v in env.items():
        if not k.startswith(prefix):
            continue
        key = k[plen:].upper()
        if key in upper_to_field:
            out[upper_to_field[key]] = _coerce_env_value(v)
    return out


def _merge(base: dict[str, Any], over: Mapping[str, Any]) -> dict[str, Any]:
    """One level deep: nested tables (detector, trigger) merge key by key."""
    for key, value in over.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            base[key] = {**current, **value}
        else:
            base[key] = value
    return base


def _profile_name(env: Mapping[str, str], profile: str | None) -> str:
    return (profile or env.get(f"{ENV_PREFIX}PROFILE") or "dev").strip()


# --- public API ---------------------------------------------------------------


def load_capture_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> CaptureSettings:
    """
    Merge defaults (CaptureSettings) <- TOML [capture] <- env SSC_*.
    Env examples: SSC_MONITOR=2, SSC_REGION=[0,0,800,600],
    SSC_DETECTOR={"kernel":"ncc"}
    """
    env = os.environ if env is None else env
    table = _load_profile_table(env, _profile_name(env, profile))

    # start from field defaults, not from whatever the process env holds
    base = CaptureSettings.model_construct().model_dump()

    toml_capture = table.get("capture", {})
    if isinstance(toml_capture, dict):
        _merge(base, toml_capture)

    _merge(base, _collect_env_for(set(base.keys()), env))
    return CaptureSettings.model_validate(base)


def load_viewer_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> ViewerSettings:
    """Merge defaults (ViewerSettings) <- TOML [viewer] <- env SSC_*."""
    env = os.environ if env is None else env
    table = _load_profile_table(env, _profile_name(env, profile))

    base = ViewerSettings.model_construct().model_dump()
    toml_viewer = table.get("viewer", {})
    if isinstance(toml_viewer, dict):
        _merge(base, toml_viewer)

    _merge(base, _collect_env_for(set(base.keys()), env))
    return ViewerSettings.model_validate(base)
