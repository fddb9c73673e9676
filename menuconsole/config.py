#!/usr/bin/env python3
# menuconsole/config.py
from __future__ import annotations

"""
Console configuration loader.

Precedence (low → high):
  1) Built-in defaults
  2) Files in the config directory (CWD by default): .env, config.ini, config.json, config.toml
  3) Environment variables prefixed with CONSOLE_

Keys are case-insensitive, and the CONSOLE_ prefix is optional inside files
(a [console] section in config.ini/config.toml flattens to the same keys).

Validation:
  - NAME: non-empty str
  - COMMAND_HIGHLIGHT / FLAG_HIGHLIGHT / QUOTE_HIGHLIGHT: color name or raw escape sequence
  - HIGHLIGHTING / NEWLINE_BEFORE / NEWLINE_AFTER / NEWLINE_WHEN_EMPTY / COMPLETE_WHILE_TYPING: bool
  - EMPTY_CHARS / MULTILINE_PROMPT: str
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping
from pathlib import Path
import configparser
import json
import logging
import os
import re
import tomllib  # stdlib in 3.11+

from menuconsole.ui import ANSI, sequence

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONSOLE_"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "NAME": "console",
    "COMMAND_HIGHLIGHT": ANSI["green"],
    "FLAG_HIGHLIGHT": ANSI["grey"],
    "QUOTE_HIGHLIGHT": ANSI["yellow"],
    "HIGHLIGHTING": True,
    "NEWLINE_BEFORE": False,
    "NEWLINE_AFTER": False,
    "NEWLINE_WHEN_EMPTY": False,
    "EMPTY_CHARS": " \t",
    "MULTILINE_PROMPT": "> ",
    "COMPLETE_WHILE_TYPING": True,
    "LOG_LEVEL": None,              # 'DEBUG'/'INFO'/'WARNING'/'ERROR'/'CRITICAL'
    "LOG_FILE_PATH": None,
}


# ---------- data model ----------

@dataclass(frozen=True)
class ConsoleConfig:
    """Settings handed to a Console at construction."""

    name: str = DEFAULTS["NAME"]

    command_highlight: str = DEFAULTS["COMMAND_HIGHLIGHT"]
    flag_highlight: str = DEFAULTS["FLAG_HIGHLIGHT"]
    quote_highlight: str = DEFAULTS["QUOTE_HIGHLIGHT"]
    highlighting: bool = DEFAULTS["HIGHLIGHTING"]

    # Blank lines around command output
    newline_before: bool = DEFAULTS["NEWLINE_BEFORE"]
    newline_after: bool = DEFAULTS["NEWLINE_AFTER"]
    newline_when_empty: bool = DEFAULTS["NEWLINE_WHEN_EMPTY"]
    empty_chars: str = DEFAULTS["EMPTY_CHARS"]

    multiline_prompt: str = DEFAULTS["MULTILINE_PROMPT"]
    complete_while_typing: bool = DEFAULTS["COMPLETE_WHILE_TYPING"]

    log_level: str | None = DEFAULTS["LOG_LEVEL"]
    log_file_path: Path | None = DEFAULTS["LOG_FILE_PATH"]

    # Unrecognized keys preserved for applications and forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if (v.startswith("'") and v.endswith("'")) or (v.startswith('"') and v.endswith('"')):
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser(interpolation=None)
    try:
        cfg.read(path, encoding="utf-8")
    except configparser.Error as exc:
        logger.warning("ignoring unreadable %s: %s", path, exc)
        return {}
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        logger.warning("ignoring unreadable %s: %s", path, exc)
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        logger.warning("ignoring unreadable %s: %s", path, exc)
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'console': {'newline_after': true}} -> {'CONSOLE_NEWLINE_AFTER': True}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _find_config_files(directory: Path | None = None) -> list[Path]:
    base = directory or Path.cwd()
    return [
        base / ".env",
        base / "config.ini",
        base / "config.json",
        base / "config.toml",
    ]


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_color(val: Any) -> str:
    # Color names resolve through the ANSI table; raw sequences pass through
    text = str(val)
    return sequence(text if text.startswith("\x1b") else text.strip().lower())


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    return Path(os.path.expandvars(os.path.expanduser(v))).resolve()


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in d.items():
        key = str(k).upper()
        if key.startswith(ENV_PREFIX):
            key = key[len(ENV_PREFIX):]
        out[key] = v
    return out


# ---------- merge & load ----------

def _merge_sources(directory: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(directory):
        if file.name == ".env":
            merged.update(_normalize_keys(_load_env_file(file)))
        elif file.suffix == ".ini":
            merged.update(_normalize_keys(_load_ini_file(file)))
        elif file.suffix == ".json":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_json_file(file))))
        elif file.suffix == ".toml":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_toml_file(file))))

    # Environment variables override all; only take CONSOLE_-prefixed keys
    env = os.environ if environ is None else environ
    env_overrides = {k: v for k, v in env.items()
                     if k.startswith(ENV_PREFIX) and re.fullmatch(r"[A-Z0-9_]+", k)}
    merged.update(_normalize_keys(env_overrides))
    return merged


# ---------- validation ----------

def _validate_and_build(config: dict[str, Any]) -> ConsoleConfig:
    name = _as_opt_str(config.get("NAME", DEFAULTS["NAME"]))
    if name is None:
        raise ValueError("NAME must not be empty")

    empty_chars = config.get("EMPTY_CHARS", DEFAULTS["EMPTY_CHARS"])
    multiline_prompt = config.get("MULTILINE_PROMPT", DEFAULTS["MULTILINE_PROMPT"])
    if not isinstance(empty_chars, str) or not isinstance(multiline_prompt, str):
        raise ValueError("EMPTY_CHARS and MULTILINE_PROMPT must be strings")

    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return ConsoleConfig(
        name=name,
        command_highlight=_as_color(config.get("COMMAND_HIGHLIGHT", DEFAULTS["COMMAND_HIGHLIGHT"])),
        flag_highlight=_as_color(config.get("FLAG_HIGHLIGHT", DEFAULTS["FLAG_HIGHLIGHT"])),
        quote_highlight=_as_color(config.get("QUOTE_HIGHLIGHT", DEFAULTS["QUOTE_HIGHLIGHT"])),
        highlighting=_as_bool(config.get("HIGHLIGHTING", DEFAULTS["HIGHLIGHTING"])),
        newline_before=_as_bool(config.get("NEWLINE_BEFORE", DEFAULTS["NEWLINE_BEFORE"])),
        newline_after=_as_bool(config.get("NEWLINE_AFTER", DEFAULTS["NEWLINE_AFTER"])),
        newline_when_empty=_as_bool(config.get("NEWLINE_WHEN_EMPTY", DEFAULTS["NEWLINE_WHEN_EMPTY"])),
        empty_chars=empty_chars,
        multiline_prompt=multiline_prompt,
        complete_while_typing=_as_bool(
            config.get("COMPLETE_WHILE_TYPING", DEFAULTS["COMPLETE_WHILE_TYPING"])),
        log_level=_as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"])),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH", DEFAULTS["LOG_FILE_PATH"])),
        extra=extra,
    )


# ---------- TOML output ----------

_TOML_ESCAPES = {"\\": "\\\\", '"': '\\"', "\t": "\\t", "\n": "\\n", "\r": "\\r"}


def _toml_char(c: str) -> str:
    """Escape one character for a TOML basic string."""
    if c in _TOML_ESCAPES:
        return _TOML_ESCAPES[c]
    if ord(c) < 0x20 or c == "\x7f":
        return f"\\u{ord(c):04x}"
    return c


# ---------- public API ----------

def load_config(directory: str | Path | None = None, *, environ: Mapping[str, str] | None = None) -> ConsoleConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects.
    """
    raw = _merge_sources(Path(directory) if directory is not None else None, environ)
    return _validate_and_build(raw)


def save_config(config: ConsoleConfig, path: str | Path | None = None) -> Path:
    """
    Persist `config` as a flat TOML file (default: ./config.toml).
    Returns the path written.
    """
    out = Path(path or (Path.cwd() / "config.toml")).resolve()

    # Minimal TOML writer (no external deps)
    def _toml_scalar(v: Any) -> str:
        if isinstance(v, bool):
            return "true" if v else "false"
        if v is None:
            return '""'
        if isinstance(v, (int, float)):
            return str(v)
        return '"' + "".join(_toml_char(c) for c in str(v)) + '"'

    values = asdict(config)
    extra = values.pop("extra")
    lines = [f"{k.upper()} = {_toml_scalar(v)}" for k, v in sorted(values.items())]
    lines += [f"{k} = {_toml_scalar(v)}" for k, v in sorted(extra.items())
              if re.fullmatch(r"[A-Za-z0-9_]+", k)]
    try:
        out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to write config at {out}: {exc}") from exc
    logger.info("configuration saved to %s", out)
    return out
