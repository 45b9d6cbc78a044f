from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from check_apt.utils import default_config_path, find_root, init_env, load_config

DEFAULT_TIMEOUT = 10


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RunConfig:
    verbose: int = 0
    timeout: int = DEFAULT_TIMEOUT
    update: bool = False
    dist_upgrade: bool = False
    log_file: Path | None = None


def _timeout(raw: object, source: str) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"timeout from {source} must be a positive integer")
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"timeout from {source} must be a positive integer") from None
    if value <= 0:
        raise ConfigError(f"timeout from {source} must be a positive integer")
    return value


def _flag(cli: bool | None, data: dict, key: str) -> bool:
    if cli is not None:
        return cli
    raw = data.get(key, False)
    if not isinstance(raw, bool):
        raise ConfigError(f"{key} in config file must be true or false, got {raw!r}")
    return raw


def _explicit_config(cli: str | None) -> Path | None:
    raw = cli or (os.getenv("CHECK_APT_CONFIG") or "").strip()
    if not raw:
        return None
    p = Path(raw).expanduser().resolve()
    if not p.is_file():
        raise ConfigError(f"config file not found: {p}")
    return p


def load_run_config(args: argparse.Namespace) -> RunConfig:
    """Build the run configuration from CLI flags, environment and YAML file.

    CLI flags win over the environment, which wins over the config file.
    """
    explicit = _explicit_config(getattr(args, "config", None))
    root = find_root(explicit)
    try:
        init_env(root)
    except OSError as e:
        raise ConfigError(f".env unreadable: {root / '.env'} ({e.strerror or e})") from e

    cfg_path = explicit
    if cfg_path is None:
        default = default_config_path(root)
        cfg_path = default if default.is_file() else None

    data: dict = {}
    if cfg_path:
        try:
            data = load_config(cfg_path)
        except OSError as e:
            raise ConfigError(f"config file unreadable: {cfg_path} ({e.strerror or e})") from e
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"config file invalid: {cfg_path}") from e

    if args.timeout is not None:
        timeout = _timeout(args.timeout, "--timeout")
    elif (os.getenv("CHECK_APT_TIMEOUT") or "").strip():
        timeout = _timeout(os.getenv("CHECK_APT_TIMEOUT"), "CHECK_APT_TIMEOUT")
    elif data.get("timeout_seconds") is not None:
        timeout = _timeout(data["timeout_seconds"], "timeout_seconds")
    else:
        timeout = DEFAULT_TIMEOUT

    paths = data.get("paths") if isinstance(data.get("paths"), dict) else {}
    log_file = None
    if paths.get("log_file"):
        log_file = Path(str(paths["log_file"])).expanduser()
        if not log_file.is_absolute():
            log_file = (root / log_file).resolve()

    return RunConfig(
        verbose=args.verbose or 0,
        timeout=timeout,
        update=_flag(args.update, data, "update"),
        dist_upgrade=_flag(args.dist_upgrade, data, "dist_upgrade"),
        log_file=log_file,
    )
