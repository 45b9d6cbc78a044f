from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv


def _looks_like_root(cand: Path) -> bool:
    return (cand / "config" / "config.yml").is_file() or (cand / ".env").is_file()


def find_root(config_path: Path | None = None) -> Path:
    """Locate the project directory holding ``config/`` and ``.env``.

    ``CHECK_APT_ROOT`` wins. An explicit config file anchors the root next to
    it (``<root>/config/<name>.yml`` or ``<root>/<name>.yml``) so relative
    paths do not depend on the supervisor's working directory. Otherwise the
    cwd and its parents are searched.
    """
    env_root = os.getenv("CHECK_APT_ROOT")
    if env_root:
        p = Path(env_root).expanduser()
        if p.exists():
            return p.resolve()

    if config_path:
        cfg_dir = config_path.parent
        return (cfg_dir.parent if cfg_dir.name == "config" else cfg_dir).resolve()

    cwd = Path.cwd().resolve()
    for cand in [cwd, *cwd.parents]:
        if _looks_like_root(cand):
            return cand
    return cwd


def default_config_path(root: Path | None = None) -> Path:
    return (root or find_root()) / "config" / "config.yml"


def load_config(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    # an empty file means "all defaults"
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config_invalid path={path} type={type(data).__name__}")
    return data


def init_env(root: Path) -> None:
    load_dotenv(root.joinpath(".env"), override=False)
