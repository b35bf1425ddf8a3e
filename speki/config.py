"""Configuration helpers: share directory discovery and settings."""

import os
import pathlib

DEFAULT_SETTINGS = {
    "import_category": "imports",
}


def get_share_dir() -> pathlib.Path:
    env = os.environ.get("SPEKI_DIR")
    if env:
        return pathlib.Path(env)
    config_path = pathlib.Path.home() / ".config" / "speki" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip()).expanduser()
    return pathlib.Path.home() / ".local" / "share" / "speki"


def cards_dir(share_dir: pathlib.Path) -> pathlib.Path:
    return share_dir / "cards"


def cache_path(share_dir: pathlib.Path) -> pathlib.Path:
    return share_dir / "cache.db"


def load_settings(share_dir: pathlib.Path) -> dict:
    settings = dict(DEFAULT_SETTINGS)
    settings_path = share_dir / "settings.toml"
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    return settings


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("["):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            else:
                try:
                    v = float(v)
                except ValueError:
                    pass
            result[k] = v
    return result
