"""Project configuration — optional k2s.yaml in the working directory."""

import os

import yaml

from kubernetes2simple.pacts.errors import ConfigError
from kubernetes2simple.core.constants import CONVERTER_URL

KNOWN_KEYS = ("release_name", "values_files", "converter_url")


def _validate(cfg: dict, path: str) -> None:
    if not isinstance(cfg.get("release_name"), str) or not cfg["release_name"]:
        raise ConfigError(f"{path}: release_name must be a non-empty string")
    values_files = cfg.get("values_files")
    if (not isinstance(values_files, list)
            or not all(isinstance(v, str) for v in values_files)):
        raise ConfigError(f"{path}: values_files must be a list of paths")
    if not isinstance(cfg.get("converter_url"), str):
        raise ConfigError(f"{path}: converter_url must be a string")


def load_config(path: str, warnings: list[str] | None = None) -> dict:
    """Load k2s.yaml or return the defaults."""
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML ({exc.__class__.__name__})") from exc
        if not isinstance(cfg, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
    else:
        cfg = {}

    if warnings is not None:
        for key in cfg:
            if key not in KNOWN_KEYS:
                warnings.append(f"{os.path.basename(path)}: unknown key '{key}' — ignored")

    cfg.setdefault("release_name", "release")
    cfg.setdefault("values_files", [])
    cfg.setdefault("converter_url", CONVERTER_URL)
    _validate(cfg, path)
    return cfg
