from pathlib import Path

import pytest

from kubernetes2simple.core.constants import CONVERTER_URL
from kubernetes2simple.io.config import load_config
from kubernetes2simple.pacts.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    cfg = load_config(str(tmp_path / "k2s.yaml"))
    assert cfg == {
        "release_name": "release",
        "values_files": [],
        "converter_url": CONVERTER_URL,
    }


def test_values_are_loaded(tmp_path: Path) -> None:
    path = tmp_path / "k2s.yaml"
    path.write_text("release_name: shop\nvalues_files:\n  - values-local.yaml\n",
                    encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["release_name"] == "shop"
    assert cfg["values_files"] == ["values-local.yaml"]
    assert cfg["converter_url"] == CONVERTER_URL


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "k2s.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path))["release_name"] == "release"


def test_unknown_keys_warn(tmp_path: Path) -> None:
    path = tmp_path / "k2s.yaml"
    path.write_text("release: shop\n", encoding="utf-8")
    warnings: list[str] = []
    load_config(str(path), warnings)
    assert warnings == ["k2s.yaml: unknown key 'release' — ignored"]


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("values_files: values.yaml\n", "values_files must be a list"),
        ("release_name: ''\n", "release_name must be a non-empty string"),
        ("converter_url: 3\n", "converter_url must be a string"),
        ("- a\n- b\n", "expected a mapping"),
        ("release_name: [unclosed\n", "invalid YAML"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "k2s.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(str(path))
