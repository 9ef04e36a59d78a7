import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from grepurl.config import DEFAULT_USER_AGENT, GrepurlConfig, load_config, merge_options, read_config_file


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("schemes: http,https\nunique: true", ".yaml", None),
        (json.dumps({"schemes": ["http", "https"], "unique": True}), ".json", None),
        ("timeout: -1", ".yaml", ValidationError),
        ("colour: blue", ".yml", ValidationError),
        ("schemes: [unclosed", ".yaml", ValueError),
        ("- a\n- b", ".yaml", TypeError),
        ("{not json", ".json", ValueError),
        ("schemes = 'http'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, GrepurlConfig)
        assert cfg.schemes == frozenset({"http", "https"})
        assert cfg.unique is True


def test_load_config_without_path_gives_defaults():
    cfg = load_config(None)
    assert cfg == GrepurlConfig()
    assert cfg.schemes is None
    assert cfg.absolute is False
    assert cfg.user_agent == DEFAULT_USER_AGENT


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_config_file(tmp_path / "nope.yaml")


def test_list_options_are_split_and_trimmed():
    cfg = GrepurlConfig(hosts=" a.com, b.com ,,", exclude_extensions=[".js", "css,.map"])
    assert cfg.hosts == frozenset({"a.com", "b.com"})
    assert cfg.exclude_extensions == frozenset({"js", "css", "map"})


def test_blank_list_option_is_enabled_but_empty():
    cfg = GrepurlConfig(schemes="")
    assert cfg.schemes == frozenset()


def test_config_is_frozen():
    cfg = GrepurlConfig()
    with pytest.raises(ValidationError):
        cfg.unique = True


def test_merge_options_cli_overrides_file():
    cfg = merge_options(
        {"schemes": "ftp", "unique": True, "timeout": 3},
        {"schemes": "http", "unique": False, "timeout": None, "hosts": None, "absolute": True},
    )
    assert cfg.schemes == frozenset({"http"})
    assert cfg.unique is True
    assert cfg.timeout == 3
    assert cfg.hosts is None
    assert cfg.absolute is True


def test_merge_options_empty_string_overrides_file():
    cfg = merge_options({"extensions": "jpg"}, {"extensions": ""})
    assert cfg.extensions == frozenset()
