"""Tests for genfix.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from genfix.config import ConfigError, GenFixConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GenFixConfig)
    assert config.root == tmp_path.resolve()
    assert config.escalation.enabled is False
    assert config.escalation.model is None
    assert config.escalation.batch_size == 15
    assert config.escalation.strict_scope is False
    assert config.repair.disabled_passes == []
    assert config.dependencies.known_packages == {}
    assert config.exclude_paths == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".genfix.yml"
    config_file.write_text(
        """
escalation:
  enabled: true
  model: "qwen/qwen-2.5-coder-32b-instruct"
  base_url: "https://openrouter.ai/api/v1"
  api_key: "test-key"
  temperature: 0.2
  max_tokens: 8000
  request_timeout: 60
  batch_size: 40
  strict_scope: "yes"
repair:
  disabled_passes: [truncation, cleanup]
dependencies:
  known_packages:
    canvas-confetti: "^1.9.2"
    recharts: "^2.12.0"
exclude_paths:
  - "public/"
  - "*.md"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    escalation = config.escalation
    assert escalation.enabled is True
    assert escalation.model == "qwen/qwen-2.5-coder-32b-instruct"
    assert escalation.base_url == "https://openrouter.ai/api/v1"
    assert escalation.api_key == "test-key"
    assert escalation.temperature == 0.2
    assert escalation.max_tokens == 8000
    assert escalation.request_timeout == 60.0
    assert escalation.batch_size == 15
    assert escalation.strict_scope is True
    assert config.repair.disabled_passes == ["truncation", "cleanup"]
    assert config.dependencies.known_packages == {
        "canvas-confetti": "^1.9.2",
        "recharts": "^2.12.0",
    }
    assert config.exclude_paths == ["public/", "*.md"]


def test_load_config_clamps_small_batch_size(tmp_path: Path) -> None:
    (tmp_path / ".genfix.yml").write_text("escalation:\n  batch_size: 0\n", encoding="utf-8")

    assert load_config(tmp_path).escalation.batch_size == 1


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".genfix.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.escalation.enabled is False
    assert config.exclude_paths == []


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".genfix.yml").write_text("escalation: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".genfix.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
