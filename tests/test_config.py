"""Tests for config loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from quickassert.config import QuickAssertConfig, apply_config, load_config
from quickassert.eventually import (
    DEFAULT_STABLE_STRATEGY,
    DEFAULT_STRATEGY,
    default_strategies,
)
from quickassert.retry import RetryStrategy
from quickassert.schema import generate_json_schema, write_json_schema


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "quickassert.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_empty_config_uses_defaults(tmp_yaml):
    cfg = load_config(tmp_yaml(""))
    assert cfg.eventually == DEFAULT_STRATEGY
    assert cfg.stable == DEFAULT_STABLE_STRATEGY
    assert cfg.verbose is False
    assert cfg.debug_log is None
    assert cfg.junit is None


def test_load_schedules(tmp_yaml):
    path = tmp_yaml("""\
        eventually:
          delay: 0.05
          max_delay: 1
          factor: 2
          max_duration: 10
        stable:
          delay: 0.1
          max_count: 3
    """)
    cfg = load_config(path)
    assert cfg.eventually == RetryStrategy(
        delay=0.05, max_delay=1, factor=2, max_duration=10
    )
    assert cfg.stable.max_count == 3
    assert cfg.stable.max_duration == 0


def test_unknown_key_rejected(tmp_yaml):
    with pytest.raises(ValidationError):
        load_config(tmp_yaml("retries: 3\n"))


def test_unknown_schedule_key_rejected(tmp_yaml):
    path = tmp_yaml("""\
        eventually:
          timeout: 3
          max_duration: 1
    """)
    with pytest.raises(ValidationError):
        load_config(path)


def test_unbounded_schedule_rejected(tmp_yaml):
    path = tmp_yaml("""\
        eventually:
          delay: 0.5
    """)
    with pytest.raises(ValidationError, match="max_duration or max_count"):
        load_config(path)


def test_env_var_expansion(tmp_yaml, monkeypatch):
    monkeypatch.setenv("QA_TIMEOUT", "12")
    path = tmp_yaml("""\
        eventually:
          max_duration: ${QA_TIMEOUT}
    """)
    assert load_config(path).eventually.max_duration == 12


def test_env_var_default(tmp_yaml, monkeypatch):
    monkeypatch.delenv("QA_TIMEOUT", raising=False)
    path = tmp_yaml("""\
        eventually:
          max_duration: ${QA_TIMEOUT:-7}
    """)
    assert load_config(path).eventually.max_duration == 7


def test_missing_env_vars_listed_together(tmp_yaml, monkeypatch):
    monkeypatch.delenv("QA_MISSING_ONE", raising=False)
    monkeypatch.delenv("QA_MISSING_TWO", raising=False)
    path = tmp_yaml("""\
        debug_log: ${QA_MISSING_ONE}/debug.log
        junit: ${QA_MISSING_TWO}
    """)
    with pytest.raises(ValueError) as exc_info:
        load_config(path)
    message = str(exc_info.value)
    assert "missing environment variables" in message
    assert "debug_log=${QA_MISSING_ONE}/debug.log" in message
    assert "junit=${QA_MISSING_TWO}" in message


def test_relative_paths_resolved_against_config(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        debug_log: logs/debug.log
        junit: /abs/checks.xml
    """)
    cfg = load_config(path)
    assert cfg.debug_log == str((tmp_path / "logs" / "debug.log").resolve())
    assert cfg.junit == "/abs/checks.xml"


def test_apply_config_sets_defaults():
    fast = RetryStrategy(delay=0, max_count=2)
    apply_config(QuickAssertConfig(eventually=fast))
    assert default_strategies() == (fast, DEFAULT_STABLE_STRATEGY)


def test_generate_json_schema():
    schema = generate_json_schema()
    assert schema["$schema"].startswith("https://json-schema.org/")
    assert schema["title"] == "quickassert config"
    assert set(schema["properties"]) == {
        "eventually",
        "stable",
        "verbose",
        "debug_log",
        "junit",
    }
    assert schema["additionalProperties"] is False


def test_write_json_schema(tmp_path):
    out = tmp_path / "schemas" / "quickassert.schema.json"
    write_json_schema(out)
    assert out.exists()
    assert '"title": "quickassert config"' in out.read_text()
