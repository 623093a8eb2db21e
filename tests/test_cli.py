import json

from typer.testing import CliRunner

from quickassert.cli import app

runner = CliRunner()


def test_validate_prints_schedules(tmp_path):
    config = tmp_path / "quickassert.yaml"
    config.write_text(
        "eventually:\n  delay: 0.05\n  factor: 2\n  max_delay: 1\n  max_duration: 10\n"
        "stable:\n  delay: 0.1\n  max_count: 3\n"
        "junit: reports/checks.xml\n"
    )
    result = runner.invoke(app, ["validate", str(config)])
    assert result.exit_code == 0
    assert "eventually: delay=0.05s, factor=2, max_delay=1s, max_duration=10s" in result.output
    assert "stable: delay=0.1s, factor=1, max_count=3" in result.output
    assert "junit: " in result.output
    assert "checks.xml" in result.output


def test_validate_missing_config():
    result = runner.invoke(app, ["validate", "nonexistent.yaml"])
    assert result.exit_code != 0


def test_validate_invalid_config(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("eventually:\n  delay: 1\n")
    result = runner.invoke(app, ["validate", str(config)])
    assert result.exit_code == 1


def test_schema_command_writes_file(tmp_path):
    out = tmp_path / "schema.json"
    result = runner.invoke(app, ["schema", "--out", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    schema = json.loads(out.read_text())
    assert "eventually" in schema["properties"]
