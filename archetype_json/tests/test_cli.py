#!/usr/bin/env python3

import json

import pytest
from click.testing import CliRunner

from archetype_json.archetype_json import archetype_json


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def script_path(test_data_dir):
    return str(test_data_dir / "conditional_step.json")


class TestCli:
    """Test cases for the command line interface"""

    def test_check(self, runner, script_path):
        result = runner.invoke(archetype_json, ["check", script_path])
        assert result.exit_code == 0
        assert "ok (script)" in result.output

    def test_check_reports_errors(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"kind": "step", "if": "missing"}')
        result = runner.invoke(archetype_json, ["check", str(path)])
        assert result.exit_code == 1
        assert "Unresolved expression: 'missing'" in result.output

    def test_check_reports_json_errors(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"kind": ')
        result = runner.invoke(archetype_json, ["check", str(path)])
        assert result.exit_code == 1

    def test_format(self, runner, script_path):
        result = runner.invoke(archetype_json, ["format", script_path])
        assert result.exit_code == 0
        assert result.output == (
            '{"kind":"script","expressions":{"e1":[{"kind":"literal","value":true}]},'
            '"children":[{"kind":"step","if":"e1","children":[]}]}\n'
        )

    def test_format_pretty_to_file(self, runner, script_path, tmp_path, json_diff):
        output = tmp_path / "out.json"
        result = runner.invoke(archetype_json, ["format", "--pretty", script_path, "-o", str(output)])
        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert text.startswith('{\n  "kind": "script"')
        with open(script_path) as f:
            assert json_diff(json.loads(text), json.load(f)) == []

    def test_outline(self, runner, script_path):
        result = runner.invoke(archetype_json, ["outline", script_path])
        assert result.exit_code == 0
        assert result.output == "script\n  step [if true]\n"

    def test_config(self, runner, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"name_key": "type", "children_key": "items"}))
        path = tmp_path / "script.json"
        path.write_text('{"type": "script", "items": [{"type": "step", "items": []}]}')
        result = runner.invoke(archetype_json, ["--config", str(config), "format", str(path)])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"type": "script", "items": [{"type": "step", "items": []}]}

    def test_fragment_root_from_config(self, runner, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"strict_root": False}))
        path = tmp_path / "step.json"
        path.write_text('{"kind": "step", "children": []}')
        assert runner.invoke(archetype_json, ["check", str(path)]).exit_code == 1
        result = runner.invoke(archetype_json, ["--config", str(config), "check", str(path)])
        assert result.exit_code == 0
        assert "ok (step)" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
