"""Tests for triggerforge CLI commands."""

import json

import pytest
from click.testing import CliRunner

from triggerforge.cli.main import cli
from triggerforge.operations import OperationRegistry


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clear_operation_registry():
    OperationRegistry.clear()
    yield
    OperationRegistry.clear()


def write_config(tmp_path, data, name="triggers.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


class TestConfigValidate:
    def test_bundled_config_is_valid(self, runner):
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0
        assert "Trigger configuration is valid" in result.output
        assert "Account (enabled, 1 before, 1 after)" in result.output

    def test_reports_schema_errors(self, runner, tmp_path):
        path = write_config(tmp_path, {"Account": {"isEnabled": "yes"}})
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "Account/isEnabled" in result.output
        assert "1 error(s) found" in result.output

    def test_reports_unregistered_operations(self, runner, tmp_path):
        path = write_config(
            tmp_path,
            {"Account": {"isEnabled": True, "beforeTriggersOpsClassNames": ["Ghost"]}},
        )
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "Operation 'Ghost' is not registered" in result.output

    def test_unparseable_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1

    def test_strict_flag(self, runner, tmp_path):
        path = write_config(
            tmp_path,
            {
                "Account": {
                    "isEnabled": False,
                    "beforeTriggersOpsClassNames": ["AccountValidation"],
                    "afterTriggerOpsClassNames": ["AccountValidation"],
                }
            },
        )
        relaxed = runner.invoke(cli, ["config", "validate", str(path)])
        assert relaxed.exit_code == 0
        assert "Account (disabled, 1 before, 1 after)" in relaxed.output

        strict = runner.invoke(cli, ["config", "validate", "--strict", str(path)])
        assert strict.exit_code == 1

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["config", "validate", str(tmp_path / "nope.json")])
        assert result.exit_code == 2


class TestConfigShow:
    def test_show_bundled_config(self, runner):
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "Account": {
                "isEnabled": True,
                "beforeTriggersOpsClassNames": ["AccountValidation"],
                "afterTriggerOpsClassNames": ["AccountUpdateRelatedContacts"],
            }
        }

    def test_show_invalid_config(self, runner, tmp_path):
        path = write_config(tmp_path, {"Account": {}})
        result = runner.invoke(cli, ["config", "show", str(path)])
        assert result.exit_code == 1


class TestOperationsCommand:
    def test_lists_registered_operations(self, runner):
        result = runner.invoke(cli, ["operations"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "AccountUpdateRelatedContacts",
            "AccountValidation",
        ]

    def test_log_level_option(self, runner):
        result = runner.invoke(cli, ["--log-level", "debug", "operations"])
        assert result.exit_code == 0
