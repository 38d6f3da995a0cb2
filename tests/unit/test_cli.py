"""Tests for the authz CLI."""
from __future__ import annotations

import pathlib

import pytest
from click.testing import CliRunner

from aumos_authz.authorization.engine import AuthorizationEngine
from aumos_authz.cli.main import cli
from aumos_authz.permissions.levels import PermissionLevel
from aumos_authz.permissions.matrix_loader import MatrixLoader

_MATRIX_YAML = """\
version: "1.0"
matrix:
  resourceA:
    guest: none
    authenticated: view
    admin: admin
"""


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def matrix_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "permissions.yaml"
    path.write_text(_MATRIX_YAML, encoding="utf-8")
    return path


class TestCheckCommand:
    def test_granted_exits_zero(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "--class", "admin", "--capability", "resourceA", "--level", "admin"],
        )
        assert result.exit_code == 0
        assert "GRANTED" in result.output

    def test_denied_exits_one(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "authenticated", "-f", "resourceA", "-l", "edit"],
        )
        assert result.exit_code == 1
        assert "DENIED" in result.output

    def test_unknown_capability_denied(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "admin", "-f", "missing", "-l", "view"],
        )
        assert result.exit_code == 1
        assert "not in matrix" in result.output

    def test_override_applies(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "guest", "-f", "resourceA", "-l", "admin", "--override", "admin"],
        )
        assert result.exit_code == 0
        assert "override" in result.output

    def test_none_override_blocks(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "admin", "-f", "resourceA", "-l", "view", "--override", "none"],
        )
        assert result.exit_code == 1

    def test_invalid_matrix_exits_two(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("matrix:\n  resourceA:\n    guest: owner\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", str(bad), "-c", "guest", "-f", "resourceA", "-l", "view"])
        assert result.exit_code == 2

    def test_invalid_level_choice_rejected(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "guest", "-f", "resourceA", "-l", "superuser"],
        )
        assert result.exit_code == 2

    def test_show_invalid_matrix_exits_two(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("matrix:\n  resourceA:\n    guest: owner\n", encoding="utf-8")
        result = runner.invoke(cli, ["show", str(bad)])
        assert result.exit_code == 2
        assert "Invalid matrix" in result.output

    def test_bracketed_arguments_printed_literally(
        self, runner: CliRunner, matrix_file: pathlib.Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "[/admin]", "-f", "[bold]x[/bold]", "-l", "view"],
        )
        assert result.exit_code == 1
        assert "[/admin]" in result.output
        assert "[bold]x[/bold]" in result.output

    def test_verdict_comes_from_engine(
        self, runner: CliRunner, matrix_file: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[tuple[object, ...]] = []

        def fake_has_permission(self: AuthorizationEngine, *args: object) -> bool:
            calls.append(args)
            return True

        monkeypatch.setattr(AuthorizationEngine, "has_permission", fake_has_permission)
        result = runner.invoke(
            cli,
            ["check", str(matrix_file), "-c", "guest", "-f", "resourceA", "-l", "admin"],
        )
        assert result.exit_code == 0
        assert calls == [("guest", "resourceA", PermissionLevel.ADMIN, None)]


class TestOtherCommands:
    def test_show_lists_capabilities(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(cli, ["show", str(matrix_file)])
        assert result.exit_code == 0
        assert "resourceA" in result.output
        assert "authenticated" in result.output

    def test_levels(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["levels"])
        assert result.exit_code == 0
        for level in PermissionLevel:
            assert level.value in result.output

    def test_init_writes_loadable_matrix(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        output = tmp_path / "out" / "permissions.yaml"
        result = runner.invoke(cli, ["init", "--output", str(output)])
        assert result.exit_code == 0
        matrix = MatrixLoader().load(output)
        assert matrix.lookup("adminPanel", "admin") is PermissionLevel.ADMIN

    def test_init_refuses_overwrite(self, runner: CliRunner, matrix_file: pathlib.Path) -> None:
        result = runner.invoke(cli, ["init", "--output", str(matrix_file)])
        assert result.exit_code == 1
        assert matrix_file.read_text(encoding="utf-8") == _MATRIX_YAML

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "aumos-authz" in result.output
