"""End-to-end tests for the cluster subcommands through ``main``.

State lives in ``tmp_path``; provider plugins are replaced at the
``load_provider`` seam and the editor at ``open_in_editor``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from kubicorn.cli import exit_codes
from kubicorn.cli.app import cli, main
from kubicorn.exceptions import (
    ClusterExistsError,
    ClusterNotFoundError,
    ConfigUnavailableError,
    ProviderUnavailableError,
    StateError,
    UsageError,
)


@pytest.fixture()
def provider(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock()
    mock.apply.side_effect = lambda cluster: cluster
    mock.adopt.side_effect = lambda cluster: cluster
    factory = MagicMock(return_value=mock)
    monkeypatch.setattr("kubicorn.cli.commands._common.load_provider", factory)
    mock.factory = factory
    return mock


def _state(state_dir: Path, name: str) -> dict:
    return yaml.safe_load((state_dir / f"{name}.yaml").read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# create / list / get-config / image
# ---------------------------------------------------------------------------

class TestCreate:
    def test_create_default_profile(self, env: dict[str, str], state_dir: Path) -> None:
        assert main(["create", "alpha"], environ=env) == exit_codes.SUCCESS
        state = _state(state_dir, "alpha")
        assert state["cloud"] == "amazon"
        assert state["applied"] is False

    def test_create_with_profile_shorthand(self, env: dict[str, str], state_dir: Path) -> None:
        main(["create", "-p", "do", "beta"], environ=env)
        assert _state(state_dir, "beta")["cloud"] == "digitalocean"

    def test_profile_from_environment(self, env: dict[str, str], state_dir: Path) -> None:
        env["KUBICORN_PROFILE"] = "digitalocean"
        main(["create", "gamma"], environ=env)
        assert _state(state_dir, "gamma")["location"] == "sfo2"

    def test_state_store_flag(self, env: dict[str, str], tmp_path: Path) -> None:
        other = tmp_path / "elsewhere"
        main(["-S", str(other), "create", "alpha"], environ=env)
        assert (other / "alpha.yaml").is_file()

    def test_create_twice(self, env: dict[str, str]) -> None:
        main(["create", "alpha"], environ=env)
        with pytest.raises(ClusterExistsError):
            main(["create", "alpha"], environ=env)

    def test_unknown_profile(self, env: dict[str, str]) -> None:
        with pytest.raises(UsageError, match="gcp"):
            main(["create", "--profile", "gcp", "alpha"], environ=env)

    def test_broken_config_exits_with_config_code(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[[str], Path],
        state_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("KUBICORN_CONFIG_FILE", str(write_config("verbose: [\n")))
        monkeypatch.setenv("KUBICORN_STATE_STORE_PATH", str(state_dir))
        with pytest.raises(SystemExit) as exc_info:
            cli(["create", "alpha"])
        assert exc_info.value.code == exit_codes.CONFIG_ERROR
        assert "Configuration unavailable" in capsys.readouterr().err
        assert not state_dir.exists()

    def test_broken_config_raises_typed_error(
        self, env: dict[str, str], write_config: Callable[[str], Path]
    ) -> None:
        with pytest.raises(ConfigUnavailableError):
            main(["create", "alpha"], environ=env, config_path=write_config("- a\n"))


class TestList:
    def test_empty_with_header(
        self, env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["list"], environ=env)
        assert capsys.readouterr().out == "NAME\n"

    def test_no_headers(self, env: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
        main(["create", "beta"], environ=env)
        main(["create", "alpha"], environ=env)
        capsys.readouterr()
        main(["list", "--no-headers"], environ=env)
        assert capsys.readouterr().out == "alpha\nbeta\n"

    def test_no_headers_shorthand(
        self, env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["create", "alpha"], environ=env)
        capsys.readouterr()
        main(["list", "-n"], environ=env)
        assert capsys.readouterr().out == "alpha\n"

    def test_no_headers_from_environment(
        self, env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        env["KUBICORN_NO_HEADERS"] = "true"
        main(["list"], environ=env)
        assert capsys.readouterr().out == ""

    def test_empty_environment_variable_is_unset(
        self, env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        env["KUBICORN_VERBOSE"] = ""
        env["KUBICORN_NO_HEADERS"] = ""
        assert main(["list"], environ=env) == exit_codes.SUCCESS
        assert capsys.readouterr().out == "NAME\n"


class TestGetConfigAndImage:
    def test_get_config_prints_yaml(
        self, env: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["create", "alpha"], environ=env)
        capsys.readouterr()
        main(["get-config", "alpha"], environ=env)
        document = yaml.safe_load(capsys.readouterr().out)
        assert document["name"] == "alpha"
        assert len(document["serverPools"]) == 2

    def test_get_config_unknown(self, env: dict[str, str]) -> None:
        with pytest.raises(ClusterNotFoundError):
            main(["get-config", "ghost"], environ=env)

    def test_image(self, env: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
        main(["create", "alpha"], environ=env)
        capsys.readouterr()
        main(["image", "alpha"], environ=env)
        assert capsys.readouterr().out == "ami-835b4efa\n"


# ---------------------------------------------------------------------------
# apply / adopt / delete (provider plugins)
# ---------------------------------------------------------------------------

class TestProviderCommands:
    def test_apply(self, env: dict[str, str], state_dir: Path, provider: MagicMock) -> None:
        main(["create", "alpha"], environ=env)
        assert main(["apply", "alpha"], environ=env) == exit_codes.SUCCESS
        provider.factory.assert_called_once_with("amazon")
        provider.apply.assert_called_once()
        assert _state(state_dir, "alpha")["applied"] is True

    def test_adopt(self, env: dict[str, str], state_dir: Path, provider: MagicMock) -> None:
        main(["create", "alpha"], environ=env)
        main(["adopt", "alpha"], environ=env)
        provider.adopt.assert_called_once()
        assert _state(state_dir, "alpha")["applied"] is True

    def test_delete(self, env: dict[str, str], state_dir: Path, provider: MagicMock) -> None:
        main(["create", "alpha"], environ=env)
        main(["delete", "alpha"], environ=env)
        provider.destroy.assert_called_once()
        assert not (state_dir / "alpha.yaml").exists()

    def test_delete_purge(
        self, env: dict[str, str], state_dir: Path, provider: MagicMock
    ) -> None:
        main(["create", "alpha"], environ=env)
        main(["delete", "--purge", "alpha"], environ=env)
        provider.factory.assert_not_called()
        assert not (state_dir / "alpha.yaml").exists()

    def test_missing_plugin(self, env: dict[str, str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "kubicorn.cli.commands._common.load_provider",
            MagicMock(side_effect=ProviderUnavailableError("no plugin")),
        )
        main(["create", "alpha"], environ=env)
        with pytest.raises(ProviderUnavailableError):
            main(["apply", "alpha"], environ=env)


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------

class TestEdit:
    def test_opens_state_file(
        self, env: dict[str, str], state_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        editor = MagicMock()
        monkeypatch.setattr("kubicorn.cli.commands.edit.open_in_editor", editor)
        main(["create", "alpha"], environ=env)
        assert main(["edit", "alpha"], environ=env) == exit_codes.SUCCESS
        path, environ = editor.call_args.args
        assert path == state_dir / "alpha.yaml"
        assert environ == env

    def test_invalid_edit_is_reported(
        self, env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def break_file(path: Path, environ: object) -> None:
            path.write_text("name: alpha\n", encoding="utf-8")

        monkeypatch.setattr("kubicorn.cli.commands.edit.open_in_editor", break_file)
        main(["create", "alpha"], environ=env)
        with pytest.raises(StateError, match="Malformed"):
            main(["edit", "alpha"], environ=env)

    def test_unknown_cluster_does_not_open_editor(
        self, env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        editor = MagicMock()
        monkeypatch.setattr("kubicorn.cli.commands.edit.open_in_editor", editor)
        with pytest.raises(ClusterNotFoundError):
            main(["edit", "ghost"], environ=env)
        editor.assert_not_called()


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------

class TestVersionCommand:
    def test_version(self, env: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["version"], environ=env) == exit_codes.SUCCESS
        assert capsys.readouterr().out.startswith("kubicorn ")

    def test_version_with_broken_config(
        self,
        env: dict[str, str],
        write_config: Callable[[str], Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = write_config("verbose: [\n")
        assert main(["version"], environ=env, config_path=path) == exit_codes.SUCCESS
        assert "kubicorn" in capsys.readouterr().out

    def test_version_rejects_arguments(self, env: dict[str, str]) -> None:
        with pytest.raises(UsageError):
            main(["version", "now"], environ=env)


# ---------------------------------------------------------------------------
# prompt
# ---------------------------------------------------------------------------

class TestPrompt:
    @pytest.fixture()
    def questionary(self, monkeypatch: pytest.MonkeyPatch) -> MagicMock:
        mock = MagicMock()
        monkeypatch.setattr(
            "kubicorn.cli.commands.prompt._import_questionary", lambda: mock,
        )
        return mock

    def test_offers_every_other_command(
        self, env: dict[str, str], questionary: MagicMock
    ) -> None:
        questionary.select.return_value.ask.return_value = None
        main(["prompt"], environ=env)
        offered = [call.kwargs["value"] for call in questionary.Choice.call_args_list]
        assert offered == [
            "adopt", "apply", "completion", "create", "delete",
            "edit", "get-config", "image", "list", "version",
        ]

    def test_runs_selected_command(
        self,
        env: dict[str, str],
        questionary: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["create", "alpha"], environ=env)
        capsys.readouterr()
        questionary.select.return_value.ask.return_value = "list"
        questionary.text.return_value.ask.return_value = "--no-headers"
        assert main(["prompt"], environ=env) == exit_codes.SUCCESS
        assert capsys.readouterr().out == "alpha\n"

    def test_flags_typed_at_prompt_apply(
        self, env: dict[str, str], state_dir: Path, questionary: MagicMock
    ) -> None:
        questionary.select.return_value.ask.return_value = "create"
        questionary.text.return_value.ask.return_value = "beta --profile do"
        main(["prompt"], environ=env)
        assert _state(state_dir, "beta")["cloud"] == "digitalocean"

    def test_purge_typed_at_prompt_skips_provider(
        self,
        env: dict[str, str],
        state_dir: Path,
        questionary: MagicMock,
        provider: MagicMock,
    ) -> None:
        main(["create", "alpha"], environ=env)
        questionary.select.return_value.ask.return_value = "delete"
        questionary.text.return_value.ask.return_value = "alpha --purge"
        main(["prompt"], environ=env)
        provider.factory.assert_not_called()
        assert not (state_dir / "alpha.yaml").exists()

    def test_cancelled_arguments(self, env: dict[str, str], questionary: MagicMock) -> None:
        questionary.select.return_value.ask.return_value = "version"
        questionary.text.return_value.ask.return_value = None
        assert main(["prompt"], environ=env) == exit_codes.SUCCESS

    def test_unparseable_arguments(self, env: dict[str, str], questionary: MagicMock) -> None:
        questionary.select.return_value.ask.return_value = "create"
        questionary.text.return_value.ask.return_value = "'unterminated"
        with pytest.raises(UsageError, match="Cannot parse"):
            main(["prompt"], environ=env)
