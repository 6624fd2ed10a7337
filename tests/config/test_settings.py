"""Tests for LauncherSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from rethbuild.config.settings import LauncherSettings


class TestLauncherSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.base_dir == tmp_path.resolve()
        assert settings.image == "build-reth:dev"
        assert settings.volume == "build-reth_target_dir"
        assert settings.docker == "docker"
        assert settings.runner.command == "in-docker"
        assert settings.runner.name == "build-reth"
        assert settings.layout.target == "reth"
        assert settings.layout.readonly == ["alloy"]
        assert settings.dry_run is False
        assert settings.config_path is None

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        with pytest.raises(Exception):
            settings.image = "other"  # type: ignore[misc]

    def test_base_dir_defaults_to_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        settings = LauncherSettings.from_cli()
        assert settings.base_dir == tmp_path.resolve()


class TestEnvVars:
    def test_builder_image(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUILDER_IMAGE", "foo")
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.image == "foo"

    def test_all_three_used_verbatim(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUILDER_IMAGE", "registry.local:5000/Build Reth:v1")
        monkeypatch.setenv("TARGET_DIR_VOLUME", "my_target")
        monkeypatch.setenv("DOCKER", "/opt/podman/bin/podman")
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.image == "registry.local:5000/Build Reth:v1"
        assert settings.volume == "my_target"
        assert settings.docker == "/opt/podman/bin/podman"

    def test_empty_value_falls_back_to_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUILDER_IMAGE", "")
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.image == "build-reth:dev"

    def test_prefixed_base_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        launcher = tmp_path / "reth" / ".dev"
        launcher.mkdir(parents=True)
        monkeypatch.setenv("RETH_BUILD_BASE_DIR", str(launcher))
        monkeypatch.chdir(tmp_path)
        settings = LauncherSettings.from_cli()
        assert settings.base_dir == launcher.resolve()

    def test_nested_env_var_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RETH_BUILD_RUNNER__NAME", "build-reth-2")
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.runner.name == "build-reth-2"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "reth-build.toml"
        toml.write_text(
            'image = "from-toml:1"\n[layout]\nreadonly = ["alloy", "revm"]\n',
            encoding="utf-8",
        )
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.image == "from-toml:1"
        assert settings.layout.readonly == ["alloy", "revm"]
        assert settings.volume == "build-reth_target_dir"  # default preserved
        assert settings.config_path == toml

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "reth-build.toml").write_text('docker = "podman"\n', encoding="utf-8")
        monkeypatch.setenv("DOCKER", "nerdctl")
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.docker == "nerdctl"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "launch.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('volume = "custom_target"\n', encoding="utf-8")
        settings = LauncherSettings.from_cli(config_path=str(custom), base_dir=tmp_path)
        assert settings.volume == "custom_target"
        assert settings.config_path == custom

    def test_base_dir_from_toml_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """When no explicit base dir, use the parent of the discovered TOML."""
        launcher = tmp_path / "reth" / ".dev"
        nested = launcher / "cargo-git"
        nested.mkdir(parents=True)
        (launcher / "reth-build.toml").write_text("", encoding="utf-8")
        monkeypatch.chdir(nested)
        settings = LauncherSettings.from_cli()
        assert settings.base_dir == launcher.resolve()

    def test_invalid_toml_is_click_error(self, tmp_path: Path) -> None:
        (tmp_path / "reth-build.toml").write_text("image = \n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            LauncherSettings.from_cli(base_dir=tmp_path)


class TestCliFlags:
    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUILDER_IMAGE", "from-env")
        settings = LauncherSettings.from_cli(base_dir=tmp_path, image="from-flag")
        assert settings.image == "from-flag"

    def test_none_flags_are_unset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TARGET_DIR_VOLUME", "from-env")
        settings = LauncherSettings.from_cli(base_dir=tmp_path, volume=None, docker=None)
        assert settings.volume == "from-env"
        assert settings.docker == "docker"

    def test_output_flags(self, tmp_path: Path) -> None:
        settings = LauncherSettings.from_cli(
            base_dir=tmp_path, json_output=True, quiet=True, dry_run=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.dry_run is True


class TestBaseDirResolution:
    def test_relative_base_dir_is_absolute(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "reth" / ".dev").mkdir(parents=True)
        monkeypatch.chdir(tmp_path / "reth")
        settings = LauncherSettings.from_cli(base_dir=".dev")
        assert settings.base_dir == (tmp_path / "reth" / ".dev").resolve()

    def test_file_base_dir_uses_containing_directory(self, tmp_path: Path) -> None:
        script = tmp_path / "run.sh"
        script.write_text("#!/bin/sh\n", encoding="utf-8")
        settings = LauncherSettings.from_cli(base_dir=script)
        assert settings.base_dir == tmp_path.resolve()


class TestLauncherDirDiscovery:
    @pytest.fixture
    def checkout(self, tmp_path: Path) -> Path:
        """A reth checkout with its own root Dockerfile and the launcher in .dev."""
        checkout = tmp_path / "projects" / "reth"
        (checkout / ".dev").mkdir(parents=True)
        (checkout / "Dockerfile").write_text("FROM scratch\n", encoding="utf-8")
        (checkout / ".dev" / "Dockerfile").write_text("FROM rust:latest\n", encoding="utf-8")
        return checkout

    def test_found_from_checkout_root(
        self, checkout: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(checkout)
        settings = LauncherSettings.from_cli()
        assert settings.base_dir == (checkout / ".dev").resolve()
        assert settings.config_path is None

    def test_env_base_dir_beats_discovery(
        self, checkout: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        other = tmp_path / "other"
        other.mkdir()
        monkeypatch.setenv("RETH_BUILD_BASE_DIR", str(other))
        monkeypatch.chdir(checkout)
        settings = LauncherSettings.from_cli()
        assert settings.base_dir == other.resolve()

    def test_flag_beats_discovery(
        self, checkout: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(checkout)
        settings = LauncherSettings.from_cli(base_dir=tmp_path)
        assert settings.base_dir == tmp_path.resolve()


class TestInvalidValues:
    def test_absolute_target_from_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RETH_BUILD_LAYOUT__TARGET", "/abs")
        with pytest.raises(click.ClickException, match="Invalid configuration"):
            LauncherSettings.from_cli(base_dir=tmp_path)

    def test_empty_target_subdir_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "reth-build.toml").write_text(
            '[layout]\ntarget_subdir = ""\n', encoding="utf-8"
        )
        with pytest.raises(click.ClickException, match="Invalid configuration"):
            LauncherSettings.from_cli(base_dir=tmp_path)
