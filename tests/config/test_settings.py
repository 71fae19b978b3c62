"""Tests for ExprvalSettings — CLI flags, env vars and TOML in one object."""

from pathlib import Path

import click
import pytest

from exprval.config.settings import ExprvalSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EXPRVAL_CONFIG", "EXPRVAL_ENGINE__STRICT", "EXPRVAL_LENIENT"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.lenient is False
        assert settings.engine.strict is True
        assert settings.plugins.local_dir == ".exprval/plugins"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_sections(self, tmp_path: Path) -> None:
        (tmp_path / "exprval.toml").write_text(
            '[engine]\nstrict = false\n[plugins]\nlocal_dir = "tools/plugins"\n'
        )
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        assert settings.engine.strict is False
        assert settings.engine.metadata_key == "validate"
        assert settings.plugins.local_dir == "tools/plugins"
        assert settings.config_path == (tmp_path / "exprval.toml").resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "checks.toml"
        custom.parent.mkdir()
        custom.write_text("[plugins]\nenabled = false\n")
        settings = ExprvalSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.plugins.enabled is False
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            ExprvalSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "exprval.toml").write_text("[engine\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ExprvalSettings.from_cli(project_root=tmp_path)

    def test_project_root_follows_config(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "exprval.toml"
        custom.parent.mkdir()
        custom.write_text("")
        settings = ExprvalSettings.from_cli(config_path=str(custom))
        assert settings.project_root == custom.parent


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "exprval.toml").write_text("[engine]\nstrict = true\n")
        monkeypatch.setenv("EXPRVAL_ENGINE__STRICT", "false")
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        assert settings.engine.strict is False

    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EXPRVAL_LENIENT", "true")
        settings = ExprvalSettings.from_cli(project_root=tmp_path, lenient=False)
        assert settings.lenient is False


class TestEffectiveEngine:
    def test_strict_by_default(self, tmp_path: Path) -> None:
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        assert settings.effective_engine.strict is True

    def test_lenient_flag(self, tmp_path: Path) -> None:
        (tmp_path / "exprval.toml").write_text('[engine]\nmetadata_key = "rules"\n')
        settings = ExprvalSettings.from_cli(project_root=tmp_path, lenient=True)
        engine = settings.effective_engine
        assert engine.strict is False
        assert engine.metadata_key == "rules"
        assert settings.engine.strict is True

    def test_lenient_config(self, tmp_path: Path) -> None:
        (tmp_path / "exprval.toml").write_text("[engine]\nstrict = false\n")
        settings = ExprvalSettings.from_cli(project_root=tmp_path)
        assert settings.effective_engine.strict is False
