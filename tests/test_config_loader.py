"""Tests for the lint configuration loader."""

from pathlib import Path

from nestlint.config_loader import LintConfig, load_config


def _write_config(root: Path, content: str) -> None:
    config_dir = root / ".nestlint"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.toml").write_text(content)


class TestLoadConfig:
    """Test config file discovery and merging."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Without config files the defaults apply."""
        config = load_config(tmp_path / "work", home_dir=tmp_path / "home")

        assert config == LintConfig()
        assert config.strict is False
        assert config.output_format == "text"
        assert "Nestfile" in config.file_names
        assert config.file_patterns == ["*.nest"]

    def test_local_overrides_global(self, tmp_path: Path) -> None:
        """Local settings win over global ones."""
        home = tmp_path / "home"
        work = tmp_path / "work"
        _write_config(home, 'strict = true\noutput_format = "json"\n')
        _write_config(work, 'output_format = "text"\n')

        config = load_config(work, home_dir=home)

        assert config.strict is True
        assert config.output_format == "text"

    def test_invalid_toml_is_ignored(self, tmp_path: Path) -> None:
        """A file that is not TOML is skipped."""
        work = tmp_path / "work"
        _write_config(work, "strict = \n")

        assert load_config(work, home_dir=tmp_path / "home") == LintConfig()

    def test_invalid_value_is_ignored(self, tmp_path: Path) -> None:
        """A file with invalid values is skipped as a whole."""
        home = tmp_path / "home"
        work = tmp_path / "work"
        _write_config(home, "strict = true\n")
        _write_config(work, 'strict = false\noutput_format = "xml"\n')

        config = load_config(work, home_dir=home)

        assert config.strict is True
        assert config.output_format == "text"

    def test_custom_file_names(self, tmp_path: Path) -> None:
        """Recognized file names can be configured."""
        work = tmp_path / "work"
        _write_config(work, 'file_names = ["tasks"]\nfile_patterns = []\n')

        config = load_config(work, home_dir=tmp_path / "home")

        assert config.file_names == ["tasks"]
        assert config.file_patterns == []
