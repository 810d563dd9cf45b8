"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import datrain.core.theme as theme_module
import pytest
from datrain.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_theme,
    load_theme,
    reload_theme,
)
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.header == "#69B9A1"
        assert colors.directory == "#0e8ac8"
        assert colors.error == "#f53263"

    def test_short_hex_accepted(self) -> None:
        """#RGB colors are accepted."""
        assert ThemeColors(prompt="#abc").prompt == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(directory="0e8ac8")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(text="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(text="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for malformed TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _load_toml_colors(theme_file) is None

    def test_ignores_non_string_values(self, tmp_path: Path) -> None:
        """Only string values are kept."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nmuted = 5\n')

        assert _load_toml_colors(theme_file) == {"text": "#000000"}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_loads_bundled_theme(self, tmp_path: Path) -> None:
        """Bundled colors are used when no user theme exists."""
        with patch.object(theme_module, "get_user_theme_path", return_value=tmp_path / "none"):
            colors = load_theme()

        assert colors.directory == "#0e8ac8"
        assert colors.prompt == "#c1ff62"

    def test_user_theme_overrides_bundled(self, tmp_path: Path) -> None:
        """User theme overrides individual bundled values."""
        user = tmp_path / "theme.toml"
        user.write_text('[colors]\ndirectory = "#123456"\n')

        with patch.object(theme_module, "get_user_theme_path", return_value=user):
            colors = load_theme()

        assert colors.directory == "#123456"
        assert colors.header == "#69B9A1"

    def test_invalid_user_theme_falls_back(self, tmp_path: Path) -> None:
        """An invalid user color falls back to the defaults."""
        user = tmp_path / "theme.toml"
        user.write_text('[colors]\ndirectory = "blue"\n')

        with patch.object(theme_module, "get_user_theme_path", return_value=user):
            colors = load_theme()

        assert colors == ThemeColors()


class TestRichTheme:
    """Tests for Rich theme generation and caching."""

    def test_styles_present(self) -> None:
        """Every style the CLI uses is defined."""
        theme = get_rich_theme(ThemeColors())

        assert isinstance(theme, Theme)
        for name in ("directory", "bold_header", "muted", "error", "warning", "success"):
            assert name in theme.styles

    def test_cached_and_reloaded(self) -> None:
        """get_theme caches; reload_theme replaces the cache."""
        first = get_theme()
        assert get_theme() is first

        reloaded = reload_theme()

        assert reloaded is not first
        assert get_theme() is reloaded
