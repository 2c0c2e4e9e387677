"""Tests for the shell configuration."""

import dataclasses

import pytest

from myshell.config import ShellConfig


class TestShellConfig:
    """Verify defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults match a 256-byte line buffer and 0755 directories."""
        config = ShellConfig()
        assert config.name == "myshell"
        assert config.max_line_length == 255
        assert config.chunk_size == 256
        assert config.dir_mode == 0o755
        assert config.color is True

    def test_frozen(self) -> None:
        """Settings cannot change after construction."""
        config = ShellConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.color = False  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["max_line_length", "chunk_size"])
    def test_sizes_must_be_positive(self, field: str) -> None:
        """Zero-sized buffers are rejected."""
        with pytest.raises(ValueError, match=field):
            ShellConfig(**{field: 0})

    def test_mode_range(self) -> None:
        """Modes beyond 0o7777 are rejected."""
        with pytest.raises(ValueError, match="dir_mode"):
            ShellConfig(dir_mode=0o10000)
