"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from marknote.config import Settings, load_settings
from marknote.errors import IoFailure


class TestSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        s = Settings(root=tmp_path)
        assert s.notes_dir == tmp_path / "notes"
        assert s.daily_dir == tmp_path / "notes" / "daily-notes"
        assert s.tasks_path == tmp_path / "tasks.json"
        assert s.log_path == tmp_path / "marknote.log"
        assert s.watch.enabled is True
        assert s.ui.tick_seconds == 1.0

    def test_home_is_expanded(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert Settings(root=Path("~/mn")).root == tmp_path / "mn"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("MARKNOTE_ROOT", str(tmp_path / "env-root"))
        monkeypatch.setenv("MARKNOTE_WATCH__DEBOUNCE_MS", "500")
        s = Settings()
        assert s.root == tmp_path / "env-root"
        assert s.watch.debounce_ms == 500

    def test_toml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "marknote.toml"
        config.write_text(
            f'root = "{tmp_path.as_posix()}/toml-root"\n'
            'daily_folder = "journal"\n'
            "[watch]\nenabled = false\n"
        )
        s = load_settings(config)
        assert s.root == tmp_path / "toml-root"
        assert s.daily_dir == tmp_path / "toml-root" / "notes" / "journal"
        assert s.watch.enabled is False

    def test_explicit_root_beats_toml(self, tmp_path: Path) -> None:
        config = tmp_path / "marknote.toml"
        config.write_text('root = "/somewhere/else"\n')
        assert load_settings(config, root=tmp_path).root == tmp_path

    def test_ensure_layout(self, tmp_path: Path) -> None:
        s = Settings(root=tmp_path / "fresh")
        s.ensure_layout()
        assert s.daily_dir.is_dir()

    def test_ensure_layout_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(IoFailure):
            Settings(root=blocker).ensure_layout()
