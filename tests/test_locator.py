"""Save file locator tests."""

from pathlib import Path

import pytest

from deathcounter.config import Config
from deathcounter.errors import SaveNotFoundError
from deathcounter.save.locator import default_save_dir, find_save_file, resolve_save_path


class TestConfiguredPath:
    """save_path in the config wins but must exist."""

    def test_existing_path(self, save_file):
        assert resolve_save_path(Config(save_path=str(save_file))) == str(save_file.resolve())

    def test_missing_path(self, tmp_path):
        with pytest.raises(SaveNotFoundError):
            resolve_save_path(Config(save_path=str(tmp_path / "ER0000.sl2")))

    def test_directory_is_not_a_save(self, tmp_path):
        with pytest.raises(SaveNotFoundError):
            resolve_save_path(Config(save_path=str(tmp_path)))


class TestProbe:
    """Probing <base>/<account>/ER0000.sl2."""

    def test_finds_save_in_account_dir(self, save_file):
        base = save_file.parent.parent
        assert resolve_save_path(None, base_dir=base) == str(save_file.resolve())

    def test_first_sorted_account_wins(self, tmp_path):
        for account in ("b_account", "a_account"):
            (tmp_path / account).mkdir()
            (tmp_path / account / "ER0000.sl2").write_bytes(b"x")
        assert find_save_file(tmp_path) == tmp_path / "a_account" / "ER0000.sl2"

    def test_skips_dirs_without_save_and_plain_files(self, tmp_path):
        (tmp_path / "ER0000.sl2").write_bytes(b"x")
        (tmp_path / "empty").mkdir()
        (tmp_path / "real").mkdir()
        (tmp_path / "real" / "ER0000.sl2").write_bytes(b"x")
        assert find_save_file(tmp_path) == tmp_path / "real" / "ER0000.sl2"

    def test_missing_base_dir(self, tmp_path):
        with pytest.raises(SaveNotFoundError):
            resolve_save_path(None, base_dir=tmp_path / "EldenRing")

    def test_no_save_anywhere(self, tmp_path):
        (tmp_path / "account").mkdir()
        with pytest.raises(SaveNotFoundError):
            resolve_save_path(Config(), base_dir=tmp_path)


class TestDefaultDir:
    """%APPDATA% based default."""

    def test_uses_appdata(self, monkeypatch, tmp_path):
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert default_save_dir() == tmp_path / "EldenRing"

    def test_falls_back_to_home(self, monkeypatch):
        monkeypatch.delenv("APPDATA", raising=False)
        assert default_save_dir() == Path.home() / "AppData" / "Roaming" / "EldenRing"

    def test_resolve_probes_default(self, monkeypatch, save_file):
        monkeypatch.setenv("APPDATA", str(save_file.parent.parent.parent))
        assert resolve_save_path(Config()) == str(save_file.resolve())
