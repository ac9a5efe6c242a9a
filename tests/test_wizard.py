"""Setup wizard tests, driven by scripted answers."""

import pytest

from conftest import build_save

from deathcounter.config import load_config
from deathcounter.wizard import format_profiles, run_setup_wizard
from deathcounter.save.decoder import parse_save_data


def _answers(*values):
    """input() replacement returning the scripted answers, then EOF."""
    it = iter(values)

    def _input(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return _input


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "out" / "config.json"


@pytest.fixture(autouse=True)
def _out_dir(config_path):
    config_path.parent.mkdir()


class TestWizardHappyPath:
    """Auto-detected save, valid choices."""

    def test_web_overlay_with_custom_port(self, save_file, config_path, capsys):
        save_dir = save_file.parent.parent
        ok = run_setup_wizard(config_path, _answers("7", "abc", "2", "", "9000"), save_dir=save_dir)
        assert ok is True

        config = load_config(config_path)
        assert config.character_slot == 2
        assert config.enable_web_ui is True
        assert config.enable_text_file is False
        assert config.web_port == 9000
        assert config.save_path == str(save_file.resolve())

        out = capsys.readouterr().out
        assert "Slot 2: Tarnished (Level 45" in out
        assert "Slot 7 not found" in out
        assert "Invalid input" in out

    def test_disabling_web_enables_text_file(self, save_file, config_path):
        ok = run_setup_wizard(config_path, _answers("2", "n"), save_dir=save_file.parent.parent)
        assert ok is True
        config = load_config(config_path)
        assert config.enable_web_ui is False
        assert config.enable_text_file is True
        assert config.web_port == 8080

    def test_invalid_port_falls_back(self, save_file, config_path):
        ok = run_setup_wizard(config_path, _answers("2", "y", "70000"), save_dir=save_file.parent.parent)
        assert ok is True
        assert load_config(config_path).web_port == 8080

    def test_manual_path_when_not_detected(self, save_file, config_path, tmp_path):
        ok = run_setup_wizard(
            config_path,
            _answers(str(save_file), "2", "Y", ""),
            save_dir=tmp_path / "missing",
        )
        assert ok is True
        assert load_config(config_path).save_path == str(save_file.resolve())


class TestWizardAborts:
    """Setup returns False and writes nothing."""

    def test_manual_path_does_not_exist(self, config_path, tmp_path):
        ok = run_setup_wizard(config_path, _answers(str(tmp_path / "nope.sl2")), save_dir=tmp_path / "missing")
        assert ok is False
        assert not config_path.exists()

    def test_no_characters(self, tmp_path, config_path):
        account = tmp_path / "EldenRing" / "acct"
        account.mkdir(parents=True)
        (account / "ER0000.sl2").write_bytes(build_save())
        ok = run_setup_wizard(config_path, _answers(), save_dir=tmp_path / "EldenRing")
        assert ok is False
        assert not config_path.exists()

    def test_eof_during_slot_prompt(self, save_file, config_path):
        ok = run_setup_wizard(config_path, _answers("5"), save_dir=save_file.parent.parent)
        assert ok is False
        assert not config_path.exists()


def test_format_profiles(two_character_save):
    text = format_profiles(parse_save_data(two_character_save))
    assert text.splitlines() == [
        "Slot 0: Melina (Level 12, 0:15:00 played, 7 deaths)",
        "Slot 3: Ranni (Level 150, 100:00:00 played, 412 deaths)",
    ]
