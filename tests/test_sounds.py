"""Tests for completion sound synthesis and the SoundManager sink."""

from __future__ import annotations

import io
import wave

import numpy as np
import pytest
from PyQt6.QtWidgets import QApplication

from focusclock.audio.sounds import (
    SoundManager,
    SOUND_NAMES,
    SAMPLE_RATE,
    BEEP_DURATION,
    FADE_FLOOR,
    _exp_fade,
    _generate_beep,
    _generate_completion,
)


@pytest.fixture
def beeps(monkeypatch):
    """Record calls to the system beep instead of making noise."""
    calls: list[bool] = []
    monkeypatch.setattr(QApplication, "beep", staticmethod(lambda: calls.append(True)))
    return calls


# ═══════════════════════════════════════════════════════════════════════
#  SOUND SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:

    @pytest.mark.parametrize("gen_fn", [_generate_beep, _generate_completion])
    def test_wav_is_parseable(self, gen_fn):
        data = gen_fn()
        assert data[:4] == b"RIFF"
        with wave.open(io.BytesIO(data), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > 0

    def test_beep_length(self):
        with wave.open(io.BytesIO(_generate_beep()), "rb") as wf:
            assert wf.getnframes() == int(SAMPLE_RATE * BEEP_DURATION)

    def test_completion_holds_three_beeps(self):
        with wave.open(io.BytesIO(_generate_completion()), "rb") as wf:
            # three onsets 300 ms apart plus the last 200 ms beep
            assert wf.getnframes() >= int(SAMPLE_RATE * 0.8)

    def test_fade_is_exponential(self):
        fade = _exp_fade(100)
        assert fade[0] == pytest.approx(1.0)
        assert fade[-1] == pytest.approx(FADE_FLOOR)
        ratios = fade[1:] / fade[:-1]
        assert np.allclose(ratios, ratios[0])


# ═══════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSoundManager:

    def test_wav_files_generated(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            path = tmp_path / f"{name}.wav"
            assert path.exists(), f"Missing WAV: {name}"
            assert path.stat().st_size > 100

    def test_existing_files_kept(self, tmp_path):
        path = tmp_path / "beep.wav"
        path.write_bytes(_generate_beep())
        before = path.stat().st_mtime_ns
        SoundManager(parent=None, sounds_dir=tmp_path)
        assert path.stat().st_mtime_ns == before

    def test_all_sounds_loaded(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            assert name in mgr._effects

    def test_set_enabled(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert mgr.enabled is True
        mgr.set_enabled(False)
        assert mgr.enabled is False

    def test_play_unknown_name(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert mgr.play("nonexistent_sound") is False

    def test_play_while_disabled(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path, enabled=False)
        assert mgr.play("beep") is False

    def test_disabled_notify_is_silent(self, tmp_path, beeps):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path, enabled=False)
        mgr.notify_completion()
        assert beeps == []

    def test_missing_effect_falls_back_to_system_beep(self, tmp_path, beeps):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr._effects.clear()
        mgr.notify_completion()
        assert beeps == [True]

    def test_unwritable_dir_falls_back(self, tmp_path, beeps):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        mgr = SoundManager(parent=None, sounds_dir=blocker / "sounds")
        assert mgr._effects == {}
        mgr.notify_completion()
        assert beeps == [True]

    def test_notify_never_raises(self, tmp_path, beeps):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.notify_completion()
