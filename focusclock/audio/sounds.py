"""Completion sound synthesis and playback using numpy + QSoundEffect.

The sounds are generated programmatically as WAV files and cached to
disk so later launches skip the synthesis.

Sound names
-----------
- ``beep``        — one 800 Hz tone, 200 ms, fading out
- ``completion``  — three beeps 300 ms apart, played when a timer ends

``SoundManager`` is the timer engine's notification sink.  It never
raises into the engine: anything that goes wrong is logged and replaced
by the system beep.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect
from PyQt6.QtWidgets import QApplication

from ..database.db import APP_DATA_DIR

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_DATA_DIR / "sounds"

SOUND_NAMES = ("beep", "completion")

SAMPLE_RATE = 44100

BEEP_FREQUENCY = 800.0   # Hz
BEEP_DURATION = 0.2      # seconds
BEEP_VOLUME = 0.5
BEEP_SPACING = 0.3       # seconds between beep onsets
BEEP_COUNT = 3
FADE_FLOOR = 0.001       # gain the fade-out ends on


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _exp_fade(length: int) -> np.ndarray:
    """Exponential ramp from 1.0 down to ``FADE_FLOOR``."""
    return np.geomspace(1.0, FADE_FLOOR, length)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def _beep_samples() -> np.ndarray:
    tone = _sine(BEEP_FREQUENCY, BEEP_DURATION) * BEEP_VOLUME
    return tone * _exp_fade(len(tone))


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_beep() -> bytes:
    return _to_wav_bytes(_beep_samples())


def _generate_completion() -> bytes:
    """Three beeps, each starting ``BEEP_SPACING`` after the previous one."""
    beep = _beep_samples()
    gap = np.zeros(int(SAMPLE_RATE * BEEP_SPACING) - len(beep))
    parts: list[np.ndarray] = []
    for i in range(BEEP_COUNT):
        parts.append(beep)
        if i < BEEP_COUNT - 1:
            parts.append(gap)
    # Trailing silence so QSoundEffect doesn't clip the last fade
    parts.append(np.zeros(int(SAMPLE_RATE * 0.05)))
    return _to_wav_bytes(np.concatenate(parts))


_GENERATORS: dict[str, callable] = {
    "beep": _generate_beep,
    "completion": _generate_completion,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages sound synthesis, caching, and playback.

    Usage::

        mgr = SoundManager(parent=self)
        engine = TimerEngine(notifier=mgr)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._enabled = enabled
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        try:
            self._ensure_wav_files()
        except OSError as exc:
            logger.warning("Could not write sound files to %s: %s", self._sounds_dir, exc)
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def play(self, name: str) -> bool:
        """Play a sound by name.

        Returns False when nothing could be played (disabled, unknown
        name, or the effect failed to load).
        """
        if not self._enabled:
            return False
        effect = self._effects.get(name)
        if effect is None or effect.status() == QSoundEffect.Status.Error:
            return False
        effect.play()
        return True

    def notify_completion(self) -> None:
        """Signal that a timer finished.  Falls back to the system beep."""
        if not self._enabled:
            return
        try:
            played = self.play("completion")
        except RuntimeError as exc:
            logger.warning("Completion sound failed: %s", exc)
            played = False
        if not played:
            logger.debug("Completion sound unavailable, using system beep")
            QApplication.beep()

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(1.0)  # amplitude is baked into the WAV
                self._effects[name] = effect
