"""
Rehearsal Coach Configuration System
====================================

This file contains ALL configuration for the rehearsal scoring engine.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass


# =============================================================================
# USER SETTINGS - Edit these to customize scoring behavior
# =============================================================================

# Coaching style: gentle, direct, executive
COACH_TONE = "gentle"

# Transcript-driven scoring (set False for audio-only scoring)
TRANSCRIPTION_ENABLED = True

# Personalization: number of recent sessions averaged into a baseline
BASELINE_SESSION_COUNT = 5

# Logging
LOG_FILE = "./_sessions/rehearsal.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Metering (10 Hz level sampling)
METERING_INTERVAL = 0.1
MAX_RECORDING_DURATION = 360.0
WAVEFORM_SAMPLE_COUNT = 50

# Silence detection
DEFAULT_NOISE_FLOOR = 0.01
SPIKE_STD_DEV_MULTIPLIER = 2.0

# Live quality warnings
TOO_QUIET_THRESHOLD = 0.02
TOO_LOUD_THRESHOLD = 0.95
NOISY_ENVIRONMENT_THRESHOLD = 0.05
WARNING_CHECK_WINDOW_SIZE = 10
NOISE_FLOOR_CALIBRATION_DURATION = 0.3
NOISE_FLOOR_CALIBRATION_SAMPLES = 3
NOISE_FLOOR_MARGIN = 0.005

# Transcript pause buckets (seconds)
PAUSE_THRESHOLD_SECONDS = 0.3
SHORT_PAUSE_UPPER_BOUND = 1.0
MEDIUM_PAUSE_UPPER_BOUND = 2.0

# Baseline personalization bounds
BASELINE_PACING_SHIFT_FACTOR = 0.25
BASELINE_SLOW_FLOOR = 6.0
BASELINE_FAST_CEILING = 60.0
BASELINE_LEVEL_FACTOR = 0.6
BASELINE_LEVEL_FLOOR = 0.05
BASELINE_SILENCE_MARGIN = 0.1
BASELINE_SILENCE_CEILING = 0.7

VALID_COACH_TONES = ("gentle", "direct", "executive")


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    coach_tone: str = COACH_TONE
    transcription_enabled: bool = TRANSCRIPTION_ENABLED
    baseline_session_count: int = BASELINE_SESSION_COUNT
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_config() -> Config:
    """Load configuration, letting environment variables override defaults."""
    coach_tone = (os.getenv("REHEARSAL_COACH_COACH_TONE") or COACH_TONE).strip().lower()
    if coach_tone not in VALID_COACH_TONES:
        raise ValueError(
            f"Unknown coach tone '{coach_tone}'. Use one of: {', '.join(VALID_COACH_TONES)}"
        )

    raw_count = os.getenv("REHEARSAL_COACH_BASELINE_SESSIONS")
    try:
        baseline_count = int(raw_count) if raw_count else BASELINE_SESSION_COUNT
    except ValueError:
        raise ValueError(f"REHEARSAL_COACH_BASELINE_SESSIONS must be an integer, got '{raw_count}'")
    if baseline_count < 1:
        raise ValueError("REHEARSAL_COACH_BASELINE_SESSIONS must be at least 1")

    return Config(
        coach_tone=coach_tone,
        transcription_enabled=_env_flag("REHEARSAL_COACH_TRANSCRIPTION_ENABLED", TRANSCRIPTION_ENABLED),
        baseline_session_count=baseline_count,
        log_file=os.getenv("REHEARSAL_COACH_LOG_FILE") or LOG_FILE,
        log_level=(os.getenv("REHEARSAL_COACH_LOG_LEVEL") or LOG_LEVEL).upper(),
    )
