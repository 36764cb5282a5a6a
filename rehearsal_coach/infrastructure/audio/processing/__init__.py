"""Level metering and the live recorder."""

# Level helpers and events have no package dependencies
from .levels import LevelSampler, stereo_to_mono, remove_dc, db_to_linear, levels_from_db
from .events import EventType, RecordingEvent, RecordingEventBus, EventLogger


# Lazy imports for the recorder (it depends on the scoring models)
def _get_recorder_attr(name):
    from . import recorder
    return getattr(recorder, name)


def __getattr__(name):
    if name in ("RehearsalRecorder", "RecordingState", "RecordingWarning", "run_metering"):
        return _get_recorder_attr(name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "LevelSampler", "stereo_to_mono", "remove_dc", "db_to_linear", "levels_from_db",
    "EventType", "RecordingEvent", "RecordingEventBus", "EventLogger",
    "RehearsalRecorder", "RecordingState", "RecordingWarning", "run_metering",
]
