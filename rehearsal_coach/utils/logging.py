"""
Logging utilities for the rehearsal scoring engine.

Scoring modules log to named loggers ("audio_metrics", "feedback_engine",
"rehearsal_recorder", ...). The CLI routes all of them to one session log.
"""
import os
import logging

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s - %(message)s'


def _level(name: str, default: int) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


def setup_logging(log_file_path: str, level: str = "DEBUG", console_level: str = "CRITICAL",
                  append: bool = False) -> str:
    """
    Route scoring logs to a file, keeping the console quiet.

    Args:
        log_file_path: Full path to the log file; parent directories are created
        level: Level name for the file handler (DEBUG, INFO, ...)
        console_level: Level name for stderr output
        append: Keep earlier sessions in the file instead of truncating it

    Returns:
        Path to the log file
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file_path, mode='a' if append else 'w', encoding='utf-8')
    file_handler.setLevel(_level(level, logging.DEBUG))
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Critical messages only unless asked otherwise
    console_handler = logging.StreamHandler()
    console_handler.setLevel(_level(console_level, logging.CRITICAL))
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger("rehearsal_coach").debug("Logging to %s at %s", log_file_path, level.upper())
    return log_file_path
