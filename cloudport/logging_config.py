import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Chatty at DEBUG/INFO: one line per HTTP connection.
_NOISY_LOGGERS = ("urllib3", "requests")


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure the root logger with a console handler and an optional file handler.

    Args:
        level: Log level name (INFO, DEBUG, ...).
        log_dir: If provided, also log to a timestamped file in this directory.

    Returns:
        The log file path, or None when file logging is off or failed.
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    level_name = (level or "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level_name)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    # HTTP library logs are only useful when debugging request payloads.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level_name == "DEBUG" else logging.WARNING)

    if not log_dir:
        return None

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d__%H_%M_%S")
        log_file = log_dir / f"cloudport_{timestamp}.log"
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError as exc:
        root.error("File logging disabled (cannot create log file under %s): %s", str(log_dir), exc)
        return None

    root.info("Logging to file: %s", log_file)
    return log_file
