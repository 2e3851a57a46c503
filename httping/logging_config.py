import logging
import sys

from httping.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(name: str, settings: Settings) -> logging.Logger:
    """
    Installs the stderr handler (plus a file handler when HTTPING_LOG_FILE is set) on the root
    logger once, so the prober thread and the CLI share them. stdout is reserved for CSV rows.
    """
    root = logging.getLogger()
    if not root.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if settings.log_file is not None:
            handlers.append(logging.FileHandler(settings.log_file, mode="a"))

        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)

    root.setLevel(settings.level)

    return logging.getLogger(name)
