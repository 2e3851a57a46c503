import io
import os
import signal
import sys
import threading
from typing import Sequence

import requests

from httping.config import ConfigError, Settings, parse_args
from httping.csv_writer import CsvWriter, OutputError
from httping.logging_config import setup_logging
from httping.prober import Prober


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    try:
        settings = Settings()
        logger = setup_logging("httping", settings)
        config = parse_args(args)
    except ConfigError as e:
        print(e)
        return 1

    cancel = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    session = requests.Session()
    writer = CsvWriter(sys.stdout)

    try:
        writer.write_header()
        for sample in Prober(session).start(config.url, config.frequency, cancel):
            writer.write_sample(sample)
    except OutputError as e:
        logger.error(f"output stream failed: {e}")
        cancel.set()
        _discard_stdout()
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        session.close()

    print()
    logger.info("probing interrupted by the user")
    return 0


def _discard_stdout() -> None:
    """Points the stdout descriptor at devnull so the shutdown flush of a broken pipe cannot fail."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


if __name__ == "__main__":
    sys.exit(main())
