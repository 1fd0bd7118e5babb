import logging
import os

LOG_FILE = "tallyterm.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"


def init_logging(data_dir: str, level: str = "") -> str:
    '''
    Log to <data_dir>/tallyterm.log. The terminal is taken over by the UI,
    so nothing goes to stderr while it runs.
    Level comes from `level`, then $TALLYTERM_LOGLEVEL, then INFO.
    '''
    os.makedirs(data_dir, exist_ok=True)
    path = os.path.join(data_dir, LOG_FILE)
    level = (level or os.environ.get("TALLYTERM_LOGLEVEL") or "INFO").upper()

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("tallyterm")
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level, logging.INFO))
    root.propagate = False
    return path
