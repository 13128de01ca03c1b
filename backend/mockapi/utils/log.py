import logging
import sys

from mockapi.config import settings


def get_logger(name: str, tag: str) -> logging.Logger:
    """
    Named logger writing `[TAG] message` lines to stdout.
    Handlers are attached once per name, so repeated imports don't duplicate output.
    """
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{tag}] %(message)s"))
        log.addHandler(h)
    return log
