import logging
import sys

from ..config import load_settings


def get_logger():
    logger = logging.getLogger("sshcreds")
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(message)s")
        h.setFormatter(fmt)
        logger.addHandler(h)
        logger.setLevel(getattr(logging, load_settings().log_level, logging.INFO))
    return logger
