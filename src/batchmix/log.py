# batchmix/log.py
from __future__ import annotations

import logging

LOGGER_NAME = "batchmix"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: int = logging.INFO) -> None:
    # same line shape as the simulator consoles: [HH:MM:SS] msg
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(message)s", datefmt="%H:%M:%S"))

    root = logging.getLogger(LOGGER_NAME)
    root.handlers[:] = [handler]
    root.setLevel(level)


def log(msg: str, level: int = logging.INFO) -> None:
    logger.log(level, msg)
