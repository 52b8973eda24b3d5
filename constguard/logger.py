""" constguard.logger

This module contains the setup that keeps logging consistent across
the command line tools.
"""

import sys
from loguru import logger


log = logger


def initialize(verbose: int):
    LEVELS = ["SUCCESS", "INFO", "DEBUG", "TRACE"]

    lvl = LEVELS[min(verbose, len(LEVELS) - 1)]

    log.enable("constguard")
    log.remove()
    if verbose >= 2:
        log.add(
            sys.stderr,
            format="<green>{elapsed}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=lvl,
        )
    else:
        log.add(
            sys.stderr,
            format="<level>{level: <8}</level>: <level>{message}</level>",
            level=lvl,
        )
