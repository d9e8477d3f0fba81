# -*- coding: utf-8 -*-
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "WARNING"):
    # stdout carries the plugin output, logs go to stderr
    logger.remove()
    level = (level or "WARNING").upper()
    logger.add(
        sys.stderr,
        level=level,
        backtrace=False,
        diagnose=False,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
    return logger
