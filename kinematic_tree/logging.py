"""logging.py - Package Logging Helpers"""
from __future__ import annotations

import logging
import os

__all__ = ['setup_logging', 'get_logger']

LOG_LEVEL_ENV = 'KINEMATIC_TREE_LOG_LEVEL'
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'

def setup_logging(level: str | int | None = None) -> None:
    """Opt-in logging setup for scripts and configuration files

    The root logger gets a basic stream handler only if it has none, so an
    application's own handlers are never duplicated. The package logger level
    is changed only when a level is passed or the
    :code:`KINEMATIC_TREE_LOG_LEVEL` environment variable is set.

    :param level: Logging level name or number, defaults to None
    :type level: str | int | None, optional
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(format=LOG_FORMAT)
    if level is not None:
        logging.getLogger('kinematic_tree').setLevel(level)

def get_logger(name: str) -> logging.Logger:
    """Module logger; handlers and levels are left to the application

    :param name: Logger name, usually :code:`__name__`
    :type name: str

    :return: Logger instance
    :rtype: logging.Logger
    """
    return logging.getLogger(name)
