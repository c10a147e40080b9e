"""Shared pytest fixtures"""
import logging

import pytest

from kinematic_tree.config import TreeConfig, set_config

@pytest.fixture(autouse=True)
def default_config():
    """Restore the default configuration and package log level around every test"""
    logger = logging.getLogger('kinematic_tree')
    level = logger.level

    previous = set_config(TreeConfig())
    yield
    set_config(previous)
    logger.setLevel(level)
