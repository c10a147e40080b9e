"""config.py - Package Configuration"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from kinematic_tree.errors import ConfigError
from kinematic_tree.logging import setup_logging

__all__ = ['TreeConfig', 'load_config', 'get_config', 'set_config']

@dataclass(frozen=True)
class TreeConfig:
    """Numerical tolerances and defaults for frame trees

    :param axis_tolerance: Smallest axis norm accepted for normalization, defaults to 1e-12
    :type axis_tolerance: float, optional

    :param pose_tolerance: Absolute tolerance for pose comparisons, defaults to 1e-9
    :type pose_tolerance: float, optional

    :param default_angle_limits: Joint (lower, upper) limits in radians at
        construction, defaults to (-inf, inf)
    :type default_angle_limits: tuple[float, float], optional

    :param log_level: Package logging level name, defaults to None (environment)
    :type log_level: str | None, optional
    """
    axis_tolerance: float = 1e-12
    pose_tolerance: float = 1e-9
    default_angle_limits: tuple[float, float] = field(
        default=(-math.inf, math.inf))
    log_level: str | None = None

    def __post_init__(self):
        """Validate tolerances and coerce limits"""
        if self.axis_tolerance < 0 or self.pose_tolerance < 0:
            raise ConfigError('Tolerances must be non-negative')

        limits = self.default_angle_limits
        if len(limits) != 2:
            raise ConfigError(f'default_angle_limits needs two values, got {limits}')
        object.__setattr__(self, 'default_angle_limits',
                           (float(limits[0]), float(limits[1])))

def load_config(path: Path | str) -> TreeConfig:
    """Reads a YAML mapping into a :class:`TreeConfig`

    :param path: YAML file path
    :type path: pathlib.Path | str

    :raises ConfigError: If the file is not a mapping or holds unknown keys

    :return: Loaded configuration
    :rtype: TreeConfig
    """
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ConfigError(f'Config must be a mapping: {path}')

    known = {f.name for f in fields(TreeConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f'Unknown config keys in {path}: {sorted(unknown)}')

    try:
        if 'default_angle_limits' in data:
            data['default_angle_limits'] = tuple(data['default_angle_limits'])
        return replace(TreeConfig(), **data)
    except (TypeError, ValueError) as err:
        raise ConfigError(f'Invalid config in {path}: {err}') from err

_config = TreeConfig()

def get_config() -> TreeConfig:
    return _config

def set_config(config: TreeConfig) -> TreeConfig:
    """Replace the process default configuration

    :return: Previous configuration
    :rtype: TreeConfig
    """
    global _config

    previous, _config = _config, config
    if config.log_level is not None:
        setup_logging(config.log_level)
    return previous
