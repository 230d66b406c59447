"""
Pipeline configuration loaded from YAML.

The file mirrors the ``PipelineConfig`` fields; every key is optional and
falls back to the dataclass default.  See ``config/apparent_config.yaml``
for the full layout.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / 'config' / 'apparent_config.yaml'

EARTH_VELOCITY_METHODS = ('derivative', 'kepler')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class PipelineConfig:
    """
    Settings of the apparent-position pipeline.

    Attributes
    ----------
    precession : str
        Name of a ``PrecessionModel`` member.
    light_time : bool
        Apply the light-time correction.
    aberration : bool
        Apply annual aberration.
    earth_velocity_method : str
        ``'derivative'`` (central difference of the Earth provider) or
        ``'kepler'`` (velocity of the Earth-Moon barycenter orbit).
    step_days : float
        Half-width of the central difference (days).
    log_level : str
        Level for ``logging.basicConfig`` in the command-line entry point.
    """
    precession: str = 'WILLIAMS_1994'
    light_time: bool = True
    aberration: bool = True
    earth_velocity_method: str = 'derivative'
    step_days: float = 0.1
    log_level: str = 'INFO'

    def __post_init__(self):
        # Imported here: ephemeris depends on core
        from ephemeris.models import parse_precession_model

        self.precession = parse_precession_model(self.precession).name
        if self.earth_velocity_method not in EARTH_VELOCITY_METHODS:
            raise ValueError(
                f"Unknown earth_velocity method '{self.earth_velocity_method}'. "
                f"Available: {', '.join(EARTH_VELOCITY_METHODS)}"
            )
        if self.step_days <= 0.0:
            raise ValueError(f"step_days must be positive, got {self.step_days}")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'")

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'PipelineConfig':
        """Build from the nested mapping produced by ``yaml.safe_load``."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        models = data.get('models') or {}
        corrections = data.get('corrections') or {}
        earth_velocity = data.get('earth_velocity') or {}
        logging_cfg = data.get('logging') or {}

        defaults = cls.__dataclass_fields__
        return cls(
            precession=models.get('precession', defaults['precession'].default),
            light_time=bool(corrections.get('light_time', defaults['light_time'].default)),
            aberration=bool(corrections.get('aberration', defaults['aberration'].default)),
            earth_velocity_method=earth_velocity.get(
                'method', defaults['earth_velocity_method'].default),
            step_days=float(earth_velocity.get('step_days', defaults['step_days'].default)),
            log_level=logging_cfg.get('level', defaults['log_level'].default),
        )


def load_config(config_path: Optional[str] = None) -> PipelineConfig:
    """
    Load the pipeline configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to config/apparent_config.yaml

    Returns:
        Validated PipelineConfig

    Raises:
        ValueError: unknown model or method name, or a malformed file
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    logger.info("Loading configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    config = PipelineConfig.from_dict(data)
    logger.info("Precession model: %s", config.precession)
    return config
