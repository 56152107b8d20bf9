"""Application settings and rule constants"""

import logging
import os
from dataclasses import dataclass

DATABASE_URL = os.environ.get("ROGUECHESS_DATABASE_URL", "sqlite:///./roguechess.db")
LOG_LEVEL = os.environ.get("ROGUECHESS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

ROOM_CODE_LENGTH = 5

# Time control presets offered when creating a room (minutes, seconds)
BASE_MINUTES_PRESETS = (1, 5, 10)
INCREMENT_PRESETS = (0, 1, 3)
DEFAULT_BASE_SECONDS = 5 * 60
DEFAULT_INCREMENT_SECONDS = 3


@dataclass(frozen=True)
class RuleConfig:
    """Numbers that tune the variant. The defaults are the rules as played."""

    upgrade_count: int = 2
    losing_side_weight: int = 10
    material_swing: int = 3
    sniper_range: int = 3
    wall_lifetime: int = 2
    walls_per_build: int = 3
    time_add_seconds: float = 30.0
    time_sub_seconds: float = 15.0


RULES = RuleConfig()


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
