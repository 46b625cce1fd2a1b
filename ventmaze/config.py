"""Configuration management for the maze pathfinder."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class MazeConfig:
    """Defaults used when building in-memory mazes."""

    # Cost of crossing a boundary with no wall on it
    base_move_cost: float = 1.0
    default_vent_cost: float = 1.0


@dataclass
class PathfindingConfig:
    """Search settings."""

    # False = fewest moves, every allowed move costs 1
    weighted: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    maze: MazeConfig = field(default_factory=MazeConfig)
    pathfinding: PathfindingConfig = field(default_factory=PathfindingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        # Look for config in standard locations
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "maze" in data:
                config.maze = MazeConfig(**data["maze"])
            if "pathfinding" in data:
                config.pathfinding = PathfindingConfig(**data["pathfinding"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
        logger.info(f"Loaded config from {config_path}")

    # Environment variable overrides
    if os.environ.get("VENTMAZE_LOG_LEVEL"):
        config.logging.level = os.environ["VENTMAZE_LOG_LEVEL"]
    if os.environ.get("VENTMAZE_BASE_MOVE_COST"):
        config.maze.base_move_cost = float(os.environ["VENTMAZE_BASE_MOVE_COST"])
    if os.environ.get("VENTMAZE_WEIGHTED"):
        config.pathfinding.weighted = _parse_bool(os.environ["VENTMAZE_WEIGHTED"])

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    logger.info(f"Logging configured at level {config.level}")
