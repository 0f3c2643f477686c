"""
Configuration module for binpack-bp.

This module provides configuration management for the branch-and-price
engine: solver settings, numerical tolerance and logging.

Configuration can be set via:
1. Environment variables (BINPACK_BP_*)
2. Config file (~/.binpack_bp/config.toml or ./binpack_bp.toml)
3. Programmatic API

Example:
    >>> from binpack_bp.config import config
    >>> config.tolerance
    1e-06
    >>> config.num_threads = 1
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union


def _get_default_log_level() -> str:
    return os.environ.get('BINPACK_BP_LOG_LEVEL', 'INFO').upper()


@dataclass
class BinPackConfig:
    """
    Configuration for the branch-and-price engine.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        num_threads: HiGHS thread count, shared by master and pricing
        tolerance: Epsilon used by every floating-point comparison
        objective_scale: Uniform cost coefficient of the master columns
        time_limit: Per-solve HiGHS time limit in seconds (None = no limit)
        verbosity: HiGHS output level (0 = silent)
        random_seed: HiGHS random seed
    """

    # Logging
    log_level: str = field(default_factory=_get_default_log_level)

    # Solver settings
    num_threads: int = 1
    time_limit: Optional[float] = None
    verbosity: int = 0
    random_seed: int = 0

    # Numerics
    tolerance: float = 1e-6
    objective_scale: float = 1.0

    def __post_init__(self):
        """Reject values HiGHS or the engine cannot use."""
        if self.num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {self.num_threads}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.objective_scale <= 0:
            raise ValueError(
                f"objective_scale must be positive, got {self.objective_scale}"
            )

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "log_level": self.log_level,
            "num_threads": self.num_threads,
            "time_limit": self.time_limit,
            "verbosity": self.verbosity,
            "random_seed": self.random_seed,
            "tolerance": self.tolerance,
            "objective_scale": self.objective_scale,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'BinPackConfig':
        """Create config from dictionary."""
        time_limit = d.get("time_limit")
        return cls(
            log_level=str(d.get("log_level", "INFO")).upper(),
            num_threads=int(d.get("num_threads", 1)),
            time_limit=float(time_limit) if time_limit is not None else None,
            verbosity=int(d.get("verbosity", 0)),
            random_seed=int(d.get("random_seed", 0)),
            tolerance=float(d.get("tolerance", 1e-6)),
            objective_scale=float(d.get("objective_scale", 1.0)),
        )

    def save(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to a TOML file.

        Args:
            path: Path to save to (default: ./binpack_bp.toml)
        """
        if path is None:
            path = Path("binpack_bp.toml")

        lines = [
            "# binpack-bp configuration",
            "",
            "[general]",
            f'log_level = "{self.log_level}"',
            "",
            "[solver]",
            f"num_threads = {self.num_threads}",
            f"verbosity = {self.verbosity}",
            f"random_seed = {self.random_seed}",
        ]
        if self.time_limit is not None:
            lines.append(f"time_limit = {self.time_limit}")

        lines.extend([
            "",
            "[numerics]",
            f"tolerance = {self.tolerance}",
            f"objective_scale = {self.objective_scale}",
        ])

        path.write_text("\n".join(lines) + "\n")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'BinPackConfig':
        """
        Load configuration from a TOML file.

        Args:
            path: Path to load from (default: ./binpack_bp.toml or
                ~/.binpack_bp/config.toml)

        Returns:
            Loaded configuration (or default if file not found)
        """
        if path is None:
            local_config = Path("binpack_bp.toml")
            user_config = Path.home() / ".binpack_bp" / "config.toml"

            if local_config.exists():
                path = local_config
            elif user_config.exists():
                path = user_config
            else:
                return cls()

        if not path.exists():
            return cls()

        # Flat key = value pairs; section headers only group them
        config_dict: dict[str, Any] = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("[") and line.endswith("]"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                config_dict[key.strip()] = value.strip().strip('"')

        return cls.from_dict(config_dict)


# Global configuration instance
config = BinPackConfig()


def configure_logging(
    level: Optional[Union[str, int]] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure logging for the package.

    Args:
        level: Logging level (default: config.log_level)
        log_file: Optional file receiving a copy of the log

    Returns:
        The package logger
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w'))

    logging.basicConfig(
        level=level if level is not None else config.log_level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("binpack_bp")
