"""
Runtime Settings for signcalc.

Process-level knobs that are not part of a design (logging level, optimizer
parallelism, optimizer grid step). Design inputs live in ``DesignInputs``.

Usage:
    settings = EngineSettings.from_env()
    configure_logging(settings.log_level)
"""

from dataclasses import dataclass
from typing import Optional
import os
import logging

from dotenv import load_dotenv

from .constants import OPT_STEP

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EngineSettings:
    """Engine runtime settings.

    Attributes:
        log_level: Logging level name for applications embedding the engine
        opt_workers: Worker processes for grid evaluation (1 = sequential)
        opt_step: Optimizer grid step in metres
    """

    log_level: str = "WARNING"
    opt_workers: int = 1
    opt_step: float = OPT_STEP

    def __post_init__(self):
        """Validate settings after initialization."""
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.opt_workers < 1:
            raise ValueError("Optimizer workers must be at least 1")

        if not 0 < self.opt_step <= 0.5:
            raise ValueError("Optimizer step must be within (0, 0.5] m")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineSettings":
        """Load settings from environment variables.

        Args:
            env_file: Optional path to a .env file

        Raises:
            ValueError: If a variable cannot be parsed or is out of range
            FileNotFoundError: If env_file is specified but doesn't exist

        Environment Variables:
            SIGNCALC_LOG_LEVEL: Logging level name (default: WARNING)
            SIGNCALC_OPT_WORKERS: Optimizer worker processes (default: 1)
            SIGNCALC_OPT_STEP: Optimizer grid step in m (default: 0.05)
        """
        if env_file:
            if not load_dotenv(env_file):
                raise FileNotFoundError(f".env file not found: {env_file}")

        try:
            opt_workers = int(os.getenv("SIGNCALC_OPT_WORKERS", "1"))
            opt_step = float(os.getenv("SIGNCALC_OPT_STEP", str(OPT_STEP)))
        except ValueError as e:
            raise ValueError(f"Invalid signcalc setting: {e}")

        return cls(
            log_level=os.getenv("SIGNCALC_LOG_LEVEL", "WARNING"),
            opt_workers=opt_workers,
            opt_step=opt_step,
        )


def configure_logging(level: str = "WARNING") -> None:
    """Attach a basic stderr handler to the ``signcalc`` logger tree."""
    package_logger = logging.getLogger("signcalc")
    package_logger.setLevel(level.upper())
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        package_logger.addHandler(handler)
    logger.debug(f"signcalc logging configured at {level.upper()}")
