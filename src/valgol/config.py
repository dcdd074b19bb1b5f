"""
VALGOL I Machine - Configuration
================================

Run-time settings for the VALGOL I machine. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the vgm tool on top of the above)
"""

from dataclasses import dataclass
from typing import Optional
import os


DEFAULT_PRINT_AREA_SIZE = 100
DEFAULT_EPSILON = 0.000001


@dataclass
class MachineConfig:
    """
    Configuration for program execution.

    Attributes:
        print_area_size: Columns in the print area written by EDT
        epsilon: Tolerance used by EQU when comparing two reals
        max_steps: Maximum instructions to execute before giving up
                   (None = run until HLT)
    """

    print_area_size: int = DEFAULT_PRINT_AREA_SIZE
    epsilon: float = DEFAULT_EPSILON
    max_steps: Optional[int] = None

    def __post_init__(self):
        if self.print_area_size <= 0:
            raise ValueError(f"print_area_size must be positive, got {self.print_area_size}")
        if self.max_steps is not None and self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """
        Create MachineConfig from environment variables.

        Environment variables (all optional):
            VALGOL_PRINT_AREA_SIZE: Print area width (positive integer)
            VALGOL_EPSILON: EQU tolerance (float)
            VALGOL_MAX_STEPS: Step limit (positive integer)

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if size := os.environ.get("VALGOL_PRINT_AREA_SIZE"):
            try:
                if int(size) > 0:
                    config.print_area_size = int(size)
            except ValueError:
                pass

        if epsilon := os.environ.get("VALGOL_EPSILON"):
            try:
                config.epsilon = float(epsilon)
            except ValueError:
                pass

        if steps := os.environ.get("VALGOL_MAX_STEPS"):
            try:
                if int(steps) > 0:
                    config.max_steps = int(steps)
            except ValueError:
                pass

        return config
