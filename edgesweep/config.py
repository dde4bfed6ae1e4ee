"""
Configuration classes for the edge sweep.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SweepConfig:
    """Edge sweep configuration shared by the orchestrator and its helpers."""

    # Coordinate index the sweep line moves along: 0 = x, 1 = y
    sweep_axis: int = 0

    # Stop sweeping as soon as the collaborator sets is_done
    stop_when_done: bool = True

    # Distance under which two points are treated as the same point
    tolerance: float = 1e-6

    # Batch processing
    n_processes: Optional[int] = None  # default: CPU count

    # Synthetic input generation
    random_seed: int = 42

    verbose: bool = False

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.sweep_axis not in (0, 1):
            raise ValueError("sweep_axis must be 0 or 1")
        if self.tolerance < 0:
            raise ValueError("tolerance must be >= 0")
        if self.n_processes is not None and self.n_processes < 1:
            raise ValueError("n_processes must be >= 1")
