"""NetLite training configuration, loadable from TOML."""

import os
import tomllib
from dataclasses import dataclass

from .errors import InvalidArgument


@dataclass
class TrainingConfiguration:
    """Configuration for a training run."""

    learning_rate: float = 0.3
    momentum: float = 0.5
    epochs: int = 1000
    seed: int | None = None
    log_interval: int = 100
    log_dir: str = "outputs"
    name: str = "netlite"

    def __post_init__(self):
        """Reject values no training run can use."""
        if self.learning_rate < 0:
            raise InvalidArgument(f"learning_rate must not be negative, got {self.learning_rate}")
        if self.momentum < 0:
            raise InvalidArgument(f"momentum must not be negative, got {self.momentum}")
        if self.epochs < 1:
            raise InvalidArgument(f"epochs must be at least 1, got {self.epochs}")
        if self.log_interval < 1:
            raise InvalidArgument(f"log_interval must be at least 1, got {self.log_interval}")

    @classmethod
    def load(cls, config_path: str) -> "TrainingConfiguration":
        """
        Load training configuration from a TOML file.

        Parameters
        ----------
        config_path : str
            Filesystem path to a TOML file containing a "training" table.

        Returns
        -------
        TrainingConfiguration
            Instance populated from the "training" table; missing fields use
            the dataclass defaults.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        training_data = data.get("training", {})
        return cls(**training_data)
