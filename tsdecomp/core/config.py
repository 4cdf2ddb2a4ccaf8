"""core.config
---------------

Configuration loader/manager for tsdecomp. Settings come from defaults and
can be overridden by a YAML/TOML/JSON file; values are read back through
:py:meth:`ConfigManager.get`.
"""

import os
import json
import yaml
import toml


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""


class ConfigManager:
    """
    Holds decomposition settings (period, frequency, normalisation, input
    column names) with defaults suited to monthly data with annual seasonality.
    """

    DEFAULT_PERIOD: int = 12
    DEFAULT_FREQ: str = "MS"
    DEFAULT_DATASET: str = "airpassengers"
    DEFAULT_VALUE_COL: str = "value"
    DEFAULT_DATE_COL: str = "date"
    NORMALIZE_SEASONAL: bool = True

    # Config files accepted by :py:meth:`load`
    SUPPORTED_CONFIG_FORMATS: tuple[str, ...] = (".yaml", ".yml", ".toml", ".json")

    def __init__(self, config_path=None):
        self.config = {
            "period": self.DEFAULT_PERIOD,
            "freq": self.DEFAULT_FREQ,
            "dataset": self.DEFAULT_DATASET,
            "value_col": self.DEFAULT_VALUE_COL,
            "date_col": self.DEFAULT_DATE_COL,
            "normalize_seasonal": self.NORMALIZE_SEASONAL,
        }
        if config_path:
            self.load(config_path)

    def load(self, path: str) -> None:
        """
        Load configuration from a file (YAML, TOML, or JSON).
        Overwrites existing keys in self.config.
        """
        ext = os.path.splitext(path)[1].lower()
        if ext not in self.SUPPORTED_CONFIG_FORMATS:
            raise ConfigValidationError(f"Unsupported config format: {ext}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                if ext in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                elif ext == ".toml":
                    data = toml.load(f)
                else:
                    data = json.load(f)
        except Exception as e:
            raise ConfigValidationError(
                f"Failed to load config from {path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Config file {path} did not produce a dict")
        self._validate(data, path)
        self.config.update(data)

    @staticmethod
    def _validate(data: dict, path: str) -> None:
        period = data.get("period")
        if period is not None and (
            isinstance(period, bool) or not isinstance(period, int) or period < 1
        ):
            raise ConfigValidationError(
                f"Invalid period {period!r} in {path}: expected a positive integer"
            )
        normalize = data.get("normalize_seasonal")
        if normalize is not None and not isinstance(normalize, bool):
            raise ConfigValidationError(
                f"Invalid normalize_seasonal {normalize!r} in {path}: expected a boolean"
            )

    def get(self, key, default=None):
        """
        Retrieve a configuration value by key, or return `default` if not present.

        Args:
            key (str): The configuration parameter to look up.
            default:  The value to return if `key` is not found.
        """
        return self.config.get(key, default)

    def merge(self, other: "ConfigManager") -> None:
        """
        Merge another ConfigManager into this one.
        Values in other.config override this.config.
        """
        if not isinstance(other, ConfigManager):
            raise TypeError("Can only merge ConfigManager instances")
        self.config.update(other.config)

    @property
    def period(self) -> int:
        return int(self.get("period", self.DEFAULT_PERIOD))

    @property
    def normalize_seasonal(self) -> bool:
        return bool(self.get("normalize_seasonal", self.NORMALIZE_SEASONAL))
