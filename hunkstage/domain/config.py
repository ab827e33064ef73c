"""Domain model for per-repository staging configuration.

Settings are read from an optional `.hunkstage.yml` file at the repository
root and parsed once into a typed StagingConfig.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

CONFIG_FILENAME = ".hunkstage.yml"
OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class StagingConfig:
    """Staging settings.

    Attributes:
        watch_interval: Seconds between status polls in watch mode
        confirm_discard: Ask before discarding a whole file
        output_format: Default output format ("text" or "json")
    """

    watch_interval: float = 2.0
    confirm_discard: bool = True
    output_format: str = "text"

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict | None) -> StagingConfig:
        """Parse settings from a YAML mapping.

        Args:
            data: Raw mapping from YAML, or None for an empty file

        Returns:
            Typed StagingConfig; unknown keys are ignored

        Raises:
            ValueError: If a value has the wrong type or is out of range
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

        defaults = cls()

        watch_interval = data.get("watch_interval", defaults.watch_interval)
        if isinstance(watch_interval, bool) or not isinstance(watch_interval, (int, float)):
            raise ValueError(f"watch_interval must be a number, got {watch_interval!r}")
        if watch_interval <= 0:
            raise ValueError(f"watch_interval must be positive, got {watch_interval}")

        confirm_discard = data.get("confirm_discard", defaults.confirm_discard)
        if not isinstance(confirm_discard, bool):
            raise ValueError(f"confirm_discard must be true or false, got {confirm_discard!r}")

        output_format = data.get("output_format", defaults.output_format)
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output_format: {output_format}. Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )

        return cls(
            watch_interval=float(watch_interval),
            confirm_discard=confirm_discard,
            output_format=output_format,
        )

    @classmethod
    def from_file(cls, path: Path) -> StagingConfig:
        """Load settings from a YAML file.

        Args:
            path: Path to the config file

        Returns:
            Parsed config, or defaults if the file does not exist
        """
        if not path.exists():
            return cls()
        return cls.from_dict(yaml.safe_load(path.read_text(encoding="utf-8")))

    @classmethod
    def for_repository(cls, repo_root: Path) -> StagingConfig:
        """Load the config file from a repository root."""
        return cls.from_file(repo_root / CONFIG_FILENAME)
