"""
Configuration for ribbon generation.

Defines ribbon width, closure, fan resolution and export settings, stored as
a JSON sidecar next to the path file.
"""

from dataclasses import dataclass
import json
import math
import numbers
from pathlib import Path

from ribbon import RibbonOptions, DEFAULT_SLICE_ANGLE


@dataclass
class RibbonConfig:
    """
    Configuration for building and exporting a ribbon.

    Attributes:
        width: Offset on each side of the centerline (ribbon is 2 × width wide)
        closed: Path is a loop; skip the start/end outline edges
        slice_angle: Nominal cap fan slice in degrees
        weld_tolerance: Distance under which exported vertices are merged
    """
    width: float = 1.0
    closed: bool = False

    # Mesh quality
    slice_angle: float = DEFAULT_SLICE_ANGLE  # degrees per fan slice

    # Export
    weld_tolerance: float = 1e-9

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = RibbonOptions(
            width=self.width,
            closed=self.closed,
            slice_angle=self.slice_angle,
        ).validate()

        tolerance = self.weld_tolerance
        if (not isinstance(tolerance, numbers.Real) or isinstance(tolerance, bool)
                or not math.isfinite(tolerance)):
            errors.append(f"weld_tolerance must be a finite number, got {tolerance!r}")
        elif tolerance <= 0:
            errors.append(f"weld_tolerance must be positive, got {self.weld_tolerance}")

        if not errors and self.slice_angle < 1.0:
            errors.append(f"slice_angle {self.slice_angle} is excessive (min recommended: 1.0)")

        return errors

    def to_options(self) -> RibbonOptions:
        """Options for build_ribbon()."""
        return RibbonOptions(
            width=self.width,
            closed=self.closed,
            slice_angle=self.slice_angle,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "width": self.width,
            "closed": self.closed,
            "slice_angle": self.slice_angle,
            "weld_tolerance": self.weld_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RibbonConfig":
        """Create from dictionary."""
        return cls(
            width=data.get("width", 1.0),
            closed=data.get("closed", False),
            slice_angle=data.get("slice_angle", DEFAULT_SLICE_ANGLE),
            weld_tolerance=data.get("weld_tolerance", 1e-9),
        )

    def save(self, filepath: Path | str) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path | str) -> "RibbonConfig":
        """Load configuration from JSON file."""
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()  # Return defaults if file doesn't exist

        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def load_for_path(cls, path_filepath: Path | str) -> "RibbonConfig":
        """
        Load configuration for a specific path file.

        Looks for <path_name>.ribbon_config.json next to the path file.
        Returns defaults if config file doesn't exist.
        """
        return cls.load(_sidecar_path(path_filepath))

    def save_for_path(self, path_filepath: Path | str) -> None:
        """Save configuration as <path_name>.ribbon_config.json next to the path file."""
        self.save(_sidecar_path(path_filepath))


def _sidecar_path(path_filepath: Path | str) -> Path:
    return Path(path_filepath).with_suffix('.ribbon_config.json')


# Common fan resolutions (degrees per slice)
SLICE_ANGLE_PRESETS = {
    "coarse": 30.0,
    "standard": 10.0,
    "fine": 5.0,
}
