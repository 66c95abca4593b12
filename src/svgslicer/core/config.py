"""
Configuration management for svgslicer.

Printer and model settings are immutable pydantic models, so one generation
run can never observe a setting change halfway through. Settings files are
YAML documents with optional ``printer``, ``model`` and ``prefix`` sections;
keys may be written in snake_case or in the camelCase used by settings
exported from the browser front-end.
"""

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from svgslicer.core.exceptions import ConfigurationError


class HatchStyle(str, Enum):
    """Hatch-pass preset used when plotting raster images."""

    CROSS = "cross"  # Dark cross-hatch plus a sparse mid-tone pass
    DIAGONAL = "diagonal"  # Single diagonal direction
    LINES = "lines"  # Horizontal lines


_SETTINGS_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class PrinterSettings(BaseModel):
    """Machine-invariant physical and motion parameters.

    Speeds are in mm/min, temperatures in degrees Celsius, lengths in mm.
    """

    model_config = _SETTINGS_CONFIG

    nozzle_diameter: float = Field(default=0.4, gt=0)
    filament_diameter: float = Field(default=1.75, gt=0)
    layer_height: float = Field(default=0.2, gt=0)
    initial_layer_height: float = Field(default=0.24, gt=0)
    print_speed: float = Field(default=50 * 60, gt=0)
    travel_speed: float = Field(default=120 * 60, gt=0)
    temperature: float = Field(default=200.0, ge=0)
    bed_temperature: float = Field(default=60.0, ge=0)
    retraction_distance: float = Field(default=5.0, ge=0)
    retraction_speed: float = Field(default=40 * 60, gt=0)
    extrusion_multiplier: float = Field(default=1.0, ge=0)
    z_offset: float = 0.0
    bed_width: float = Field(default=220.0, gt=0)
    bed_depth: float = Field(default=220.0, gt=0)
    z_hop: float = Field(default=2.0, ge=0)

    @property
    def bed_center(self) -> tuple[float, float]:
        return self.bed_width / 2, self.bed_depth / 2


class ModelSettings(BaseModel):
    """Per-job parameters."""

    model_config = _SETTINGS_CONFIG

    target_height: float = Field(default=1.0, ge=0)
    scale: float = Field(default=1.0, gt=0)
    fill_density: float = Field(default=100.0, ge=0, le=100)
    generate_infill: bool = True
    plotter_mode: bool = Field(
        default=True,
        validation_alias=AliasChoices("plotter_mode", "plotterMode", "isPlotterMode"),
    )
    hatch_style: HatchStyle = HatchStyle.CROSS


class JobSettings(BaseModel):
    """Everything a generation run needs besides the input geometry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    printer: PrinterSettings = Field(default_factory=PrinterSettings)
    model: ModelSettings = Field(default_factory=ModelSettings)
    prefix: str = ""

    def with_model_overrides(self, **overrides: Any) -> "JobSettings":
        """
        Return a copy with some model settings replaced.

        ``None`` values are ignored so unset command line options can be
        passed straight through.

        Raises:
            ConfigurationError: If an override fails validation
        """
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        data = self.model.model_dump()
        data.update(updates)
        try:
            model = ModelSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid model settings override",
                details={"error": str(e)},
            ) from e
        return JobSettings(printer=self.printer, model=model, prefix=self.prefix)


def load_settings(path: str | Path) -> JobSettings:
    """
    Load job settings from a YAML file.

    Args:
        path: Settings file path

    Returns:
        JobSettings instance; missing sections use defaults

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML or
            fails validation
    """
    config_file = Path(path)
    if not config_file.exists():
        raise ConfigurationError(f"Settings file not found: {config_file}")

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse settings file: {config_file}",
            details={"error": str(e)},
        ) from e

    return settings_from_dict(data or {}, source=str(config_file))


def settings_from_dict(data: dict[str, Any], source: str = "<dict>") -> JobSettings:
    """
    Build job settings from plain structured data.

    Raises:
        ConfigurationError: If the data fails validation
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings must be a mapping: {source}",
            details={"type": type(data).__name__},
        )

    unknown = set(data) - {"printer", "model", "prefix"}
    if unknown:
        raise ConfigurationError(
            f"Unknown settings sections in {source}",
            details={"unknown": sorted(unknown)},
        )

    try:
        printer = PrinterSettings.model_validate(data.get("printer") or {})
        model = ModelSettings.model_validate(data.get("model") or {})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings in {source}",
            details={"error": str(e)},
        ) from e

    prefix = data.get("prefix") or ""
    if not isinstance(prefix, str):
        raise ConfigurationError(
            f"Prefix must be a string in {source}",
            details={"type": type(prefix).__name__},
        )
    return JobSettings(printer=printer, model=model, prefix=prefix)
