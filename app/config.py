from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.labels.label_names import StaticLabelNames
from domain.config import ColormapConfig, DynamicLayerConfig, LayerConfig, VisualizerConfig
from domain.models import Header

DEFAULT_CONFIG_PATH = Path("config/visualizer.yaml")
CONFIG_PATH_ENV = "DSGVIZ_CONFIG_PATH"


class LabelNameEntry(BaseModel):
    label: int
    name: str


class VisualizerSettings(BaseModel):
    frame_id: str = "world"
    visualizer: VisualizerConfig = VisualizerConfig()
    colormap: ColormapConfig = ColormapConfig()
    layers: dict[int, LayerConfig] = Field(default_factory=dict)
    dynamic_layers: dict[int, DynamicLayerConfig] = Field(default_factory=dict)
    label_names: list[LabelNameEntry] = Field(default_factory=list)

    @field_validator("frame_id", mode="before")
    @classmethod
    def normalize_frame_id(cls, value: object) -> str:
        return str(value or "").strip() or "world"

    def header(self, stamp: float = 0.0) -> Header:
        return Header(frame_id=self.frame_id, stamp=stamp)

    def label_lookup(self) -> StaticLabelNames | None:
        """Name table for object labels, or None to label nodes by their symbol."""
        if not self.label_names:
            return None
        return StaticLabelNames(entry.model_dump() for entry in self.label_names)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DSGVIZ_", env_nested_delimiter="__")

    markers: VisualizerSettings = VisualizerSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # env wins over the YAML file
        sources = (init_settings, env_settings, dotenv_settings, file_secret_settings)
        if cls._yaml_path is None:
            return sources
        return (*sources, YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    if config_path is None and os.getenv(CONFIG_PATH_ENV):
        config_path = Path(os.environ[CONFIG_PATH_ENV])
    if config_path is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)
    return config_path


def load_settings(config_path: Path | None = None) -> AppSettings:
    yaml_path = resolve_config_path(config_path)
    previous = AppSettings._yaml_path
    AppSettings._yaml_path = yaml_path
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
