from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.services.configuration import DEFAULT_Z_SPACING, SceneConfiguration
from domain.services.inter_layer_edges import DEFAULT_EDGE_CAP
from domain.services.shape_layout import LayoutSpacing

DEFAULT_CONFIG_PATH = Path("config/app.yaml")

_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


def _validate_provider_url(value: str | None) -> str | None:
    normalized = str(value or "").strip()
    if not normalized:
        return None
    _HTTP_URL_ADAPTER.validate_python(normalized)
    return normalized


ProviderUrl = Annotated[str | None, AfterValidator(_validate_provider_url)]


class ProviderSettings(BaseModel):
    url: ProviderUrl = None
    spreadsheet_id: str = ""
    timeout_seconds: float = Field(default=15.0, gt=0)


class ViewerSettings(BaseModel):
    title: str = "Matrix Graph 3D"
    show_labels: bool = False
    show_layer_names: bool = False
    show_inter_layer_edges: bool = True
    z_spacing: float = Field(default=DEFAULT_Z_SPACING, gt=0)
    unit_spacing: float = Field(default=1.5, gt=0)
    ring_spacing: float = Field(default=1.2, gt=0)
    edge_cap: int = Field(default=DEFAULT_EDGE_CAP, ge=0)
    edge_cap_policy: Literal["truncate", "stride"] = "truncate"
    layers_dir: Path = Path("data/layers")
    scenes_dir: Path = Path("data/scenes")

    @field_validator("edge_cap_policy", mode="before")
    @classmethod
    def normalize_policy(cls, value: object) -> str:
        return str(value).strip().lower() if value else "truncate"

    def scene_configuration(self) -> SceneConfiguration:
        return SceneConfiguration(
            show_labels=self.show_labels,
            show_layer_names=self.show_layer_names,
            show_inter_layer_edges=self.show_inter_layer_edges,
            z_spacing=self.z_spacing,
        )

    def layout_spacing(self) -> LayoutSpacing:
        return LayoutSpacing(unit=self.unit_spacing, ring=self.ring_spacing)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="M3D_", env_nested_delimiter="__")

    provider: ProviderSettings = ProviderSettings()
    viewer: ViewerSettings = ViewerSettings()
    log_level: str = "INFO"

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
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("M3D_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
