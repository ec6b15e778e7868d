"""Pipeline configuration model."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dnuz.encodings import Transform, get_decoder, get_encoder
from dnuz.errors import ConfigurationError

DEFAULT_CONFIG_NAME = ".dnuz.yaml"


class PipelineConfig(BaseModel):
    """Resolved settings for one download-and-extract run.

    Keys may be given either by field name (``src_url``) or by the
    command-line flag spelling (``src-url``).
    """

    src_url: str = Field(default="", alias="src-url", description="Source archive URL")
    out_path: str = Field(default="", alias="out-path", description="Output root directory")
    non_utf8_enc: str = Field(
        default="", alias="nonUtf8-enc", description="Encoding of names not flagged as UTF-8"
    )
    out_enc: str = Field(default="", alias="out-enc", description="Encoding of output paths")
    timeout: float | None = Field(
        default=None, description="Download timeout in seconds (None waits forever)"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def from_yaml(cls, path: Path) -> "PipelineConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    @classmethod
    def default_path(cls) -> Path:
        return Path.home() / DEFAULT_CONFIG_NAME

    def merged(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with every non-None override applied."""
        update = {key: value for key, value in overrides.items() if value is not None}
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})

    def transforms(self) -> tuple[Transform, Transform]:
        """Resolve the name decoder and path encoder.

        Raises UnsupportedEncoding for unknown selector names.
        """
        return get_decoder(self.non_utf8_enc), get_encoder(self.out_enc)

    def require_url(self) -> str:
        if not self.src_url:
            raise ConfigurationError("requires at least url")
        return self.src_url
