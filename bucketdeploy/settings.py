from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from bucketdeploy.exceptions import ConfigurationError

DEFAULT_REGION = "eu-west-1"


class DeploySettings(BaseModel):
    """Immutable parameters of a single deploy run, built once from CLI flags."""

    model_config = ConfigDict(frozen=True)

    source: Path
    bucket: str
    key: str = ""
    secret: str = Field(default="", repr=False)
    region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    local_root: Path | None = None

    @field_validator("source", mode="before")
    @classmethod
    def _require_source(cls, value: Any) -> Any:  # noqa: D401
        if value is None or not str(value).strip():
            raise ValueError("Source directory must be provided")
        return value

    @field_validator("bucket", mode="before")
    @classmethod
    def _require_bucket(cls, value: Any) -> Any:  # noqa: D401
        if value is None or not str(value).strip():
            raise ValueError("Bucket name must be provided")
        return str(value).strip()

    @field_validator("region", mode="before")
    @classmethod
    def _default_region(cls, value: Any) -> str:  # noqa: D401
        if value is None or not str(value).strip():
            return DEFAULT_REGION
        return str(value).strip()

    @model_validator(mode="after")
    def _credentials_in_pairs(self) -> "DeploySettings":
        if bool(self.key) != bool(self.secret):
            raise ValueError("Access key and secret must be provided together")
        return self

    @classmethod
    def build(cls, **values: Any) -> "DeploySettings":
        """Validate raw flag values.

        Raises:
            ConfigurationError: If a required value is missing or invalid.
        """
        try:
            return cls(**values)
        except ValidationError as exc:
            errors = exc.errors()
            reasons = [str(err.get("ctx", {}).get("error", err["msg"])) for err in errors]
            fields = [str(err["loc"][0]) for err in errors if err.get("loc")]
            details = {"fields": ", ".join(fields)} if fields else {}
            raise ConfigurationError("; ".join(reasons), details) from exc


__all__ = ["DeploySettings", "DEFAULT_REGION"]
