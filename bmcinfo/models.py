"""Pydantic models for controller identity and connection settings."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN = "Unknown"
UNAVAILABLE = "Unavailable"


class SystemInformation(BaseModel):
    """Identity and firmware details reported by the controller.

    Fields that could not be parsed hold ``"Unknown"``; a record produced by
    a failed fetch holds ``"Unavailable"`` in every field.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    model: str = UNKNOWN
    serial_number: str = UNKNOWN
    controller_generation: str = UNKNOWN
    system_rom: str = UNKNOWN
    controller_firmware: str = UNKNOWN

    @classmethod
    def unavailable(cls) -> SystemInformation:
        return cls(
            model=UNAVAILABLE,
            serial_number=UNAVAILABLE,
            controller_generation=UNAVAILABLE,
            system_rom=UNAVAILABLE,
            controller_firmware=UNAVAILABLE,
        )

    @property
    def is_available(self) -> bool:
        return self != SystemInformation.unavailable()

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase representation served over HTTP."""
        return self.model_dump(by_alias=True)


class ControllerSettings(BaseModel):
    """SSH connection settings for the controller's CLP shell."""

    host: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    port: int = Field(default=22, ge=1, le=65535)
    timeout: float = Field(default=10.0, gt=0)
