"""Base model for exposure notification payloads.

Native bridge and backend payloads use camelCase keys; every model
inherits from :class:`ExposureBaseModel` so they map automatically to
snake_case fields and dump back with ``by_alias=True``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ExposureBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump using the camelCase wire names."""
        return self.model_dump(by_alias=True, mode="json")
