"""Shared DTO base: camelCase on the wire, snake_case in Python."""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Request body as the backend expects it; unset optionals are dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
