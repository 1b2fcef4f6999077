"""Pydantic schemas for streaming service API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StreamingServiceCreate(BaseModel):
    """Schema for registering a streaming service."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100, description="Unique name (case-insensitive)")
    base_url: str = Field(min_length=1, max_length=500, description="Service home page")
    is_active: bool = True


class StreamingServiceUpdate(BaseModel):
    """Schema for a partial streaming service update."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    base_url: str | None = Field(default=None, min_length=1, max_length=500)
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_nulls(self) -> "StreamingServiceUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class StreamingServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    base_url: str
    icon: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
