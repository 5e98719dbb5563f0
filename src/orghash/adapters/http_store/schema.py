"""Pydantic models describing the blob service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BlobServiceModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SaveResponse(BlobServiceModel):
    handle: str = Field(min_length=1)
    algorithm: str

    @field_validator("handle")
    @classmethod
    def _normalize_handle(cls, value: str) -> str:
        return value.strip().lower()


class ErrorResponse(BlobServiceModel):
    error: str
    detail: str | None = None
