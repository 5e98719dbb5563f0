"""HTTP blob service adapter."""

from __future__ import annotations

from .client import HttpContentStore
from .schema import ErrorResponse, SaveResponse

__all__ = ["ErrorResponse", "HttpContentStore", "SaveResponse"]
