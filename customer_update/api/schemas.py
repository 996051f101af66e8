# customer_update/api/schemas.py
from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform envelope returned by every endpoint.

    Top-level keys left as None are dropped from the JSON body; nulls inside
    `data` are kept.
    """
    success: bool = Field(..., description="True if the operation succeeded.")
    message: Optional[str] = Field(None, description="Top-level human-readable message.")
    data: Optional[T] = None
    error: Optional[str] = Field(None, description="Single error detail, if any.")
    errors: Optional[List[str]] = Field(None, description="List of error details, if any.")

    def to_content(self) -> dict:
        dumped = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in dumped.items() if value is not None}

    def to_response(self, status_code: int = 200, headers: Optional[dict] = None) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=self.to_content(), headers=headers)
