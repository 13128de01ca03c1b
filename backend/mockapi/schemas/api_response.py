from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """HTTP-shaped answer produced by the mock engine."""

    status: int
    data: Optional[Any] = None
    headers: Dict[str, str] = Field(default_factory=dict)


def respond(status: int, data: Any = None, headers: Optional[Dict[str, str]] = None) -> ApiResponse:
    return ApiResponse(status=status, data=data, headers=headers or {})


def error(status: int, title: str, **extra) -> ApiResponse:
    """`{"error": title, ...extra}`; extra commonly carries `message` and `code`."""
    return respond(status, {"error": title, **extra})
