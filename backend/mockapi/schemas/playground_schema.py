from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class PlaygroundRequest(BaseModel):
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "GET"
    endpoint: str = "/shipments"
    body: Optional[Any] = None
    headers: Dict[str, str] = Field(default_factory=dict)
