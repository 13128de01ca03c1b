from typing import Any

from pydantic import BaseModel, Field


class WebhookEvent(BaseModel):
    model_config = {"frozen": True}

    id: str
    type: str = "ping"
    payload: Any = Field(default_factory=dict)
    timestamp: str
