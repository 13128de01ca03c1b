# backend/mockapi/schemas/shipment_schema.py
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

ShipmentStatus = Literal["PENDING", "IN_TRANSIT", "DELIVERED"]


class ShipmentIn(BaseModel):
    model_config = ConfigDict(extra="allow")
    origin: str
    destination: str
    weight: Optional[Union[int, float]] = None


class ShipmentUpdate(BaseModel):
    # every field optional: only what the caller sends is merged
    model_config = ConfigDict(extra="allow")
    origin: Optional[str] = None
    destination: Optional[str] = None
    status: Optional[ShipmentStatus] = None
    weight: Optional[Union[int, float]] = None

    @field_validator("status", mode="before")
    @classmethod
    def status_not_null(cls, v):
        # omitted keeps the current status; an explicit null is not a status
        if v is None:
            raise ValueError("status cannot be null")
        return v
