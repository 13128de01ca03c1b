from datetime import datetime, timezone

from mockapi.db import Base
from sqlalchemy import JSON, Column, DateTime, Float, Integer, String

SHIPMENT_STATUSES = ("PENDING", "IN_TRANSIT", "DELIVERED")
ID_PREFIX = "SHP-"
# largest value a 64-bit signed INTEGER column holds
MAX_PK = 2**63 - 1


class Shipment(Base):
    __tablename__ = "shipments"
    # AUTOINCREMENT: SQLite never hands out a previously used rowid again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    origin = Column(String(128), nullable=True)
    destination = Column(String(128), nullable=True)
    status = Column(String(32), nullable=False, default="PENDING")
    weight = Column(Float, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    # any extra caller-supplied fields, echoed back as-is
    data = Column(JSON, nullable=True)

    @property
    def public_id(self) -> str:
        return f"{ID_PREFIX}{self.id}"

    def to_dict(self) -> dict:
        weight = self.weight
        if weight is not None and float(weight).is_integer():
            weight = int(weight)
        out = {
            "id": self.public_id,
            "origin": self.origin,
            "destination": self.destination,
            "status": self.status,
        }
        if weight is not None:
            out["weight"] = weight
        for k, v in (self.data or {}).items():
            out.setdefault(k, v)
        return out

    def __repr__(self):
        return f"<Shipment id={self.public_id} status={self.status}>"


def parse_shipment_id(public_id: str):
    """Return the integer key for `SHP-<digits>`, or None for anything else."""
    if not isinstance(public_id, str) or not public_id.startswith(ID_PREFIX):
        return None
    digits = public_id[len(ID_PREFIX):]
    if not digits.isdigit() or not digits.isascii():
        return None
    pk = int(digits)
    return pk if pk <= MAX_PK else None
