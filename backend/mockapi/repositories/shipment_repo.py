from typing import Dict, List, Optional

from mockapi.models.shipment import Shipment
from sqlalchemy.orm import Session

# columns a caller may write; anything else lands in Shipment.data
SHIPMENT_COLUMNS = ("origin", "destination", "status", "weight")


class ShipmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Shipment]:
        # ids only grow, so id order is insertion order
        return self.db.query(Shipment).order_by(Shipment.id).all()

    def get(self, pk: int) -> Optional[Shipment]:
        return self.db.get(Shipment, pk)

    def add(self, fields: Dict) -> Shipment:
        columns = {k: v for k, v in fields.items() if k in SHIPMENT_COLUMNS}
        extras = {k: v for k, v in fields.items() if k not in SHIPMENT_COLUMNS}
        s = Shipment(**columns, data=extras or None)
        self.db.add(s)
        self.db.flush()  # ensure id assigned
        return s

    def merge(self, shipment: Shipment, fields: Dict) -> Shipment:
        extras = dict(shipment.data or {})
        for k, v in fields.items():
            if k in SHIPMENT_COLUMNS:
                setattr(shipment, k, v)
            else:
                extras[k] = v
        # reassign so the JSON column is flagged dirty
        shipment.data = extras or None
        self.db.flush()
        return shipment

    def remove(self, shipment: Shipment) -> None:
        self.db.delete(shipment)
        self.db.flush()
