from typing import List, Optional

from mockapi.models.inventory_item import InventoryItem
from sqlalchemy.orm import Session


class InventoryRepository:
    """Read-only access to the seeded inventory catalog."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[InventoryItem]:
        return self.db.query(InventoryItem).order_by(InventoryItem.id).all()

    def get_by_sku(self, sku: str) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(InventoryItem.sku == sku).first()
