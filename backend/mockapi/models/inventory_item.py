from sqlalchemy import CheckConstraint, Column, Integer, String
from mockapi.db import Base

class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(256), nullable=False)
    stock = Column(Integer, default=0, nullable=False)

    def to_dict(self) -> dict:
        return {"sku": self.sku, "name": self.name, "stock": self.stock}

    def __repr__(self):
        return f"<InventoryItem sku={self.sku} name={self.name}>"
