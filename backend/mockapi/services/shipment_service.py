import threading
from typing import Dict, List, Optional

from pydantic import ValidationError

from mockapi.models.shipment import Shipment, parse_shipment_id
from mockapi.repositories.shipment_repo import ShipmentRepository
from mockapi.schemas.shipment_schema import ShipmentIn, ShipmentUpdate
from mockapi.utils.transactions import smart_transaction
from sqlalchemy.orm import Session


class ShipmentNotFound(Exception):
    pass


class ShipmentValidationError(Exception):
    pass


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or "body"
    return f"Invalid field '{field}': {first.get('msg')}"


class ShipmentService:
    """
    Create/read/update/delete lifecycle of the shipment collection.

    `lock` serialises store access for hosts that call in from several
    threads; pass the same lock to every service sharing one database.
    """

    def __init__(self, db: Session, lock: Optional[threading.Lock] = None):
        self.db = db
        self.lock = lock
        self.repo = ShipmentRepository(db)

    def list(self) -> List[Shipment]:
        with smart_transaction(self.db, self.lock):
            return self.repo.list()

    def get(self, shipment_id: str) -> Shipment:
        with smart_transaction(self.db, self.lock):
            return self._load(shipment_id)

    def create(self, fields: Dict) -> Shipment:
        """
        Store a new shipment. Status always starts as PENDING; a caller-supplied
        `id` or `status` is ignored.
        """
        if not isinstance(fields, dict):
            raise ShipmentValidationError("Request body must be a JSON object")
        fields = {k: v for k, v in fields.items() if k not in ("id", "status")}
        try:
            payload = ShipmentIn.model_validate(fields)
        except ValidationError as e:
            raise ShipmentValidationError(_validation_message(e))
        values = payload.model_dump(exclude_none=True)
        values["status"] = "PENDING"
        with smart_transaction(self.db, self.lock):
            return self.repo.add(values)

    def update(self, shipment_id: str, fields: Dict) -> Shipment:
        """
        Shallow merge: supplied fields overwrite, omitted fields keep their value.
        """
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise ShipmentValidationError("Request body must be a JSON object")
        fields = {k: v for k, v in fields.items() if k != "id"}
        try:
            patch = ShipmentUpdate.model_validate(fields)
        except ValidationError as e:
            raise ShipmentValidationError(_validation_message(e))
        with smart_transaction(self.db, self.lock):
            shipment = self._load(shipment_id)
            changes = {k: v for k, v in patch.model_dump().items() if k in fields}
            return self.repo.merge(shipment, changes)

    def delete(self, shipment_id: str) -> None:
        with smart_transaction(self.db, self.lock):
            shipment = self._load(shipment_id)
            self.repo.remove(shipment)

    def _load(self, shipment_id: str) -> Shipment:
        pk = parse_shipment_id(shipment_id)
        shipment = self.repo.get(pk) if pk is not None else None
        if not shipment:
            raise ShipmentNotFound("Shipment not found")
        return shipment
