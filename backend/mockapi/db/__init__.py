import importlib

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from mockapi.config import settings
from mockapi.utils.log import get_logger

log = get_logger("mockapi.db", "DB")

Base = declarative_base()

# Seed rows every fresh engine starts with.
SEED_SHIPMENTS = [
    {"id": 101, "origin": "Singapore", "destination": "Rotterdam", "status": "IN_TRANSIT", "weight": 5000},
    {"id": 102, "origin": "Los Angeles", "destination": "Tokyo", "status": "PENDING", "weight": 1200},
]

SEED_INVENTORY = [
    {"sku": "WGT-001", "name": "Standard Widget", "stock": 150},
    {"sku": "GGT-999", "name": "Premium Gadget", "stock": 45},
]

MODEL_MODULES = [
    "mockapi.models.shipment",
    "mockapi.models.inventory_item",
]


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in url or "mode=memory" in url


def make_engine(database_url: str = None):
    """
    Build a SQLAlchemy engine for one mock API instance.

    In-memory SQLite (the default) gets a StaticPool so every session of the
    instance shares the single connection holding the data; each such call
    returns a brand new, isolated database. File-backed SQLite and other
    URLs point at shared storage and use the normal pool.
    """
    url = database_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, echo=False, **kwargs)
    return create_engine(url, future=True, echo=False)


def make_session_factory(engine):
    # rows are serialised after commit, keep their loaded state
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine, session_factory, reset: bool = False):
    """
    Create the schema and seed the shipment and inventory tables.

    Seeding is idempotent: rows already present are left alone, so calling
    this on a persistent DATABASE_URL does not duplicate data.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    from mockapi.models.inventory_item import InventoryItem
    from mockapi.models.shipment import Shipment

    if reset:
        log.info("Resetting database...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    with session_factory() as s:
        created = 0
        for ent in SEED_SHIPMENTS:
            if s.get(Shipment, ent["id"]) is None:
                s.add(Shipment(**ent))
                created += 1
        for ent in SEED_INVENTORY:
            if not s.query(InventoryItem).filter(InventoryItem.sku == ent["sku"]).first():
                s.add(InventoryItem(**ent))
                created += 1
        if created:
            s.commit()
        log.debug(f"init_db: seeded {created} rows")
