from contextlib import contextmanager, nullcontext
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session, lock=None) -> Iterator:
    """
    Run a block inside a transaction on `session`, optionally holding `lock`.
    Joins an active transaction with a SAVEPOINT, otherwise begins (and on
    exit commits) a fresh one.
    Usage:
        with smart_transaction(db, store_lock):
            ... DB work ...
    """
    guard = lock if lock is not None else nullcontext()
    with guard:
        if session.in_transaction():
            cm = session.begin_nested()
        else:
            cm = session.begin()
        with cm:
            yield
