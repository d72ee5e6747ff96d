import json

from models.storage import StoredState
from utils.storage import DbStorage


def test_db_storage_set_get_remove(db, shopper):
    storage = DbStorage(db, shopper.id)
    assert storage.get_item("storefront:cart") is None

    storage.set_item("storefront:cart", json.dumps({"items": []}))
    storage.set_item("storefront:cart", json.dumps({"items": [1]}))

    assert json.loads(storage.get_item("storefront:cart")) == {"items": [1]}
    assert db.query(StoredState).filter(StoredState.user_id == shopper.id).count() == 1

    storage.remove_item("storefront:cart")
    assert storage.get_item("storefront:cart") is None


def test_db_storage_first_write_loses_insert_race(db, shopper, monkeypatch):
    # Another request inserted the row after this one looked for it
    db.add(StoredState(user_id=shopper.id, key="storefront:cart", value={"items": ["theirs"]}))
    db.commit()

    storage = DbStorage(db, shopper.id)
    lookup = storage._row
    calls = []

    def stale_then_fresh(key):
        calls.append(key)
        return None if len(calls) == 1 else lookup(key)

    monkeypatch.setattr(storage, "_row", stale_then_fresh)

    storage.set_item("storefront:cart", json.dumps({"items": ["mine"]}))

    rows = db.query(StoredState).filter(StoredState.user_id == shopper.id).all()
    assert len(rows) == 1
    assert rows[0].value == {"items": ["mine"]}
