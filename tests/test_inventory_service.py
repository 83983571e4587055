import pytest
from sqlalchemy import create_engine

from stockscan.database import init_db
from stockscan.exceptions import BarcodeImmutable, ProductAlreadyExists, ProductNotFound
from stockscan.schemas.product import ProductCreate, ProductUpdate
from stockscan.services import inventory


def _create(db, barcode, **fields):
    data = {"barcode": barcode, "name": "Item", "category": "Misc", "cost": 1.0, **fields}
    return inventory.create_product(db, ProductCreate(**data))


@pytest.mark.parametrize(
    "current, action, quantity, expected",
    [
        (5, "increase", 3, 8),
        (5, "decrease", 3, 2),
        (5, "decrease", 5, 0),
        (5, "decrease", 9, 0),
        (0, "decrease", 1, 0),
        (5, "set", 0, 0),
        (5, "set", 12, 12),
    ],
)
def test_apply_stock_action(current, action, quantity, expected):
    assert inventory.apply_stock_action(current, action, quantity) == expected


def test_apply_stock_action_rejects_unknown_action():
    with pytest.raises(ValueError):
        inventory.apply_stock_action(1, "double", 1)


def test_get_product_by_barcode_does_not_touch(db_session):
    product = _create(db_session, "p1")
    scanned = product.last_scanned
    db_session.expire_all()

    found = inventory.get_product_by_barcode(db_session, "p1")
    assert found.last_scanned == scanned
    assert inventory.get_product_by_barcode(db_session, "missing") is None


def test_touch_product_only_changes_last_scanned(db_session):
    product = _create(db_session, "p1", stock=4)
    product.last_scanned = None
    db_session.commit()

    touched = inventory.touch_product(db_session, product)
    assert touched.last_scanned is not None
    assert touched.stock == 4
    assert touched.name == "Item"


def test_create_product_conflict(db_session):
    _create(db_session, "p1")
    with pytest.raises(ProductAlreadyExists):
        _create(db_session, "p1", name="Other")


def test_create_strips_whitespace(db_session):
    product = _create(db_session, "  p2 ", name=" Pen ", category=" Office ")
    assert product.barcode == "p2"
    assert product.name == "Pen"
    assert product.category == "Office"


def test_missing_product_operations_raise_not_found(db_session):
    with pytest.raises(ProductNotFound):
        inventory.adjust_stock(db_session, "missing", "increase")
    with pytest.raises(ProductNotFound):
        inventory.update_product(db_session, "missing", ProductUpdate(name="x"))
    with pytest.raises(ProductNotFound):
        inventory.delete_product(db_session, "missing")


def test_update_product_keeps_unsent_fields(db_session):
    _create(db_session, "p1", cost=3.0, stock=7)
    product = inventory.update_product(db_session, "p1", ProductUpdate(name="Renamed"))
    assert product.name == "Renamed"
    assert product.cost == 3.0
    assert product.stock == 7


def test_update_product_rejects_new_barcode(db_session):
    _create(db_session, "p1")
    with pytest.raises(BarcodeImmutable):
        inventory.update_product(db_session, "p1", ProductUpdate(barcode="p9"))


def test_low_stock_filter_matches_definition(db_session):
    levels = [(0, 0), (0, 10), (3, 2), (10, 10), (11, 10), (50, 0), (1, 1)]
    for i, (stock, min_stock) in enumerate(levels):
        _create(db_session, f"b{i}", stock=stock, min_stock=min_stock)

    low = {p.barcode for p in inventory.list_products(db_session, low_stock=True)}
    expected = {f"b{i}" for i, (stock, min_stock) in enumerate(levels) if stock <= min_stock}
    assert low == expected


def test_stats_match_stored_products(db_session):
    _create(db_session, "a", category="Food", cost=2.5, stock=4, min_stock=1)
    _create(db_session, "b", category="Food", cost=10.0, stock=0, min_stock=3)
    _create(db_session, "c", category="Tools", cost=1.25, stock=8, min_stock=8)

    stats = inventory.get_inventory_stats(db_session)
    products = inventory.list_products(db_session)
    assert stats["total_products"] == 3
    assert stats["total_value"] == pytest.approx(sum(p.cost * p.stock for p in products))
    assert stats["low_stock_count"] == 2
    assert stats["categories_count"] == len({p.category for p in products})


def test_init_db_creates_tables(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    init_db(engine)
    with engine.connect() as conn:
        assert engine.dialect.has_table(conn, "products")


def test_init_db_exits_when_database_unreachable(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing-dir' / 'inventory.db'}")
    with pytest.raises(SystemExit):
        init_db(engine)
