"""Entity Repository — verifies generic CRUD and predicate queries against SQLite.

Invariants:
    - get_by_id(create(p).id) equals p plus generated id and timestamps
    - find returns None on a miss; get_by_id raises NotFoundError
    - Unknown field names raise InvalidFilterError before any IO
    - Constraint violations surface as PersistenceError
    - Several calls sharing one transaction commit or roll back together
    - Export rows come back in (created_at, id) order unless told otherwise
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from storefront.core.errors import (
    InvalidFilterError, NotFoundError, PersistenceError, ValidationError,
)
from tests.fakes import product_data


@pytest.fixture
def products(services):
    return services.products.repository


async def test_create_then_get_round_trips_fields(products):
    data = product_data()
    created = await products.create(data)

    fetched = await products.get_by_id(created.id)
    assert fetched.id == created.id
    assert fetched.created_at is not None
    assert fetched.updated_at is not None
    for field_name, value in data.items():
        assert getattr(fetched, field_name) == value


async def test_get_by_id_accepts_string_ids(products, product):
    fetched = await products.get_by_id(str(product.id))
    assert fetched.id == product.id


async def test_get_by_id_missing_raises_not_found(products):
    with pytest.raises(NotFoundError) as exc:
        await products.get_by_id(uuid4())
    assert exc.value.context.entity == "Product"


async def test_get_by_id_malformed_id_is_not_found(products):
    with pytest.raises(NotFoundError):
        await products.get_by_id("not-a-uuid")


async def test_find_returns_none_on_miss(products, product):
    assert await products.find({"title": "Nope"}) is None
    found = await products.find({"title": "Space Odyssey"})
    assert found.id == product.id


async def test_search_is_exact_and_and_combined(products):
    await products.create(product_data(title="A", genre="Puzzle", support="PC"))
    await products.create(product_data(title="B", genre="Puzzle", support="Mac"))
    await products.create(product_data(title="C", genre="Racing", support="PC"))

    records = await products.search({"genre": "Puzzle", "support": "PC"})
    assert [r.title for r in records] == ["A"]
    assert await products.search({"genre": "Puzz"}) == []


async def test_search_take_skip_and_order(products):
    for title in ("c", "a", "b"):
        await products.create(product_data(title=title))
    records = await products.search(order_by={"title": "desc"}, take=2, skip=1)
    assert [r.title for r in records] == ["b", "a"]


async def test_count(products):
    await products.create(product_data(genre="Puzzle"))
    await products.create(product_data(genre="Puzzle"))
    await products.create(product_data(genre="Racing"))
    assert await products.count() == 3
    assert await products.count({"genre": "Puzzle"}) == 2


async def test_unknown_predicate_field_rejected(products):
    with pytest.raises(InvalidFilterError):
        await products.search({"colour": "red"})


async def test_unknown_sort_direction_rejected(products):
    with pytest.raises(ValidationError):
        await products.search(order_by={"title": "sideways"})


async def test_generated_fields_not_writable(products):
    with pytest.raises(ValidationError):
        await products.create(product_data(id=uuid4()))


async def test_update_changes_fields(products, product):
    updated = await products.update(product.id, {"price": 19.99})
    assert updated.price == 19.99
    assert (await products.get_by_id(product.id)).price == 19.99


async def test_update_missing_raises_not_found(products):
    with pytest.raises(NotFoundError):
        await products.update(uuid4(), {"price": 1.0})


async def test_update_many_returns_affected_rows(products):
    await products.create(product_data(genre="Puzzle"))
    await products.create(product_data(genre="Puzzle"))
    await products.create(product_data(genre="Racing"))

    affected = await products.update_many({"genre": "Puzzle"}, {"support": "Switch"})
    assert affected == 2
    assert await products.count({"support": "Switch"}) == 2


async def test_delete_returns_deleted_record(products, product):
    deleted = await products.delete(product.id)
    assert deleted.id == product.id
    assert await products.find({"id": product.id}) is None


async def test_delete_many(products):
    await products.create(product_data(genre="Puzzle"))
    await products.create(product_data(genre="Racing"))
    assert await products.delete_many({"genre": "Puzzle"}) == 1
    assert await products.count() == 1


async def test_constraint_violation_is_persistence_error(services, partner_code):
    with pytest.raises(PersistenceError):
        await services.access_codes.repository.create(
            {"code": "PARTNER-42", "discount": 0.0, "assigned_to": "dup"},
        )


async def test_check_constraint_is_persistence_error(products):
    with pytest.raises(PersistenceError):
        await products.create(product_data(price=-1.0))


async def test_shared_transaction_rolls_back_together(services, products):
    with pytest.raises(PersistenceError):
        async with services.storage.transaction() as db:
            await products.create(product_data(title="kept?"), db=db)
            await products.create(product_data(price=-5.0), db=db)
    assert await products.count() == 0


async def test_create_many_inserts_all(products):
    records = await products.create_many(
        [product_data(title="x"), product_data(title="y")],
    )
    assert len(records) == 2
    assert await products.count() == 2


async def test_create_default_accepts_explicit_id(services):
    code_id = uuid4()
    record = await services.access_codes.repository.create_default(
        {"id": code_id, "code": "SEED", "discount": 0.0, "assigned_to": "seed"},
    )
    assert record.id == code_id


async def test_include_loads_relationship(services, product, default_code):
    order = await services.orders.repository.create({
        "customer_name": "Ada", "customer_email": "ada@example.com",
        "code": default_code.code, "total_amount": 29.99,
        "assigned_to": default_code.assigned_to,
    })
    await services.line_items.create(
        {"order_id": order.id, "product_id": product.id, "quantity": 1},
    )
    loaded = await services.orders.repository.get_by_id(order.id, include=("items",))
    assert [item.quantity for item in loaded.items] == [1]


async def test_unknown_include_rejected(products, product):
    with pytest.raises(InvalidFilterError):
        await products.get_by_id(product.id, include=("reviews",))


async def test_fetch_rows_omits_generated_fields(products, product):
    rows = await products.fetch_rows()
    assert len(rows) == 1
    assert "id" not in rows[0]
    assert "created_at" not in rows[0]
    assert rows[0]["title"] == "Space Odyssey"


async def test_fetch_rows_omit_override(products, product):
    rows = await products.fetch_rows(omit=("description",))
    assert rows[0]["id"] == product.id
    assert "description" not in rows[0]


async def test_fetch_rows_defaults_to_insertion_order(products):
    later = datetime(2026, 1, 2, tzinfo=timezone.utc)
    earlier = datetime(2026, 1, 1, tzinfo=timezone.utc)
    await products.create_default(
        {**product_data(title="Second"), "id": uuid4(), "created_at": later, "updated_at": later},
    )
    await products.create_default(
        {**product_data(title="First"), "id": uuid4(), "created_at": earlier, "updated_at": earlier},
    )
    rows = await products.fetch_rows()
    assert [r["title"] for r in rows] == ["First", "Second"]


async def test_get_all(products):
    await products.create(product_data(title="b"))
    await products.create(product_data(title="a"))
    records = await products.get_all(order_by={"title": "asc"})
    assert [r.title for r in records] == ["a", "b"]
