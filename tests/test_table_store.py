"""
Azure Table adapter tests against the in-memory fake service.
"""

import time
from dataclasses import dataclass

import pytest
from azure.core.exceptions import HttpResponseError, ServiceRequestError

from abcretailers.core.exceptions import (
    BackendUnavailableError,
    EntityConflictError,
    InvalidStoredEntityError,
    ProvisioningError,
    VersionConflictError,
)
from abcretailers.domain.entities import Customer, Order, Product, TableEntity, column
from fakes import FakeTableEntity


@pytest.fixture
def tables(gateway):
    return gateway.tables


async def _provisioned(tables):
    await tables.ensure_tables(tables.registry.table_names)
    return tables


@pytest.mark.asyncio
async def test_add_then_get_returns_equal_entity(tables):
    await _provisioned(tables)
    customer = Customer(name="Ann", surname="Lee", email="ann@example.com", username="ann", shipping_address="1 Main St")

    added = await tables.add(customer)
    fetched = await tables.get(Customer, "Customer", added.row_key)

    assert added.etag
    assert fetched == customer
    assert fetched.etag == added.etag
    assert fetched.timestamp is not None


@pytest.mark.asyncio
async def test_get_missing_returns_none(tables):
    await _provisioned(tables)
    assert await tables.get(Customer, "Customer", "missing") is None


@pytest.mark.asyncio
async def test_list_all_returns_every_entity_of_kind(tables):
    await _provisioned(tables)
    await tables.add(Product(product_name="Widget", price=9.99, stock_available=10))

    products = await tables.list_all(Product)

    assert len(products) == 1
    assert products[0].product_name == "Widget"
    assert products[0].price == 9.99
    assert await tables.list_all(Customer) == []


@pytest.mark.asyncio
async def test_duplicate_add_raises_conflict(tables):
    await _provisioned(tables)
    await tables.add(Customer(row_key="c-1", name="Ann"))

    with pytest.raises(EntityConflictError) as exc_info:
        await tables.add(Customer(row_key="c-1", name="Bob"))

    assert exc_info.value.error_code == "CONFLICT"
    assert exc_info.value.details["row_key"] == "c-1"
    assert (await tables.get(Customer, "Customer", "c-1")).name == "Ann"


@pytest.mark.asyncio
async def test_update_with_current_etag_changes_etag(tables):
    await _provisioned(tables)
    customer = await tables.add(Customer(name="Ann"))
    first_etag = customer.etag

    customer.name = "Annabel"
    updated = await tables.update(customer)
    fetched = await tables.get(Customer, "Customer", customer.row_key)

    assert updated.etag != first_etag
    assert fetched.name == "Annabel"
    assert fetched.etag == updated.etag


@pytest.mark.asyncio
async def test_stale_etag_update_fails_and_keeps_state(tables):
    await _provisioned(tables)
    created = await tables.add(Customer(name="Ann"))
    first_reader = await tables.get(Customer, "Customer", created.row_key)
    second_reader = await tables.get(Customer, "Customer", created.row_key)

    first_reader.name = "First"
    await tables.update(first_reader)

    second_reader.name = "Second"
    with pytest.raises(VersionConflictError) as exc_info:
        await tables.update(second_reader)

    assert exc_info.value.error_code == "VERSION_CONFLICT"
    assert (await tables.get(Customer, "Customer", created.row_key)).name == "First"


@pytest.mark.asyncio
async def test_update_without_etag_is_refused(tables):
    await _provisioned(tables)
    customer = await tables.add(Customer(name="Ann"))
    customer.etag = None

    with pytest.raises(VersionConflictError):
        await tables.update(customer)


@pytest.mark.asyncio
async def test_update_of_deleted_entity_is_version_conflict(tables):
    await _provisioned(tables)
    customer = await tables.add(Customer(name="Ann"))
    await tables.delete(Customer, "Customer", customer.row_key)

    with pytest.raises(VersionConflictError):
        await tables.update(customer)


@pytest.mark.asyncio
async def test_precondition_failed_status_maps_to_version_conflict(tables, account):
    await _provisioned(tables)
    customer = await tables.add(Customer(name="Ann"))
    error = HttpResponseError(message="Precondition Failed")
    error.status_code = 412
    account.fail("update_entity", error)

    with pytest.raises(VersionConflictError):
        await tables.update(customer)


@pytest.mark.asyncio
async def test_delete_missing_entity_succeeds(tables):
    await _provisioned(tables)
    await tables.delete(Customer, "Customer", "never-existed")


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped_with_key(tables, account):
    await _provisioned(tables)
    account.fail("get_entity", ServiceRequestError("connection refused"))

    with pytest.raises(BackendUnavailableError) as exc_info:
        await tables.get(Customer, "Customer", "c-1")

    error = exc_info.value
    assert error.operation == "get"
    assert error.details["entity_kind"] == "Customer"
    assert error.details["row_key"] == "c-1"
    assert isinstance(error.__cause__, ServiceRequestError)


@pytest.mark.asyncio
async def test_slow_backend_hits_operation_deadline(gateway, monkeypatch):
    tables = gateway.tables
    await _provisioned(tables)
    tables._operation_timeout = 0.05

    def slow_list():
        time.sleep(0.5)
        return []

    monkeypatch.setattr(tables._service, "list_tables", slow_list)

    with pytest.raises(BackendUnavailableError):
        await tables.existing_tables()


@pytest.mark.asyncio
async def test_ensure_tables_is_idempotent(tables, account):
    await tables.ensure_tables(["Customers", "Products"])
    await tables.ensure_tables(["Customers", "Products"])
    assert sorted(account.tables) == ["Customers", "Products"]
    assert await tables.existing_tables() == {"Customers", "Products"}


@pytest.mark.asyncio
async def test_ensure_tables_failure_is_provisioning_error(tables, account):
    account.fail("create_table_if_not_exists", HttpResponseError(message="Forbidden"))
    with pytest.raises(ProvisioningError):
        await tables.ensure_tables(["Customers"])


@dataclass
class Category(TableEntity):
    title: str = column("Title", "")


@pytest.mark.asyncio
async def test_unregistered_kind_is_stored_under_its_registry_partition(tables, account):
    await tables.ensure_tables(["Categorys"])
    category = Category(title="Garden")

    await tables.add(category)

    descriptor = tables.registry.resolve(Category)
    assert category.partition_key == descriptor.partition_key == "Category"
    assert list(account.tables["Categorys"]) == [("Category", category.row_key)]
    fetched = await tables.get(Category, "Category", category.row_key)
    assert fetched.title == "Garden"


@pytest.mark.asyncio
async def test_explicit_partition_key_is_kept(tables, account):
    await tables.ensure_tables(["Categorys"])
    await tables.add(Category(partition_key="Seasonal", row_key="c-1", title="Xmas"))
    assert ("Seasonal", "c-1") in account.tables["Categorys"]


@pytest.mark.asyncio
async def test_unreadable_stored_row_names_the_row(tables, account):
    await _provisioned(tables)
    await tables.add(Order(row_key="o-good", quantity=1, unit_price=2.0))
    account.tables["Orders"][("Order", "o-bad")] = FakeTableEntity(
        {"PartitionKey": "Order", "RowKey": "o-bad", "Status": "Lost"},
        metadata={"etag": 'W/"1"'},
    )

    with pytest.raises(InvalidStoredEntityError) as exc_info:
        await tables.list_all(Order)
    assert exc_info.value.details["row_key"] == "o-bad"
    assert "Status" in exc_info.value.message

    with pytest.raises(InvalidStoredEntityError):
        await tables.get(Order, "Order", "o-bad")
    assert (await tables.get(Order, "Order", "o-good")).quantity == 1
