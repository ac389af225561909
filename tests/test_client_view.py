"""Tests for the product screen controller."""
from decimal import Decimal

import httpx
import pytest

from app.client.api import ErrorKind, ProductApiClient
from app.client.view import ProductsView
from app.schemas.product import ProductCreate

pytestmark = pytest.mark.anyio


async def add(view, name, price):
    view.state = view.state.set_new_product(name=name, price=Decimal(price))
    return await view.submit_create()


async def test_mount_loads_empty_list(api_client):
    state = await ProductsView(api_client).mount()

    assert state.products == ()
    assert state.last_error is None


async def test_submit_create_clears_form_and_refetches(api_client):
    view = ProductsView(api_client)
    await view.mount()

    state = await add(view, "Widget", "9.99")

    assert [(p.name, p.price) for p in state.products] == [("Widget", Decimal("9.99"))]
    assert state.new_product.name == ""


async def test_remove_refetches(api_client):
    view = ProductsView(api_client)
    await add(view, "Keep", "1")
    state = await add(view, "Drop", "2")
    drop_id = state.products[1].id

    state = await view.remove(drop_id)

    assert [p.name for p in state.products] == ["Keep"]


async def test_edit_and_submit_update(api_client):
    view = ProductsView(api_client)
    state = await add(view, "Widget", "9.99")
    product_id = state.products[0].id

    state = view.start_edit(product_id)
    assert state.edit_form.price == Decimal("9.99")

    view.state = view.state.set_edit_form(price=Decimal("12.50"))
    state = await view.submit_update()

    assert not state.is_editing
    assert state.products[0].id == product_id
    assert state.products[0].price == Decimal("12.50")


async def test_cancel_edit_makes_no_call(api_client):
    view = ProductsView(api_client)
    state = await add(view, "Widget", "9.99")

    view.start_edit(state.products[0].id)
    view.state = view.state.set_edit_form(name="Gadget")
    state = view.cancel_edit()

    assert not state.is_editing
    assert state.products[0].name == "Widget"
    assert (await api_client.get_product(state.products[0].id)).value.name == "Widget"


async def test_submit_update_without_edit_is_noop(api_client):
    view = ProductsView(api_client)
    before = await view.mount()

    assert await view.submit_update() is before


async def test_start_edit_unknown_row_keeps_state(api_client):
    view = ProductsView(api_client)
    before = await view.mount()

    assert view.start_edit(42) is before


async def test_blank_create_form_is_reported(api_client):
    view = ProductsView(api_client)
    await view.mount()

    state = await view.submit_create()

    assert state.last_error.kind is ErrorKind.INVALID
    assert state.products == ()


async def test_remove_missing_product_surfaces_error(api_client):
    view = ProductsView(api_client)
    await view.mount()

    state = await view.remove(9999)

    assert state.last_error.kind is ErrorKind.NOT_FOUND


async def test_failed_update_stays_in_edit_mode(api_client):
    view = ProductsView(api_client)
    state = await add(view, "Widget", "9.99")
    product_id = state.products[0].id
    view.start_edit(product_id)

    await api_client.delete_product(product_id)
    state = await view.submit_update()

    assert state.is_editing
    assert state.last_error.kind is ErrorKind.NOT_FOUND
    assert state.products == ()


async def test_network_failure_keeps_last_list():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(refuse), base_url="http://api"
    ) as http:
        state = await ProductsView(ProductApiClient(client=http)).mount()

    assert state.products == ()
    assert state.last_error.kind is ErrorKind.FAILURE


async def test_failed_create_still_refetches():
    """Test a failed create reloads the list and keeps the form and the error."""
    calls = []

    def upstream(request):
        calls.append(request.method)
        if request.method == "POST":
            return httpx.Response(500, json={"detail": "Internal Server Error"})
        return httpx.Response(200, json=[{"id": 1, "name": "Existing", "price": 5.0}])

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(upstream), base_url="http://api"
    ) as http:
        view = ProductsView(ProductApiClient(client=http))
        view.state = view.state.set_new_product(name="Widget", price="9.99")
        state = await view.submit_create()

    assert calls == ["POST", "GET"]
    assert [p.name for p in state.products] == ["Existing"]
    assert state.new_product.name == "Widget"
    assert state.last_error.kind is ErrorKind.FAILURE


async def test_failed_remove_still_refetches(api_client):
    view = ProductsView(api_client)
    await add(view, "Mine", "1")
    await api_client.create_product(ProductCreate(name="Added elsewhere", price=Decimal("2")))

    state = await view.remove(9999)

    assert [p.name for p in state.products] == ["Mine", "Added elsewhere"]
    assert state.last_error.kind is ErrorKind.NOT_FOUND


async def test_malformed_price_is_reported(api_client):
    """Test a non-numeric price is recorded as an error, not raised."""
    view = ProductsView(api_client)
    await view.mount()
    view.state = view.state.set_new_product(name="Widget", price="abc")

    state = await view.submit_create()

    assert state.last_error.kind is ErrorKind.INVALID
    assert state.products == ()
    assert state.new_product.price == "abc"


async def test_price_with_too_many_decimals_is_reported(api_client):
    view = ProductsView(api_client)
    await view.mount()
    view.state = view.state.set_new_product(name="Widget", price="0.125")

    state = await view.submit_create()

    assert state.last_error.kind is ErrorKind.INVALID
    assert (await api_client.list_products()).value == []
