"""
Controller for the product list screen.

Every action that reaches the server re-fetches the list afterward, whether
the call succeeded or not, and returns the new ``ViewState``. Nothing is
applied optimistically; the list shown is always what the server returned
last. A failed action is logged and recorded in ``last_error`` with the
forms and edit mode left as they were, so the caller can retry or show a
message. Overlapping actions are not coordinated.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from app.client.api import ApiError, Err, ErrorKind, ProductApiClient
from app.client.state import ViewState

logger = logging.getLogger(__name__)


class ProductsView:
    def __init__(self, api: ProductApiClient, state: Optional[ViewState] = None):
        self.api = api
        self.state = state or ViewState()

    async def mount(self) -> ViewState:
        """Load the product list once, when the view first appears."""
        return await self.refresh()

    async def refresh(self) -> ViewState:
        result = await self.api.list_products()
        if isinstance(result, Err):
            return self._fail("load products", result.error)
        self.state = self.state.with_products(result.value).with_error(None)
        return self.state

    async def submit_create(self) -> ViewState:
        """Create a product from the new-product form, clear the form and reload."""
        try:
            payload = self.state.new_product.to_create()
        except ValidationError as e:
            # Rejected locally, the server was never called
            return self._fail("create product", ApiError(ErrorKind.INVALID, str(e)))

        result = await self.api.create_product(payload)
        if isinstance(result, Err):
            return await self._fail_and_refresh("create product", result.error)

        self.state = self.state.clear_new_product()
        return await self.refresh()

    async def remove(self, product_id: int) -> ViewState:
        result = await self.api.delete_product(product_id)
        if isinstance(result, Err):
            return await self._fail_and_refresh(f"delete product #{product_id}", result.error)
        return await self.refresh()

    def start_edit(self, product_id: int) -> ViewState:
        """Switch the row for ``product_id`` into an inline form."""
        for product in self.state.products:
            if product.id == product_id:
                self.state = self.state.start_edit(product)
                break
        else:
            logger.warning(f"Product #{product_id} is not in the current list")
        return self.state

    def cancel_edit(self) -> ViewState:
        self.state = self.state.cancel_edit()
        return self.state

    async def submit_update(self) -> ViewState:
        """Send the edit form for the row being edited, leave edit mode and reload."""
        if not self.state.is_editing:
            return self.state

        product_id = self.state.editing_id
        try:
            payload = self.state.edit_form.to_update(product_id)
        except ValidationError as e:
            return self._fail(f"update product #{product_id}", ApiError(ErrorKind.INVALID, str(e)))

        result = await self.api.update_product(product_id, payload)
        if isinstance(result, Err):
            return await self._fail_and_refresh(f"update product #{product_id}", result.error)

        self.state = self.state.cancel_edit()
        return await self.refresh()

    def _fail(self, action: str, error: ApiError) -> ViewState:
        logger.warning(f"Could not {action}: {error.message}")
        self.state = self.state.with_error(error)
        return self.state

    async def _fail_and_refresh(self, action: str, error: ApiError) -> ViewState:
        """Reload the list after a failed call, keeping that call's error."""
        await self.refresh()
        return self._fail(action, error)
