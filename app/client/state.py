"""View state for the product list screen and its pure transitions."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Tuple, Union

from app.client.api import ApiError
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate


@dataclass(frozen=True)
class ProductForm:
    """
    Pending values of a product form.

    Values are kept as entered (a number or the text of an input box) and
    only validated when a payload is built, so a malformed price surfaces as
    a ValidationError from ``to_create``/``to_update``.
    """
    name: str = ""
    price: Union[Decimal, float, int, str] = Decimal("0")

    @classmethod
    def from_product(cls, product: ProductResponse) -> "ProductForm":
        return cls(name=product.name, price=product.price)

    def to_create(self) -> ProductCreate:
        return ProductCreate(name=self.name, price=self.price)

    def to_update(self, product_id: int) -> ProductUpdate:
        return ProductUpdate(id=product_id, name=self.name, price=self.price)


@dataclass(frozen=True)
class ViewState:
    """
    Everything the product screen renders.

    ``editing_id`` is None while viewing; otherwise it names the row shown as
    an inline form holding ``edit_form``.
    """
    products: Tuple[ProductResponse, ...] = ()
    new_product: ProductForm = field(default_factory=ProductForm)
    editing_id: Optional[int] = None
    edit_form: ProductForm = field(default_factory=ProductForm)
    last_error: Optional[ApiError] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def with_products(self, products) -> "ViewState":
        return replace(self, products=tuple(products))

    def with_error(self, error: Optional[ApiError]) -> "ViewState":
        return replace(self, last_error=error)

    def set_new_product(self, name: Optional[str] = None, price=None) -> "ViewState":
        return replace(self, new_product=_edit(self.new_product, name, price))

    def clear_new_product(self) -> "ViewState":
        return replace(self, new_product=ProductForm())

    def start_edit(self, product: ProductResponse) -> "ViewState":
        return replace(self, editing_id=product.id, edit_form=ProductForm.from_product(product))

    def set_edit_form(self, name: Optional[str] = None, price=None) -> "ViewState":
        return replace(self, edit_form=_edit(self.edit_form, name, price))

    def cancel_edit(self) -> "ViewState":
        return replace(self, editing_id=None, edit_form=ProductForm())


def _edit(form: ProductForm, name: Optional[str], price) -> ProductForm:
    changes = {}
    if name is not None:
        changes["name"] = name
    if price is not None:
        changes["price"] = price
    return replace(form, **changes)
