"""
Async HTTP client for the product API.

Calls never raise for HTTP or network failures. Each one returns either
``Ok(value)`` or ``Err(ApiError)`` so the caller decides whether to retry,
show a message or ignore the failure.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

import httpx
from pydantic import ValidationError

from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Classification of a failed API call."""
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    INVALID = "invalid"
    FAILURE = "failure"


@dataclass(frozen=True)
class ApiError:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ApiError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]

_STATUS_KINDS = {
    404: ErrorKind.NOT_FOUND,
    400: ErrorKind.BAD_REQUEST,
    422: ErrorKind.INVALID,
}


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text
    kind = _STATUS_KINDS.get(response.status_code, ErrorKind.FAILURE)
    return ApiError(kind=kind, message=str(detail), status_code=response.status_code)


class ProductApiClient:
    """
    Client for the ``/api/products`` resource.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one bound to an ASGI transport); otherwise one is created for
    ``base_url`` and closed by ``aclose()``.
    """

    def __init__(
        self,
        base_url: str = "",
        client: Optional[httpx.AsyncClient] = None,
        prefix: str = "/api/products",
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url)
        self._prefix = prefix

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ProductApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def list_products(self) -> Result[List[ProductResponse]]:
        result = await self._send("GET", self._prefix, expected=200)
        if isinstance(result, Err):
            return result
        return self._parse_list(result.value)

    async def get_product(self, product_id: int) -> Result[ProductResponse]:
        result = await self._send("GET", f"{self._prefix}/{product_id}", expected=200)
        if isinstance(result, Err):
            return result
        return self._parse_one(result.value)

    async def create_product(self, product: ProductCreate) -> Result[ProductResponse]:
        result = await self._send(
            "POST",
            self._prefix,
            expected=201,
            json=product.model_dump(mode="json", exclude={"id"}),
        )
        if isinstance(result, Err):
            return result
        return self._parse_one(result.value)

    async def update_product(self, product_id: int, product: ProductUpdate) -> Result[None]:
        result = await self._send(
            "PUT",
            f"{self._prefix}/{product_id}",
            expected=204,
            json=product.model_dump(mode="json"),
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def delete_product(self, product_id: int) -> Result[None]:
        result = await self._send("DELETE", f"{self._prefix}/{product_id}", expected=204)
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def _send(self, method: str, url: str, expected: int, **kwargs) -> Result[httpx.Response]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            return Err(ApiError(kind=ErrorKind.FAILURE, message=str(e)))

        if response.status_code != expected:
            error = _error_from_response(response)
            logger.warning(f"{method} {url} returned {response.status_code}: {error.message}")
            return Err(error)

        return Ok(response)

    def _parse_one(self, response: httpx.Response) -> Result[ProductResponse]:
        try:
            return Ok(ProductResponse.model_validate(response.json()))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed product payload: {e}")
            return Err(ApiError(ErrorKind.FAILURE, str(e), response.status_code))

    def _parse_list(self, response: httpx.Response) -> Result[List[ProductResponse]]:
        try:
            return Ok([ProductResponse.model_validate(item) for item in response.json()])
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Malformed product list payload: {e}")
            return Err(ApiError(ErrorKind.FAILURE, str(e), response.status_code))
