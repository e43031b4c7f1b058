"""
Pydantic models for catalog search requests and responses.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogQuery(BaseModel):
    """Inbound search parameters relayed to the reseller catalog.

    Values are kept as strings and forwarded verbatim; missing values fall
    back to the defaults below and nothing is ever rejected.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page_number: str = Field("1", alias="pageNumber")
    page_size: str = Field("25", alias="pageSize")
    type: str = Field("IM::any", description="Vendor resource-type filter.")
    keywords: tuple[str, ...] = Field(default=(), alias="keyword")

    def upstream_params(self) -> list[tuple[str, str]]:
        """Query parameters in the order the vendor receives them."""
        params = [
            ("pageNumber", self.page_number),
            ("pageSize", self.page_size),
            ("type", self.type),
        ]
        params.extend(("keyword", keyword) for keyword in self.keywords)
        return params

    def cache_key(self) -> tuple:
        return (self.page_number, self.page_size, self.type, self.keywords)


class Product(BaseModel):
    """A single catalog entry as rendered by the browser UI."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., description="Normalized unique id (reseller part number).")
    sku: str
    title: str
    vendor_name: Optional[str] = Field(None, alias="vendorName")
    price: Optional[float] = None
    currency: Optional[str] = None
    stock: Optional[int] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")


class CatalogResponse(BaseModel):
    """One page of search results."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    correlation_id: str = Field("", alias="correlationId")
    items: List[Product] = Field(default_factory=list)
    page: int = 1
    page_size: int = Field(0, alias="pageSize")
    total_pages: Optional[int] = Field(None, alias="totalPages")
    total_items: Optional[int] = Field(None, alias="totalItems")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CatalogErrorResponse(BaseModel):
    """Structured error returned by the proxy instead of raising."""

    error: str
    details: str


__all__ = [
    "CatalogErrorResponse",
    "CatalogQuery",
    "CatalogResponse",
    "Product",
]
