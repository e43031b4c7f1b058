"""Public schema exports."""

from .catalog import CatalogErrorResponse, CatalogQuery, CatalogResponse, Product

__all__ = [
    "CatalogErrorResponse",
    "CatalogQuery",
    "CatalogResponse",
    "Product",
]
