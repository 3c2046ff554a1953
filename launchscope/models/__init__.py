"""Models package initialization."""
from launchscope.models.entities import (
    OpenGraphMetadata,
    Person,
    Product,
    SavedProduct,
    Shoutout,
    Topic,
    extract_username_from_url,
)
from launchscope.models.results import (
    PagedProductsResult,
    ProductResult,
    ProductsResult,
    TopicsResult,
    UserResult,
    UsersResult,
)

__all__ = [
    "OpenGraphMetadata",
    "Person",
    "Product",
    "SavedProduct",
    "Shoutout",
    "Topic",
    "extract_username_from_url",
    "PagedProductsResult",
    "ProductResult",
    "ProductsResult",
    "TopicsResult",
    "UserResult",
    "UsersResult",
]
