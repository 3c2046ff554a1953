"""
Result envelopes returned by every public operation.
Errors are values: an operation returns an empty collection plus an error string instead of raising.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from launchscope.models.entities import Person, Product, Topic


class OperationResult(BaseModel):
    """Common shape for operation results."""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProductsResult(OperationResult):
    products: List[Product] = Field(default_factory=list)

    @property
    def items(self) -> List[Product]:
        return self.products


class PagedProductsResult(ProductsResult):
    """Products from the GraphQL API, with cursor pagination info."""
    has_next_page: bool = False
    end_cursor: str = ""


class TopicsResult(OperationResult):
    topics: List[Topic] = Field(default_factory=list)

    @property
    def items(self) -> List[Topic]:
        return self.topics


class UsersResult(OperationResult):
    users: List[Person] = Field(default_factory=list)

    @property
    def items(self) -> List[Person]:
        return self.users


class ProductResult(OperationResult):
    product: Optional[Product] = None

    @property
    def items(self) -> List[Product]:
        return [self.product] if self.product else []


class UserResult(OperationResult):
    user: Optional[Person] = None

    @property
    def items(self) -> List[Person]:
        return [self.user] if self.user else []
