"""
Saved-products store.
A JSON file holding the list of products a user bookmarked, keyed by product id.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from launchscope.config import config
from launchscope.models.entities import Product, SavedProduct
from launchscope.utils.logger import StageLogger

_SAVED_LIST = TypeAdapter(List[SavedProduct])


class SavedProductStore:
    """File-backed list of SavedProduct records."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path or config.SAVED_PRODUCTS_PATH)
        self.logger = StageLogger("saved_products")

    def list(self) -> List[SavedProduct]:
        """All saved products in save order; a missing or corrupt file reads as empty."""
        if not self.path.exists():
            return []

        try:
            return _SAVED_LIST.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            self.logger.log_error(
                f"Error parsing saved products: {str(e)}",
                error_type="storage_read",
                path=str(self.path),
            )
            return []

    def _write(self, products: List[SavedProduct]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_SAVED_LIST.dump_json(products, indent=2))

    def save(self, product: Product) -> SavedProduct:
        """Bookmark `product`; saving an already saved product is a no-op."""
        saved = self.list()
        for existing in saved:
            if existing.product_id == product.id:
                return existing

        record = SavedProduct(
            id=f"saved-{product.id}",
            product_id=product.id,
            name=product.name,
            tagline=product.tagline,
            url=product.url,
            thumbnail=product.thumbnail,
            saved_at=datetime.now(timezone.utc).isoformat(),
        )
        saved.append(record)
        self._write(saved)
        self.logger.log_action("save_product", "completed", product_id=product.id)
        return record

    def remove(self, product_id: str) -> bool:
        """Drop a bookmark. Returns whether anything was removed."""
        saved = self.list()
        remaining = [p for p in saved if p.product_id != product_id]
        if len(remaining) == len(saved):
            return False
        self._write(remaining)
        self.logger.log_action("remove_product", "completed", product_id=product_id)
        return True

    def is_saved(self, product_id: str) -> bool:
        return any(p.product_id == product_id for p in self.list())

    def search(self, query: str) -> List[SavedProduct]:
        """Case-insensitive substring match on name or tagline."""
        saved = self.list()
        if not query:
            return saved

        needle = query.lower()
        return [
            p for p in saved
            if needle in p.name.lower() or needle in p.tagline.lower()
        ]
