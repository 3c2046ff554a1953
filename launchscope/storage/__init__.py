"""Storage package initialization."""
from launchscope.storage.saved_products import SavedProductStore

__all__ = ["SavedProductStore"]
