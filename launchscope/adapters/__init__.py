"""Adapters package initialization."""
from launchscope.adapters.fetcher import DocumentFetcher
from launchscope.adapters.graphql_client import ProductHuntApiClient, TimeRange

__all__ = ["DocumentFetcher", "ProductHuntApiClient", "TimeRange"]
