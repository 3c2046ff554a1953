"""
Launchscope - FastAPI Application
Exposes the scraping operations and the saved-products store as a JSON API.
"""
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from launchscope import __version__
from launchscope.config import config
from launchscope.layers.operations import ProductHuntScraper
from launchscope.models.entities import Product, SavedProduct
from launchscope.models.results import ProductResult, ProductsResult, TopicsResult, UsersResult
from launchscope.storage.saved_products import SavedProductStore
from launchscope.utils.logger import get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Launchscope",
    description="Resilient Product Hunt listing scraper",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = get_logger("main")

_scraper = ProductHuntScraper()
_store = SavedProductStore()


def get_scraper() -> ProductHuntScraper:
    return _scraper


def get_store() -> SavedProductStore:
    return _store


class RemoveResponse(BaseModel):
    """Response model for removing a saved product."""
    product_id: str
    removed: bool


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/frontpage", response_model=ProductsResult)
async def frontpage(scraper: ProductHuntScraper = Depends(get_scraper)):
    """Featured products on today's homepage."""
    trace_id = set_trace_id()
    logger.info("frontpage_request", trace_id=trace_id)
    return await scraper.get_frontpage_products()


@app.get("/api/trending", response_model=ProductsResult)
async def trending(scraper: ProductHuntScraper = Depends(get_scraper)):
    """Popular products on the homepage."""
    trace_id = set_trace_id()
    logger.info("trending_request", trace_id=trace_id)
    return await scraper.get_trending_products()


@app.get("/api/topics", response_model=TopicsResult)
async def topics(scraper: ProductHuntScraper = Depends(get_scraper)):
    """Topic directory."""
    trace_id = set_trace_id()
    logger.info("topics_request", trace_id=trace_id)
    return await scraper.get_topics()


@app.get("/api/search", response_model=ProductsResult)
async def search(
    q: str = Query(..., min_length=1, description="Search text"),
    scraper: ProductHuntScraper = Depends(get_scraper),
):
    """Products matching a search query."""
    trace_id = set_trace_id()
    logger.info("search_request", query=q, trace_id=trace_id)
    return await scraper.search_products(q)


@app.get("/api/search/users", response_model=UsersResult)
async def search_users(
    q: str = Query(..., min_length=1, description="Search text"),
    scraper: ProductHuntScraper = Depends(get_scraper),
):
    """Users matching a search query."""
    trace_id = set_trace_id()
    logger.info("search_users_request", query=q, trace_id=trace_id)
    return await scraper.search_users(q)


@app.get("/api/products/{slug}", response_model=ProductResult)
async def product_details(slug: str, scraper: ProductHuntScraper = Depends(get_scraper)):
    """Fully enriched product detail."""
    trace_id = set_trace_id()
    logger.info("product_details_request", slug=slug, trace_id=trace_id)
    return await scraper.get_product_details(slug)


# Saved products
@app.get("/api/saved", response_model=List[SavedProduct])
async def list_saved(
    q: Optional[str] = Query(None, description="Filter by name or tagline"),
    store: SavedProductStore = Depends(get_store),
):
    """Saved products, optionally filtered."""
    return store.search(q or "")


@app.post("/api/saved", response_model=SavedProduct)
async def save_product(product: Product, store: SavedProductStore = Depends(get_store)):
    """Bookmark a product. Saving twice keeps the first record."""
    trace_id = set_trace_id()
    logger.info("save_product_request", product_id=product.id, trace_id=trace_id)
    return store.save(product)


@app.delete("/api/saved/{product_id}", response_model=RemoveResponse)
async def remove_saved(product_id: str, store: SavedProductStore = Depends(get_store)):
    """Remove a bookmark."""
    if not store.is_saved(product_id):
        raise HTTPException(status_code=404, detail=f"Product {product_id} is not saved")
    return RemoveResponse(product_id=product_id, removed=store.remove(product_id))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
