import pytest
from fastapi.testclient import TestClient

from launchscope.main import app, get_scraper, get_store
from launchscope.models.entities import Product, Topic
from launchscope.models.results import ProductResult, ProductsResult, TopicsResult, UsersResult
from launchscope.storage.saved_products import SavedProductStore

ALPHA = Product(id="1", name="Alpha", tagline="Ship faster", url="https://ph.test/posts/alpha")


class FakeScraper:
    def __init__(self):
        self.queries = []

    async def get_frontpage_products(self):
        return ProductsResult(products=[ALPHA])

    async def get_trending_products(self):
        return ProductsResult(error="Could not find popular products")

    async def get_topics(self):
        return TopicsResult(topics=[Topic(id="t1", name="AI", slug="ai")])

    async def search_products(self, query):
        self.queries.append(query)
        return ProductsResult(products=[ALPHA])

    async def search_users(self, query):
        self.queries.append(query)
        return UsersResult()

    async def get_product_details(self, slug):
        return ProductResult(product=ALPHA.model_copy(update={"daily_rank": 1}))


@pytest.fixture
def scraper():
    return FakeScraper()


@pytest.fixture
def client(scraper, tmp_path):
    store = SavedProductStore(tmp_path / "saved.json")
    app.dependency_overrides[get_scraper] = lambda: scraper
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_frontpage(client):
    body = client.get("/api/frontpage").json()
    assert body["error"] is None
    assert body["products"][0]["name"] == "Alpha"


def test_errors_are_returned_in_the_envelope(client):
    body = client.get("/api/trending").json()
    assert body == {"error": "Could not find popular products", "products": []}


def test_topics(client):
    assert client.get("/api/topics").json()["topics"][0]["slug"] == "ai"


def test_search_requires_query(client):
    assert client.get("/api/search").status_code == 422


def test_search_passes_query(client, scraper):
    client.get("/api/search", params={"q": "notes"})
    client.get("/api/search/users", params={"q": "ann"})
    assert scraper.queries == ["notes", "ann"]


def test_product_details(client):
    body = client.get("/api/products/alpha").json()
    assert body["product"]["daily_rank"] == 1


def test_saved_products_flow(client):
    saved = client.post("/api/saved", json=ALPHA.model_dump()).json()
    assert saved["product_id"] == "1"

    assert [p["name"] for p in client.get("/api/saved", params={"q": "ship"}).json()] == ["Alpha"]

    assert client.delete("/api/saved/1").json() == {"product_id": "1", "removed": True}
    assert client.delete("/api/saved/1").status_code == 404
    assert client.get("/api/saved").json() == []
