import pytest

from launchscope.layers.assets import svg_to_data_uri
from launchscope.layers.operations import ProductHuntScraper
from launchscope.models.entities import Product

from tests.helpers import data_event, homefeed_event, mock_fetcher, page, post_item, topic_node

NO_STATE_PAGE = "<html><body><h1>Product Hunt</h1><script>window.x = 1</script></body></html>"

HOME_PAGE = page(events=[
    {"type": "started"},
    homefeed_event({
        "FEATURED-0": [
            post_item("1", "Alpha", topics=[topic_node("t1", "AI")]),
            post_item("2", "Beta"),
        ],
        "POPULAR-0": [post_item("3", "Gamma")],
    }),
])

TOPICS_PAGE = page(events=[data_event(topics={"edges": [
    topic_node("t1", "AI"),
    topic_node("t2", "Productivity"),
]})])

SEARCH_PAGE = page(events=[data_event(search={"edges": [
    {"node": post_item("1", "Alpha")},
    {"node": {"__typename": "User", "id": "u1", "name": "Ann", "username": "ann"}},
]})])

SVG = b"<svg>shot</svg>"

DETAIL_HEAD = """
<meta property="og:description" content="Alpha ships your code.">
<meta property="og:image" content="https://ph-files.imgix.net/og.png">
<link rel="canonical" href="https://ph.test/posts/alpha">
"""

DETAIL_BODY = """
<div data-sentry-component="Gallery">
  <img src="https://ph-files.imgix.net/g1.png">
  <img src="https://cdn.test/shot.svg">
</div>
<div data-test="product-rank">#3 Today</div>
<div data-test="product-rank">#12 This Week</div>
<div class="styles_builtWithContainer__hMCFG"><a href="/products/notion"><div>Notion</div></a></div>
"""

DETAIL_PAGE = page(head=DETAIL_HEAD, body=DETAIL_BODY, events=[data_event(post=post_item(
    "1",
    "Alpha",
    description="State description",
    votesCount=250,
    hunter={"name": "Hal", "username": "hal"},
    makers=[{"name": "Dave", "username": "dave"}],
))])


def _scraper(site, routes, requests=None):
    return ProductHuntScraper(fetcher=mock_fetcher(routes, requests), site=site)


# List operations

@pytest.mark.asyncio
async def test_frontpage_products(site):
    result = await _scraper(site, {"/": (200, HOME_PAGE)}).get_frontpage_products()

    assert result.ok
    assert [p.name for p in result.products] == ["Alpha", "Beta"]
    assert result.products[0].topics[0].name == "AI"


@pytest.mark.asyncio
async def test_trending_products(site):
    result = await _scraper(site, {"/": (200, HOME_PAGE)}).get_trending_products()
    assert [p.id for p in result.items] == ["3"]


@pytest.mark.asyncio
async def test_topics(site):
    result = await _scraper(site, {"/topics": (200, TOPICS_PAGE)}).get_topics()
    assert [t.name for t in result.topics] == ["AI", "Productivity"]


@pytest.mark.asyncio
async def test_search_products_and_users(site):
    requests = []
    scraper = _scraper(site, {"/search": (200, SEARCH_PAGE)}, requests)

    products = await scraper.search_products("note taking & more")
    users = await scraper.search_users("ann")

    assert [p.id for p in products.products] == ["1"]
    assert [u.username for u in users.users] == ["ann"]
    assert requests[0].url.params["q"] == "note taking & more"
    assert scraper.search_url("a b/c") == "https://ph.test/search?q=a%20b%2Fc"


@pytest.mark.asyncio
async def test_operations_report_missing_state(site):
    routes = {path: (200, NO_STATE_PAGE) for path in ("/", "/topics", "/search", "/posts/alpha")}
    scraper = _scraper(site, routes)

    results = [
        await scraper.get_frontpage_products(),
        await scraper.get_trending_products(),
        await scraper.get_topics(),
        await scraper.search_products("x"),
        await scraper.search_users("x"),
        await scraper.get_product_details("alpha"),
    ]

    for result in results:
        assert result.error == "Could not extract Apollo data from the page"
        assert result.items == []


@pytest.mark.asyncio
async def test_http_error_becomes_error_string(site):
    result = await _scraper(site, {"/": (503, "down")}).get_frontpage_products()

    assert result.error == "HTTP error! status: 503"
    assert result.products == []


@pytest.mark.asyncio
async def test_missing_feed_becomes_error_string(site):
    routes = {"/": (200, page(events=[data_event(topics={"edges": []})]))}
    result = await _scraper(site, routes).get_frontpage_products()
    assert result.error == "Could not find homefeed data"


# Product detail

@pytest.mark.asyncio
async def test_product_details_end_to_end(site):
    routes = {"/posts/alpha": (200, DETAIL_PAGE), "/shot.svg": (200, SVG)}

    result = await _scraper(site, routes).get_product_details("alpha")

    assert result.ok
    product = result.product
    assert product.url == "https://ph.test/posts/alpha"
    assert product.description == "Alpha ships your code."
    assert product.featured_image == "https://ph-files.imgix.net/og.png"
    assert product.thumbnail == "https://ph-files.imgix.net/og.png?w=1024&h=512&fit=crop&auto=format,compress"
    assert product.gallery_images == [
        "https://ph-files.imgix.net/g1.png?w=1200&h=800&fit=crop&auto=format,compress",
        svg_to_data_uri(SVG),
    ]
    assert product.hunter.username == "hal"
    assert [m.username for m in product.makers] == ["dave"]
    assert (product.daily_rank, product.weekly_rank) == (3, 12)
    assert [s.name for s in product.shoutouts] == ["Notion"]
    assert product.votes_count == 250


@pytest.mark.asyncio
async def test_product_details_without_images_uses_slug_thumbnail(site):
    routes = {"/posts/alpha": (200, page(events=[data_event(post=post_item("1", "Alpha"))]))}

    result = await _scraper(site, routes).get_product_details("alpha")

    assert result.product.thumbnail == "https://ph-files.imgix.net/alpha?auto=format,compress&fit=crop&h=512&w=1024"
    assert result.product.featured_image is None
    assert result.product.description == ""


@pytest.mark.asyncio
async def test_product_details_missing_post_feed(site):
    routes = {"/posts/alpha": (200, page(events=[{"type": "started"}]))}
    result = await _scraper(site, routes).get_product_details("alpha")

    assert result.error == "Could not find post data"
    assert result.product is None


@pytest.mark.asyncio
async def test_enhance_product_works_from_markup_only(site):
    body = '<a href="/@carol"><div>Carol Chen</div><span>Hunter</span></a>'
    scraper = _scraper(site, {"/posts/alpha": (200, page(body=body))})
    product = Product(id="1", name="Alpha", url="https://ph.test/posts/alpha", thumbnail="https://cdn.test/t.png")

    enhanced = await scraper.enhance_product(product)

    assert enhanced.hunter.username == "carol"
    assert enhanced.thumbnail == "https://cdn.test/t.png"


@pytest.mark.asyncio
async def test_enhance_product_returns_input_on_fetch_failure(site):
    product = Product(id="1", name="Alpha", url="https://ph.test/posts/alpha")
    assert await _scraper(site, {}).enhance_product(product) == product
