"""
Public scraping operations.

Each operation runs fetch -> locate -> repair -> parse -> resolve and returns a
result envelope. Failures of the primary payload become the envelope's error
string; everything downstream of a parsed payload is best effort.
"""
import re
from typing import List, Optional
from urllib.parse import quote

from bs4 import BeautifulSoup

from launchscope.adapters.fetcher import DocumentFetcher
from launchscope.config import DEFAULT_SITE, SiteConfig
from launchscope.exceptions import ScraperError
from launchscope.layers.assets import AssetNormalizer, crop_options, is_imgix, is_svg, process_image_url
from launchscope.layers.enrichment import DetailEnricher
from launchscope.layers.locator import EmbeddedStateLocator, make_soup
from launchscope.layers.metadata import OpenGraphScraper, extract_share_image
from launchscope.layers.resolver import FieldResolver
from launchscope.models.entities import OpenGraphMetadata, Product
from launchscope.models.events import PostItem, RawEventRecord
from launchscope.models.results import ProductResult, ProductsResult, TopicsResult, UsersResult
from launchscope.utils.logger import StageLogger

POST_SLUG_RE = re.compile(r"posts/([^/]+)$")


class ProductHuntScraper:
    """
    Entry point for every scraping operation.

    Holds no state between calls beyond its collaborators, so one instance
    can serve concurrent operations.
    """

    def __init__(
        self,
        fetcher: Optional[DocumentFetcher] = None,
        site: SiteConfig = DEFAULT_SITE,
    ):
        self.site = site
        self.fetcher = fetcher or DocumentFetcher()
        self.locator = EmbeddedStateLocator(site)
        self.resolver = FieldResolver(site)
        self.enricher = DetailEnricher(site)
        self.assets = AssetNormalizer(self.fetcher)
        self.open_graph = OpenGraphScraper(self.fetcher, site)
        self.logger = StageLogger("scraper")

    # =========================================================================
    # LIST OPERATIONS
    # =========================================================================

    async def get_frontpage_products(self) -> ProductsResult:
        """Featured products on the homepage."""
        return await self._list_products(
            "frontpage", self.site.url("/"), self.resolver.resolve_frontpage
        )

    async def get_trending_products(self) -> ProductsResult:
        """Popular products on the homepage."""
        return await self._list_products(
            "trending", self.site.url("/"), self.resolver.resolve_trending
        )

    async def search_products(self, query: str) -> ProductsResult:
        """Products matching `query` on the search page."""
        return await self._list_products(
            "search", self.search_url(query), self.resolver.resolve_search_products
        )

    async def get_topics(self) -> TopicsResult:
        """Topics listed on the topics page."""
        self.logger.log_action("get_topics", "started")
        try:
            events = await self._load_events(self.site.url(self.site.topics_path))
            topics = self.resolver.resolve_topics(events)
        except Exception as e:
            return TopicsResult(error=self._describe_failure("topics", e))

        self.logger.log_action("get_topics", "completed", count=len(topics))
        return TopicsResult(topics=topics)

    async def search_users(self, query: str) -> UsersResult:
        """Users mixed into the search page results."""
        self.logger.log_action("search_users", "started", query=query)
        try:
            events = await self._load_events(self.search_url(query))
            users = self.resolver.resolve_search_users(events)
        except Exception as e:
            return UsersResult(error=self._describe_failure("search_users", e))

        return UsersResult(users=users)

    def search_url(self, query: str) -> str:
        return f"{self.site.url(self.site.search_path)}?q={quote(query, safe='')}"

    # =========================================================================
    # DETAIL OPERATIONS
    # =========================================================================

    async def get_product_details(self, slug: str) -> ProductResult:
        """
        Full detail for one product page.

        The embedded post state is required; Open Graph enrichment, markup
        fallbacks and SVG inlining are best effort.
        """
        url = self.site.post_url(slug)
        self.logger.log_action("get_product_details", "started", slug=slug, url=url)

        try:
            soup = make_soup(await self.fetcher.fetch_text(url))
            events = self.locator.load_events(soup)
            canonical_url = self._canonical_url(soup)
            product, post = self.resolver.resolve_post(events, canonical_url=canonical_url)
        except Exception as e:
            return ProductResult(error=self._describe_failure("product_details", e))

        try:
            product = await self._enhance(product, soup, post)
        except Exception as e:
            self.logger.log_error(
                f"Error enhancing product with metadata: {str(e)}",
                error_type="enhancement",
                product_id=product.id,
            )

        self.logger.log_action("get_product_details", "completed", product_id=product.id)
        return ProductResult(product=product)

    async def enhance_product(self, product: Product) -> Product:
        """
        Enrich a product obtained from a list operation by visiting its page.
        Never raises; on failure the product comes back unchanged.
        """
        try:
            soup = make_soup(await self.fetcher.fetch_text(product.url))
        except Exception as e:
            self.logger.log_error(
                f"Error scraping detailed product info: {str(e)}",
                error_type="enhancement",
                product_id=product.id,
            )
            return product

        post: Optional[PostItem] = None
        try:
            _, post = self.resolver.resolve_post(self.locator.load_events(soup))
        except ScraperError as e:
            self.logger.log_fallback(
                from_source="post_state",
                to_source="markup_only",
                reason=str(e),
                product_id=product.id,
            )

        canonical_url = self._canonical_url(soup)
        if canonical_url:
            product = product.model_copy(update={"url": canonical_url})

        try:
            return await self._enhance(product, soup, post)
        except Exception as e:
            self.logger.log_error(
                f"Error enhancing product with metadata: {str(e)}",
                error_type="enhancement",
                product_id=product.id,
            )
            return product

    async def scrape_open_graph_metadata(self, url: str) -> OpenGraphMetadata:
        return await self.open_graph.scrape(url)

    async def _enhance(self, product: Product, soup: BeautifulSoup, post: Optional[PostItem]) -> Product:
        metadata = await self.open_graph.scrape(product.url)
        if metadata.canonical_url:
            product = product.model_copy(update={"url": metadata.canonical_url})

        thumbnail = self._resolve_thumbnail(product, metadata, soup)

        enriched = self.enricher.enrich(product, soup, post)

        thumbnail = await self.assets.embed_svg(thumbnail) if thumbnail else thumbnail
        gallery_images = enriched.gallery_images
        if gallery_images:
            gallery_images = await self.assets.embed_svgs(gallery_images)

        return enriched.model_copy(update={
            "description": metadata.description or product.description,
            "thumbnail": thumbnail,
            "gallery_images": gallery_images,
            "featured_image": metadata.image or None,
        })

    def _resolve_thumbnail(self, product: Product, metadata: OpenGraphMetadata, soup: BeautifulSoup) -> str:
        """Open Graph image, else the summary thumbnail, else a slug-based fallback."""
        thumbnail = metadata.image or product.thumbnail

        slug_match = POST_SLUG_RE.search(product.url)
        slug = slug_match.group(1) if slug_match else None

        if not thumbnail and slug:
            thumbnail = extract_share_image(soup)
            if not thumbnail:
                self.logger.log_fallback(
                    from_source="page_images",
                    to_source="slug_file_url",
                    reason="No thumbnail on page",
                    product_id=product.id,
                )
                thumbnail = f"{self.site.file_url(slug)}?auto=format&fit=crop&h=512&w=1024"

        if thumbnail and is_imgix(thumbnail) and not is_svg(thumbnail):
            thumbnail = process_image_url(
                thumbnail, crop_options(self.site.thumbnail_width, self.site.thumbnail_height)
            )

        return thumbnail

    # =========================================================================
    # SHARED
    # =========================================================================

    async def _list_products(self, operation: str, url: str, resolve) -> ProductsResult:
        self.logger.log_action(operation, "started", url=url)
        try:
            events = await self._load_events(url)
            products: List[Product] = resolve(events)
        except Exception as e:
            return ProductsResult(error=self._describe_failure(operation, e))

        self.logger.log_action(operation, "completed", count=len(products))
        return ProductsResult(products=products)

    async def _load_events(self, url: str) -> List[RawEventRecord]:
        html = await self.fetcher.fetch_text(url)
        return self.locator.load_events(html)

    def _canonical_url(self, soup: BeautifulSoup) -> Optional[str]:
        link = soup.find("link", rel="canonical")
        if link and link.get("href"):
            return link["href"].strip()
        return None

    def _describe_failure(self, operation: str, error: Exception) -> str:
        """Log a failed operation and turn the exception into its error string."""
        error_type = type(error).__name__ if isinstance(error, ScraperError) else "unexpected"
        message = str(error) or "Unknown error"
        self.logger.log_error(message, error_type=error_type, operation=operation)
        return message
