"""
Open Graph metadata scraping for product pages.
"""
from typing import Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from launchscope.adapters.fetcher import DocumentFetcher
from launchscope.config import DEFAULT_SITE, SiteConfig
from launchscope.layers.locator import make_soup
from launchscope.models.entities import OpenGraphMetadata
from launchscope.utils.logger import StageLogger


def _meta_property(soup: BeautifulSoup, prop: str) -> str:
    tag = soup.find("meta", property=prop)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def _meta_name(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": name})
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def _canonical_link(soup: BeautifulSoup) -> str:
    link = soup.find("link", rel="canonical")
    if link and link.get("href"):
        return link["href"].strip()
    return ""


def extract_open_graph(
    html: Union[str, BeautifulSoup],
    page_url: str,
    site: SiteConfig = DEFAULT_SITE,
) -> OpenGraphMetadata:
    """
    Read Open Graph tags and the canonical link from a page.

    The image falls back to a few in-page product image selectors, and is
    always made absolute against `page_url`.
    """
    soup = make_soup(html)

    metadata = OpenGraphMetadata(
        title=_meta_property(soup, "og:title"),
        description=_meta_property(soup, "og:description"),
        image=_meta_property(soup, "og:image"),
        url=_meta_property(soup, "og:url"),
        site_name=_meta_property(soup, "og:site_name"),
        type=_meta_property(soup, "og:type"),
    )
    metadata.canonical_url = _canonical_link(soup) or metadata.url or page_url

    if not metadata.image:
        for selector in site.og_image_fallback_selectors:
            img = soup.select_one(selector)
            if img is not None and img.get("src"):
                metadata.image = img["src"]
                break

    if metadata.image and not metadata.image.startswith("http"):
        metadata.image = urljoin(page_url, metadata.image)

    return metadata


def extract_share_image(html: Union[str, BeautifulSoup]) -> str:
    """og:image, then twitter:image."""
    soup = make_soup(html)
    return _meta_property(soup, "og:image") or _meta_name(soup, "twitter:image")


class OpenGraphScraper:
    """Fetches a page and extracts its Open Graph metadata."""

    def __init__(self, fetcher: Optional[DocumentFetcher] = None, site: SiteConfig = DEFAULT_SITE):
        self.fetcher = fetcher or DocumentFetcher()
        self.site = site
        self.logger = StageLogger("open_graph")

    async def scrape(self, url: str) -> OpenGraphMetadata:
        """Never raises; a failed fetch or parse yields empty metadata."""
        try:
            html = await self.fetcher.fetch_text(url)
            metadata = extract_open_graph(html, url, self.site)
        except Exception as e:
            self.logger.log_error(
                f"Error scraping Open Graph metadata: {str(e)}",
                error_type="open_graph",
                url=url,
            )
            return OpenGraphMetadata()

        self.logger.log_action(
            "scrape_open_graph",
            "completed",
            url=url,
            has_image=bool(metadata.image),
            has_description=bool(metadata.description),
            canonical_url=metadata.canonical_url,
        )
        return metadata
