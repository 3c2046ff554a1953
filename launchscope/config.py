"""
Configuration management for Launchscope.
Handles environment variables and the site configuration table used by the scraping pipeline.
"""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Formal GraphQL API (optional - scraping works without it)
    PH_API_URL: str = os.getenv("PH_API_URL", "https://api.producthunt.com/v2/api/graphql")
    PH_DEVELOPER_TOKEN: Optional[str] = os.getenv("PH_DEVELOPER_TOKEN")

    # Saved products store
    SAVED_PRODUCTS_PATH: str = os.getenv("SAVED_PRODUCTS_PATH", "saved_products.json")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings (unset = no client-side timeout)
    REQUEST_TIMEOUT: Optional[float] = _optional_float("REQUEST_TIMEOUT")

    @classmethod
    def is_api_configured(cls) -> bool:
        """Check if a developer token for the GraphQL API is available."""
        return bool(cls.PH_DEVELOPER_TOKEN)


config = Config()


class SiteConfig(BaseModel):
    """
    Every origin-specific constant the scraping pipeline depends on.

    The production table is DEFAULT_SITE. Tests build their own instance
    pointing at a local host so fixture documents can be served instead.
    """
    base_url: str = "https://www.producthunt.com"
    topics_path: str = "/topics"
    search_path: str = "/search"
    post_path_template: str = "/posts/{slug}"
    file_host: str = "https://ph-files.imgix.net"

    # Embedded Apollo state transport
    state_marker: str = "ApolloSSRDataTransport"
    events_pattern: str = r'"events":(\[.+\])\}\)'

    # Homefeed edges
    featured_edge_ids: List[str] = Field(default_factory=lambda: ["FEATURED-0"])
    popular_edge_ids: List[str] = Field(default_factory=lambda: ["FEATURED-1", "POPULAR-0"])
    product_typename: str = "Post"
    user_typename: str = "User"

    # Hunter selectors (priority order)
    about_hunter_selector: str = (
        "#about_section > div.text-14.font-normal.text-dark-gray.text-gray-600 > div:nth-child(2) > a"
    )
    team_section_selector: str = (
        '.styles_metadataItem__YJEgI:-soup-contains("Meet the team"), [data-test="team-section"]'
    )
    hunter_icon_selector: str = 'svg [clip-path="url(#HunterIcon_svg__a)"]'
    hunter_badge_selector: str = '[data-test="hunter-badge"], span:-soup-contains("Hunter")'

    # Makers
    makers_section_selector: str = (
        '.styles_metadataItem__YJEgI:-soup-contains("Makers"), [data-test="makers-section"]'
    )
    maker_hunter_marker_selector: str = 'span:-soup-contains("Hunter")'

    # Gallery
    gallery_component_selector: str = '[data-sentry-component="Gallery"]'
    gallery_pattern_selector: str = (
        '[class*="gallery" i], [id*="gallery" i], [class*="carousel" i], [id*="carousel" i]'
    )
    gallery_legacy_selector: str = ".styles_imageContainer__Hm_9x img, .styles_image__wG8b_ img"
    gallery_width: int = 1200
    gallery_height: int = 800

    # Shoutouts, ranks, product hub
    shoutout_selector: str = '.styles_builtWithContainer__hMCFG a, [data-test="built-with-item"]'
    rank_selector: str = '.styles_rankContainer__Oc9ce, [data-test="product-rank"]'
    product_hub_selector: str = 'a:-soup-contains("See"), a:-soup-contains("previous launches")'

    # Open Graph image fallbacks
    og_image_fallback_selectors: List[str] = Field(default_factory=lambda: [
        ".styles_thumbnail__Xtg_i img",
        ".styles_media__jA_aZ img",
        'img[alt*="product"]',
        'img[alt*="Product"]',
    ])
    thumbnail_width: int = 1024
    thumbnail_height: int = 512

    def url(self, path: str) -> str:
        """Join a site-relative path onto the origin."""
        if path.startswith("http"):
            return path
        return f"{self.base_url}{path}"

    def post_url(self, slug: str) -> str:
        return self.url(self.post_path_template.format(slug=slug))

    def profile_url(self, username: str) -> str:
        return f"{self.base_url}/@{username}"

    def file_url(self, image_uuid: str) -> str:
        return f"{self.file_host}/{image_uuid}"


DEFAULT_SITE = SiteConfig()
