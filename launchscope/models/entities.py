"""
Entity models for Launchscope.
These are the normalized records every scraping operation returns,
independent of whether data came from the embedded state, page markup or the API.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


def extract_username_from_url(url: Optional[str]) -> str:
    """
    Derive a username from a profile URL.

    Handles both /@username and /username forms. An empty URL, or one that
    ends in a slash, yields an empty username.
    """
    if not url:
        return ""

    last_segment = url.split("/")[-1]
    if not last_segment:
        return ""

    return last_segment[1:] if last_segment.startswith("@") else last_segment


class Topic(BaseModel):
    """Topic a product is filed under."""
    id: str
    name: str
    slug: str = ""
    description: Optional[str] = None
    followers_count: Optional[int] = None
    posts_count: Optional[int] = None


class Person(BaseModel):
    """Hunter, maker, or any other Product Hunt user."""
    id: str
    name: str
    username: str = ""
    avatar_url: str = ""
    profile_image: Optional[str] = None
    profile_url: Optional[str] = None

    # Only populated by the GraphQL API
    headline: Optional[str] = None
    website_url: Optional[str] = None
    twitter_username: Optional[str] = None
    products_count: Optional[int] = None
    followers_count: Optional[int] = None

    @classmethod
    def from_profile_link(
        cls,
        person_id: str,
        name: str,
        profile_url: str,
        avatar_url: Optional[str] = None,
        base_url: str = "",
    ) -> "Person":
        """Build a person scraped from an anchor; username comes from the link."""
        absolute = profile_url if profile_url.startswith("http") else f"{base_url}{profile_url}"
        return cls(
            id=person_id,
            name=name,
            username=extract_username_from_url(profile_url),
            avatar_url=avatar_url or "",
            profile_url=absolute,
        )


class Shoutout(BaseModel):
    """External tool credited as "built with"."""
    id: str
    name: str
    url: str
    thumbnail: str = ""


class Product(BaseModel):
    """
    A product launch.

    The first block is the summary every list operation fills in; the
    second block is only populated by detail enrichment.
    """
    id: str
    name: str
    tagline: str = ""
    description: str = ""
    url: str
    thumbnail: str = ""
    votes_count: int = 0
    comments_count: int = 0
    created_at: Optional[str] = None
    topics: List[Topic] = Field(default_factory=list)
    maker: Optional[Person] = None

    # Detail enrichment
    hunter: Optional[Person] = None
    makers: Optional[List[Person]] = None
    gallery_images: Optional[List[str]] = None
    shoutouts: Optional[List[Shoutout]] = None
    daily_rank: Optional[int] = None
    weekly_rank: Optional[int] = None
    product_hub_url: Optional[str] = None
    previous_launches: Optional[int] = None
    featured_image: Optional[str] = None

    def get_present_fields(self) -> List[str]:
        """Return list of enrichment fields that carry data."""
        present = ["id", "name", "url"]
        for field_name in self.enrichment_fields():
            value = getattr(self, field_name)
            if value is not None and value != []:
                present.append(field_name)
        if self.thumbnail:
            present.append("thumbnail")
        if self.description:
            present.append("description")
        return present

    def get_missing_fields(self) -> List[str]:
        """Return list of enrichment fields that are still empty."""
        present = self.get_present_fields()
        candidates = ["thumbnail", "description"] + self.enrichment_fields()
        return [f for f in candidates if f not in present]

    @staticmethod
    def enrichment_fields() -> List[str]:
        return [
            "hunter", "makers", "gallery_images", "shoutouts",
            "daily_rank", "weekly_rank", "product_hub_url",
            "previous_launches", "featured_image",
        ]


class OpenGraphMetadata(BaseModel):
    """Metadata read from a product page's meta tags."""
    title: str = ""
    description: str = ""
    image: str = ""
    url: str = ""
    canonical_url: str = ""
    site_name: str = ""
    type: str = ""


class SavedProduct(BaseModel):
    """Bookmark kept by the saved-products store."""
    id: str
    product_id: str
    name: str
    tagline: str = ""
    url: str
    thumbnail: str = ""
    saved_at: str
