"""
Image/asset normalizer.

Rewrites imgix-hosted image URLs into sized, auto-formatted variants and turns
SVG references into inline base64 data URIs.
"""
import asyncio
import base64
from enum import Enum
from typing import List, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from pydantic import BaseModel, Field

from launchscope.adapters.fetcher import DocumentFetcher
from launchscope.utils.logger import StageLogger

IMGIX_HOST_SUFFIX = "imgix.net"
SVG_DATA_URI_PREFIX = "data:image/svg+xml;base64,"


class ImgixFit(str, Enum):
    """imgix `fit` modes."""
    CLIP = "clip"
    CROP = "crop"
    FACEAREA = "facearea"
    FILL = "fill"
    FILLMAX = "fillmax"
    MAX = "max"
    MIN = "min"
    SCALE = "scale"


class ImgixOptions(BaseModel):
    """Rendering parameters understood by imgix."""
    width: Optional[int] = None
    height: Optional[int] = None
    fit: Optional[ImgixFit] = None
    auto: List[str] = Field(default_factory=list)
    format: Optional[str] = None
    quality: Optional[int] = None
    dpr: Optional[float] = None

    def to_params(self) -> dict:
        params = {}
        if self.width is not None:
            params["w"] = str(self.width)
        if self.height is not None:
            params["h"] = str(self.height)
        if self.fit is not None:
            params["fit"] = self.fit.value
        if self.auto:
            params["auto"] = ",".join(self.auto)
        if self.format:
            params["fm"] = self.format
        if self.quality is not None:
            params["q"] = str(self.quality)
        if self.dpr is not None:
            params["dpr"] = f"{self.dpr:g}"
        return params


def crop_options(width: int, height: int) -> ImgixOptions:
    """Cropped, auto-formatted and compressed rendition at a fixed size."""
    return ImgixOptions(fit=ImgixFit.CROP, auto=["format", "compress"], width=width, height=height)


def is_svg(url: Optional[str]) -> bool:
    return bool(url) and ".svg" in url


def is_imgix(url: Optional[str]) -> bool:
    if not url:
        return False
    host = urlparse(url).hostname or ""
    return host.endswith(IMGIX_HOST_SUFFIX)


def process_image_url(url: str, options: ImgixOptions) -> str:
    """
    Apply imgix parameters to `url`.

    Non-imgix URLs and SVGs come back untouched. Existing query parameters are
    kept unless the options set the same key.
    """
    if not is_imgix(url) or is_svg(url):
        return url

    parsed = urlparse(url)
    query = dict(parse_qsl(parsed.query, keep_blank_values=True))
    query.update(options.to_params())

    return urlunparse(parsed._replace(query=urlencode(query, safe=",")))


def svg_to_data_uri(svg: bytes) -> str:
    return SVG_DATA_URI_PREFIX + base64.b64encode(svg).decode("ascii")


class AssetNormalizer:
    """Network-backed part of asset normalization (SVG embedding)."""

    def __init__(self, fetcher: Optional[DocumentFetcher] = None):
        self.fetcher = fetcher or DocumentFetcher()
        self.logger = StageLogger("asset_normalizer")

    async def fetch_svg_as_base64(self, url: str) -> str:
        """Fetch an SVG and return it as a data URI. Raises NetworkError on failure."""
        if url.startswith("data:"):
            return url
        svg = await self.fetcher.fetch_bytes(url, accept="image/svg+xml,*/*")
        return svg_to_data_uri(svg)

    async def embed_svg(self, url: str) -> str:
        """Inline `url` if it is an SVG; on any failure keep the original URL."""
        if not is_svg(url):
            return url
        try:
            return await self.fetch_svg_as_base64(url)
        except Exception as e:
            self.logger.log_error(
                f"Error converting SVG to base64: {str(e)}",
                error_type="svg_conversion",
                url=url,
            )
            return url

    async def embed_svgs(self, urls: List[str]) -> List[str]:
        """Convert every SVG in `urls` concurrently. Output order matches input order."""
        if not urls:
            return urls
        return list(await asyncio.gather(*(self.embed_svg(url) for url in urls)))
