"""
Detail enrichment for a single product page.

Each enriched field has an ordered cascade of strategies. Every strategy is a
plain function of DetailContext so it can be tested against fixture HTML on
its own. Embedded state comes first because it is the most reliable; markup
selectors follow, from most to least specific.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from launchscope.config import DEFAULT_SITE, SiteConfig
from launchscope.layers.assets import crop_options, is_imgix, is_svg, process_image_url
from launchscope.layers.strategies import Strategy, append_unique, first_success
from launchscope.models.entities import Person, Product, Shoutout
from launchscope.models.events import PersonNode, PostItem
from launchscope.utils.logger import StageLogger

DAILY_RANK_RE = re.compile(r"#(\d+) Today")
WEEKLY_RANK_RE = re.compile(r"#(\d+) This Week")
PREVIOUS_LAUNCHES_RE = re.compile(r"(\d+)\s+previous")


@dataclass
class DetailContext:
    """Everything a strategy may look at for one product page."""
    soup: BeautifulSoup
    site: SiteConfig = field(default_factory=lambda: DEFAULT_SITE)
    post: Optional[PostItem] = None
    product: Optional[Product] = None
    hunter: Optional[Person] = None


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _absolute(url: str, site: SiteConfig) -> str:
    return url if url.startswith("http") else f"{site.base_url}{url}"


def _img_src(element: Tag) -> str:
    img = element.find("img")
    return (img.get("src") or "") if img else ""


def _first_text_div(element: Tag) -> str:
    for div in element.find_all("div"):
        text = div.get_text().strip()
        if text:
            return text
    return ""


def _enclosing_anchor(element: Tag) -> Optional[Tag]:
    if element.name == "a":
        return element
    return element.find_parent("a")


def _state_person(node: PersonNode, fallback_id: str, site: SiteConfig) -> Person:
    return Person(
        id=node.id or fallback_id,
        name=node.name,
        username=node.username,
        avatar_url=node.profile_image or "",
        profile_image=node.profile_image,
        profile_url=site.profile_url(node.username),
    )


def parse_ranks(text: str) -> Tuple[Optional[int], Optional[int]]:
    """Return (daily_rank, weekly_rank) parsed from rank badge text."""
    daily = DAILY_RANK_RE.search(text or "")
    weekly = WEEKLY_RANK_RE.search(text or "")
    return (
        int(daily.group(1)) if daily else None,
        int(weekly.group(1)) if weekly else None,
    )


# =============================================================================
# HUNTER
# =============================================================================

def hunter_from_state(ctx: DetailContext) -> Optional[Person]:
    if ctx.post is None or ctx.post.hunter is None:
        return None
    return _state_person(ctx.post.hunter, "hunter", ctx.site)


def hunter_from_about_section(ctx: DetailContext) -> Optional[Person]:
    anchor = ctx.soup.select_one(ctx.site.about_hunter_selector)
    if anchor is None:
        return None

    hunter_url = anchor.get("href")
    hunter_name = anchor.get_text().strip()
    if not hunter_name or not hunter_url:
        return None

    # The about section has no avatar; borrow it from the team section
    hunter_image = ""
    for team_section in ctx.soup.select(ctx.site.team_section_selector):
        for member in team_section.find_all("a"):
            if member.get("href") == hunter_url:
                hunter_image = _img_src(member)
                break
        if hunter_image:
            break

    return Person.from_profile_link("hunter", hunter_name, hunter_url, hunter_image, ctx.site.base_url)


def hunter_from_icon(ctx: DetailContext) -> Optional[Person]:
    for icon in ctx.soup.select(ctx.site.hunter_icon_selector):
        anchor = _enclosing_anchor(icon)
        if anchor is None:
            continue
        hunter_url = anchor.get("href")
        hunter_name = _first_text_div(anchor)
        if hunter_name and hunter_url:
            return Person.from_profile_link("hunter", hunter_name, hunter_url, _img_src(anchor), ctx.site.base_url)
    return None


def hunter_from_badge(ctx: DetailContext) -> Optional[Person]:
    for badge in ctx.soup.select(ctx.site.hunter_badge_selector):
        anchor = _enclosing_anchor(badge)
        if anchor is None:
            continue
        hunter_url = anchor.get("href")
        first_div = anchor.find("div")
        hunter_name = (first_div.get_text().strip() if first_div else "") or anchor.get_text().strip()
        if hunter_name and hunter_url:
            return Person.from_profile_link("hunter", hunter_name, hunter_url, _img_src(anchor), ctx.site.base_url)
    return None


HUNTER_STRATEGIES = [
    Strategy("post_state", hunter_from_state),
    Strategy("about_section", hunter_from_about_section),
    Strategy("hunter_icon", hunter_from_icon),
    Strategy("hunter_badge", hunter_from_badge),
]


# =============================================================================
# MAKERS
# =============================================================================

def _is_hunter(person: Person, hunter: Optional[Person]) -> bool:
    if hunter is None:
        return False
    if hunter.profile_url and person.profile_url == hunter.profile_url:
        return True
    return bool(hunter.username) and person.username == hunter.username


def makers_from_state(ctx: DetailContext) -> Optional[List[Person]]:
    if ctx.post is None or not ctx.post.makers:
        return None
    return [_state_person(m, f"maker-{m.username}", ctx.site) for m in ctx.post.makers]


def makers_from_section(ctx: DetailContext) -> Optional[List[Person]]:
    makers: List[Person] = []
    index = 0
    for section in ctx.soup.select(ctx.site.makers_section_selector):
        for anchor in section.find_all("a"):
            position = index
            index += 1

            if anchor.select_one(ctx.site.maker_hunter_marker_selector) is not None:
                continue

            maker_url = anchor.get("href")
            maker_name = anchor.get_text().strip()
            if not maker_name or not maker_url:
                continue

            maker = Person.from_profile_link(
                f"maker-{position}", maker_name, maker_url, _img_src(anchor), ctx.site.base_url
            )
            if _is_hunter(maker, ctx.hunter):
                continue
            append_unique(makers, [maker], key=lambda p: p.profile_url)
    return makers


def maker_from_summary(ctx: DetailContext) -> Optional[List[Person]]:
    if ctx.product is None or ctx.product.maker is None:
        return None
    maker = ctx.product.maker
    if ctx.hunter is not None and ctx.hunter.username == maker.username:
        return None
    return [maker]


def maker_from_post_user(ctx: DetailContext) -> Optional[List[Person]]:
    if ctx.post is None or ctx.post.user is None:
        return None
    maker = _state_person(ctx.post.user, f"maker-{ctx.post.user.username}", ctx.site)
    if ctx.hunter is not None and ctx.hunter.username == maker.username:
        return None
    return [maker]


MAKER_STRATEGIES = [
    Strategy("post_state", makers_from_state),
    Strategy("makers_section", makers_from_section),
    Strategy("summary_maker", maker_from_summary),
    Strategy("post_user", maker_from_post_user),
]


# =============================================================================
# GALLERY
# =============================================================================

def _gallery_url(src: str, site: SiteConfig) -> str:
    if is_imgix(src) and not is_svg(src):
        return process_image_url(src, crop_options(site.gallery_width, site.gallery_height))
    return src


def _collect_images(containers: List[Tag], site: SiteConfig) -> List[str]:
    images: List[str] = []
    for container in containers:
        imgs = [container] if container.name == "img" else container.find_all("img")
        for img in imgs:
            src = img.get("src")
            if not src or src in images:
                continue
            append_unique(images, [_gallery_url(src, site)])
    return images


def gallery_from_component(ctx: DetailContext) -> Optional[List[str]]:
    return _collect_images(ctx.soup.select(ctx.site.gallery_component_selector), ctx.site)


def gallery_from_class_pattern(ctx: DetailContext) -> Optional[List[str]]:
    return _collect_images(ctx.soup.select(ctx.site.gallery_pattern_selector), ctx.site)


def gallery_from_legacy_classes(ctx: DetailContext) -> Optional[List[str]]:
    return _collect_images(ctx.soup.select(ctx.site.gallery_legacy_selector), ctx.site)


def gallery_from_svg_elements(ctx: DetailContext) -> List[str]:
    """<svg> elements that point at an external .svg file through a src attribute."""
    images: List[str] = []
    for svg in ctx.soup.find_all("svg"):
        src = svg.get("src")
        if src and urlparse(src).path.endswith(".svg"):
            append_unique(images, [src])
    return images


def gallery_from_state(ctx: DetailContext) -> List[str]:
    """media/gallery arrays of the post state; an imageUuid becomes a file-host URL."""
    if ctx.post is None:
        return []

    images: List[str] = []
    for items in (ctx.post.media, ctx.post.gallery):
        for item in items or []:
            if item.url:
                append_unique(images, [item.url])
            elif item.image_uuid:
                append_unique(images, [ctx.site.file_url(item.image_uuid)])
    return images


GALLERY_MARKUP_STRATEGIES = [
    Strategy("gallery_component", gallery_from_component),
    Strategy("gallery_class_pattern", gallery_from_class_pattern),
    Strategy("legacy_classes", gallery_from_legacy_classes),
]


# =============================================================================
# SHOUTOUTS, RANKS, PRODUCT HUB
# =============================================================================

def shoutouts_from_markup(ctx: DetailContext) -> List[Shoutout]:
    shoutouts: List[Shoutout] = []
    for i, element in enumerate(ctx.soup.select(ctx.site.shoutout_selector)):
        link = element.get("href")
        first_div = element.find("div")
        name = (first_div.get_text().strip() if first_div else "") or element.get_text().strip()
        if not name or not link:
            continue
        shoutout = Shoutout(
            id=f"shoutout-{i}",
            name=name,
            url=_absolute(link, ctx.site),
            thumbnail=_img_src(element),
        )
        append_unique(shoutouts, [shoutout], key=lambda s: s.url)
    return shoutouts


def ranks_from_markup(ctx: DetailContext) -> Tuple[Optional[int], Optional[int]]:
    text = "".join(el.get_text() for el in ctx.soup.select(ctx.site.rank_selector))
    return parse_ranks(text)


def product_hub_from_markup(ctx: DetailContext) -> Tuple[Optional[str], Optional[int]]:
    """Return (product_hub_url, previous_launches)."""
    links = ctx.soup.select(ctx.site.product_hub_selector)
    if not links:
        return None, None

    hub_url = links[0].get("href")
    if not hub_url:
        return None, None

    launches_text = "".join(link.get_text() for link in links)
    match = PREVIOUS_LAUNCHES_RE.search(launches_text)
    return _absolute(hub_url, ctx.site), int(match.group(1)) if match else None


# =============================================================================
# ORCHESTRATION
# =============================================================================

class DetailEnricher:
    """Runs every enrichment cascade over one parsed product page."""

    def __init__(self, site: SiteConfig = DEFAULT_SITE):
        self.site = site
        self.logger = StageLogger("detail_enricher")

    def resolve_hunter(self, ctx: DetailContext) -> Optional[Person]:
        return first_success("hunter", HUNTER_STRATEGIES, ctx, self.logger)

    def resolve_makers(self, ctx: DetailContext) -> List[Person]:
        return first_success("makers", MAKER_STRATEGIES, ctx, self.logger) or []

    def resolve_gallery(self, ctx: DetailContext) -> List[str]:
        images = list(first_success("gallery", GALLERY_MARKUP_STRATEGIES, ctx, self.logger) or [])
        append_unique(images, gallery_from_svg_elements(ctx))

        if not images:
            self.logger.log_fallback(
                from_source="markup",
                to_source="post_state",
                reason="No gallery images in page markup",
            )
            append_unique(images, gallery_from_state(ctx))

        self.logger.log_action("resolve_gallery", "completed", image_count=len(images))
        return images

    def enrich(
        self,
        product: Product,
        soup: BeautifulSoup,
        post: Optional[PostItem] = None,
    ) -> Product:
        """Return a copy of `product` carrying every field the page yields."""
        ctx = DetailContext(soup=soup, site=self.site, post=post, product=product)

        hunter = self.resolve_hunter(ctx)
        ctx.hunter = hunter
        makers = self.resolve_makers(ctx)
        gallery_images = self.resolve_gallery(ctx)
        shoutouts = shoutouts_from_markup(ctx)
        daily_rank, weekly_rank = ranks_from_markup(ctx)
        product_hub_url, previous_launches = product_hub_from_markup(ctx)

        update = {
            "hunter": hunter,
            "makers": makers or None,
            "gallery_images": gallery_images or None,
            "shoutouts": shoutouts or None,
            "daily_rank": daily_rank,
            "weekly_rank": weekly_rank,
            "product_hub_url": product_hub_url,
            "previous_launches": previous_launches,
        }

        # Embedded counts are more current than list-page counts
        if post is not None:
            if post.votes_count is not None:
                update["votes_count"] = post.votes_count
            if post.comments_count is not None:
                update["comments_count"] = post.comments_count

        enriched = product.model_copy(update=update)
        self.logger.log_extraction(
            entity="product",
            fields_present=enriched.get_present_fields(),
            fields_missing=enriched.get_missing_fields(),
            product_id=product.id,
        )
        return enriched
