"""
Field resolver.
Selects the right event record for a feed and maps its nodes onto the entity models.
"""
from typing import List, Optional, Sequence, Tuple, Type, TypeVar

from launchscope.config import DEFAULT_SITE, SiteConfig
from launchscope.exceptions import FeedNotFoundError
from launchscope.models.entities import Person, Product, Topic
from launchscope.models.events import (
    HomefeedEvent,
    PersonNode,
    PostEvent,
    PostItem,
    RawEventRecord,
    SearchEvent,
    TopicConnection,
    TopicNode,
    TopicsEvent,
)
from launchscope.utils.logger import StageLogger
from launchscope.utils.text import clean_text

E = TypeVar("E", HomefeedEvent, PostEvent, SearchEvent, TopicsEvent)

_MISSING_FEED_MESSAGES = {
    "homefeed": "Could not find homefeed data",
    "post": "Could not find post data",
    "search": "Could not find search results data",
    "topics": "Could not find topics data",
}


class FieldResolver:
    """Maps typed event records onto Product, Topic and Person entities."""

    def __init__(self, site: SiteConfig = DEFAULT_SITE):
        self.site = site
        self.logger = StageLogger("field_resolver")

    # =========================================================================
    # EVENT SELECTION
    # =========================================================================

    def find_feed_event(self, events: Sequence[RawEventRecord], event_cls: Type[E]) -> E:
        """Return the first data event carrying the feed modelled by `event_cls`."""
        for event in events:
            if isinstance(event, event_cls) and event.type == "data":
                return event

        feed = event_cls.model_fields["feed"].default
        self.logger.log_decision(
            decision="feed_missing",
            reason=f"No data event carries {feed}",
            feeds_seen=[e.feed for e in events],
        )
        raise FeedNotFoundError(_MISSING_FEED_MESSAGES[feed], feed=feed)

    # =========================================================================
    # NODE MAPPING
    # =========================================================================

    def person_from_node(self, node: PersonNode, fallback_id: str) -> Person:
        """Map a state person; id is synthesized when the state omits it."""
        return Person(
            id=node.id or fallback_id,
            name=node.name,
            username=node.username,
            avatar_url=node.profile_image or "",
            profile_image=node.profile_image,
            profile_url=self.site.profile_url(node.username) if node.username else None,
        )

    def topic_from_node(self, node: TopicNode, include_counts: bool = False) -> Topic:
        topic = Topic(
            id=node.id,
            name=clean_text(node.name),
            slug=node.slug,
        )
        if include_counts:
            topic.description = node.description or ""
            topic.followers_count = node.followers_count or 0
            topic.posts_count = node.posts_count or 0
        return topic

    def topics_from_connection(self, connection: Optional[TopicConnection]) -> List[Topic]:
        """Topics in edge order, unique by id."""
        if connection is None:
            return []

        topics: List[Topic] = []
        seen = set()
        for edge in connection.edges:
            if edge.node.id in seen:
                continue
            seen.add(edge.node.id)
            topics.append(self.topic_from_node(edge.node))
        return topics

    def product_from_item(self, item: PostItem, url: Optional[str] = None) -> Product:
        """Build a product summary from one post item."""
        return Product(
            id=item.id,
            name=item.name,
            tagline=clean_text(item.tagline),
            description=item.description or "",
            url=url or self.site.post_url(item.slug),
            thumbnail=self.site.file_url(item.thumbnail_image_uuid) if item.thumbnail_image_uuid else "",
            votes_count=item.votes_count or 0,
            comments_count=item.comments_count or 0,
            created_at=item.created_at,
            maker=self.person_from_node(item.user, fallback_id="maker") if item.user else None,
            topics=self.topics_from_connection(item.topics),
        )

    # =========================================================================
    # FEEDS
    # =========================================================================

    def resolve_homefeed(
        self,
        events: Sequence[RawEventRecord],
        edge_ids: Sequence[str],
        missing_message: str,
    ) -> List[Product]:
        """Products from the first homefeed edge whose id is one of `edge_ids`."""
        event = self.find_feed_event(events, HomefeedEvent)

        edge = next((e for e in event.homefeed.edges if e.node.id in edge_ids), None)
        if edge is None:
            self.logger.log_decision(
                decision="edge_missing",
                reason=missing_message,
                wanted=list(edge_ids),
                edges_seen=[e.node.id for e in event.homefeed.edges],
            )
            raise FeedNotFoundError(missing_message, feed="homefeed")

        items = [item for item in edge.node.items if item.typename == self.site.product_typename]
        self.logger.log_action(
            "resolve_homefeed",
            "completed",
            edge_id=edge.node.id,
            item_count=len(edge.node.items),
            product_count=len(items),
        )
        return [self.product_from_item(item) for item in items]

    def resolve_frontpage(self, events: Sequence[RawEventRecord]) -> List[Product]:
        return self.resolve_homefeed(events, self.site.featured_edge_ids, "Could not find featured products")

    def resolve_trending(self, events: Sequence[RawEventRecord]) -> List[Product]:
        return self.resolve_homefeed(events, self.site.popular_edge_ids, "Could not find popular products")

    def resolve_search_products(self, events: Sequence[RawEventRecord]) -> List[Product]:
        event = self.find_feed_event(events, SearchEvent)
        return [
            self.product_from_item(edge.node)
            for edge in event.search.edges
            if edge.node.typename == self.site.product_typename
        ]

    def resolve_search_users(self, events: Sequence[RawEventRecord]) -> List[Person]:
        event = self.find_feed_event(events, SearchEvent)
        users = []
        for edge in event.search.edges:
            node = edge.node
            if node.typename != self.site.user_typename:
                continue
            users.append(Person(
                id=node.id or f"user-{node.username}",
                name=node.name,
                username=node.username,
                avatar_url=node.profile_image or "",
                profile_image=node.profile_image,
                profile_url=self.site.profile_url(node.username) if node.username else None,
                headline=node.headline,
            ))
        return users

    def resolve_topics(self, events: Sequence[RawEventRecord]) -> List[Topic]:
        event = self.find_feed_event(events, TopicsEvent)
        return [self.topic_from_node(edge.node, include_counts=True) for edge in event.topics.edges]

    def resolve_post(
        self,
        events: Sequence[RawEventRecord],
        canonical_url: Optional[str] = None,
    ) -> Tuple[Product, PostItem]:
        """Summary for a product page, plus the raw post state for enrichment."""
        event = self.find_feed_event(events, PostEvent)
        return self.product_from_item(event.post, url=canonical_url), event.post
