"""
Typed view of the Apollo SSR event records embedded in Product Hunt pages.

Each data event carries exactly one of the known feeds. parse_events turns the
raw JSON array into tagged variants so resolvers can match on the feed they need
instead of digging through untyped dictionaries.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, model_validator

from launchscope.utils.logger import StageLogger

logger = StageLogger("events")

FEED_KEYS = ("homefeed", "post", "search", "topics")


class _Node(BaseModel):
    """
    Lenient base for upstream nodes.

    Nulls (including repaired `undefined` values) are dropped before validation
    so field defaults apply, and null entries are removed from lists.
    """
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = [v for v in value if v is not None]
            cleaned[key] = value
        return cleaned


def _keep_valid(item_type: Type[BaseModel]) -> BeforeValidator:
    """
    Validate list entries one at a time, dropping the ones that fail.

    A malformed node costs that entry only, not the feed it sits in.
    Non-list values are left for the field's own validation to reject.
    """
    def validate(value: Any) -> Any:
        if not isinstance(value, list):
            return value
        kept = []
        for index, entry in enumerate(value):
            try:
                kept.append(item_type.model_validate(entry))
            except ValidationError as e:
                logger.log_error(
                    f"Skipping malformed {item_type.__name__}: {e.error_count()} validation errors",
                    error_type="node_validation",
                    node=item_type.__name__,
                    index=index,
                )
        return kept

    return BeforeValidator(validate)


class PersonNode(_Node):
    id: Optional[str] = None
    name: str = ""
    username: str = ""
    profile_image: Optional[str] = Field(default=None, alias="profileImage")


class TopicNode(_Node):
    id: str = ""
    name: str = ""
    slug: str = ""
    description: Optional[str] = None
    followers_count: Optional[int] = Field(default=None, alias="followersCount")
    posts_count: Optional[int] = Field(default=None, alias="postsCount")


class TopicEdge(_Node):
    node: TopicNode


class TopicConnection(_Node):
    edges: Annotated[List[TopicEdge], _keep_valid(TopicEdge)] = Field(default_factory=list)


class MediaItem(_Node):
    url: Optional[str] = None
    image_uuid: Optional[str] = Field(default=None, alias="imageUuid")
    type: Optional[str] = None


class PostItem(_Node):
    """A homefeed item or post node. Only `Post`-typed items describe products."""
    typename: str = Field(default="", alias="__typename")
    id: str = ""
    name: str = ""
    tagline: Optional[str] = None
    description: Optional[str] = None
    slug: str = ""
    thumbnail_image_uuid: Optional[str] = Field(default=None, alias="thumbnailImageUuid")
    votes_count: Optional[int] = Field(default=None, alias="votesCount")
    comments_count: Optional[int] = Field(default=None, alias="commentsCount")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    user: Optional[PersonNode] = None
    hunter: Optional[PersonNode] = None
    makers: Annotated[Optional[List[PersonNode]], _keep_valid(PersonNode)] = None
    topics: Optional[TopicConnection] = None
    media: Annotated[Optional[List[MediaItem]], _keep_valid(MediaItem)] = None
    gallery: Annotated[Optional[List[MediaItem]], _keep_valid(MediaItem)] = None


class SearchNode(PostItem):
    """Search results mix posts and users; user nodes carry these extra fields."""
    username: str = ""
    profile_image: Optional[str] = Field(default=None, alias="profileImage")
    headline: Optional[str] = None


class SearchEdge(_Node):
    node: SearchNode


class SearchConnection(_Node):
    edges: Annotated[List[SearchEdge], _keep_valid(SearchEdge)] = Field(default_factory=list)


class HomefeedNode(_Node):
    id: str = ""
    items: Annotated[List[PostItem], _keep_valid(PostItem)] = Field(default_factory=list)


class HomefeedEdge(_Node):
    node: HomefeedNode


class Homefeed(_Node):
    edges: Annotated[List[HomefeedEdge], _keep_valid(HomefeedEdge)] = Field(default_factory=list)


class HomefeedEvent(BaseModel):
    feed: Literal["homefeed"] = "homefeed"
    type: str = "data"
    homefeed: Homefeed


class PostEvent(BaseModel):
    feed: Literal["post"] = "post"
    type: str = "data"
    post: PostItem


class SearchEvent(BaseModel):
    feed: Literal["search"] = "search"
    type: str = "data"
    search: SearchConnection


class TopicsEvent(BaseModel):
    feed: Literal["topics"] = "topics"
    type: str = "data"
    topics: TopicConnection


class OtherEvent(BaseModel):
    """Any record that is not a data event for a known feed."""
    feed: Literal["other"] = "other"
    type: str = ""
    keys: List[str] = Field(default_factory=list)


RawEventRecord = Union[HomefeedEvent, PostEvent, SearchEvent, TopicsEvent, OtherEvent]

_FEED_MODELS = {
    "homefeed": HomefeedEvent,
    "post": PostEvent,
    "search": SearchEvent,
    "topics": TopicsEvent,
}


def _event_data(raw: Dict[str, Any]) -> Dict[str, Any]:
    result = raw.get("result")
    if not isinstance(result, dict):
        return {}
    data = result.get("data")
    return data if isinstance(data, dict) else {}


def parse_event(raw: Any) -> List[RawEventRecord]:
    """
    Convert one raw event into tagged records.

    A data event yields one record per known feed it carries (normally one);
    anything else yields a single OtherEvent.
    """
    if not isinstance(raw, dict):
        return [OtherEvent()]

    event_type = str(raw.get("type") or "")
    data = _event_data(raw)

    if event_type != "data":
        return [OtherEvent(type=event_type, keys=list(data.keys()))]

    records: List[RawEventRecord] = []
    for feed in FEED_KEYS:
        payload = data.get(feed)
        if not payload:
            continue
        try:
            records.append(_FEED_MODELS[feed].model_validate({feed: payload, "type": event_type}))
        except ValidationError as e:
            logger.log_error(
                f"Malformed {feed} payload: {e.error_count()} validation errors",
                error_type="event_validation",
                feed=feed,
            )

    return records or [OtherEvent(type=event_type, keys=list(data.keys()))]


def parse_events(raw_events: Any) -> List[RawEventRecord]:
    """Convert the parsed `events` array into tagged records, preserving order."""
    if not isinstance(raw_events, list):
        return []

    records: List[RawEventRecord] = []
    for raw in raw_events:
        records.extend(parse_event(raw))
    return records
