"""
Product Hunt GraphQL API adapter.
An alternative data source to scraping; requires a developer token.
"""
import calendar
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from launchscope.adapters import queries
from launchscope.config import config
from launchscope.exceptions import ApiError
from launchscope.models.entities import Person, Product, Topic
from launchscope.models.results import PagedProductsResult, TopicsResult, UserResult, UsersResult
from launchscope.utils.logger import StageLogger


class TimeRange(str, Enum):
    """Launch archive windows, measured back from now."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ApiResponse(BaseModel):
    """Result-or-error envelope for one GraphQL request."""
    data: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None


def _subtract_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def posted_after(time_range: TimeRange, now: Optional[datetime] = None) -> datetime:
    """Start of the archive window for `time_range`."""
    now = now or datetime.now(timezone.utc)
    if time_range == TimeRange.DAILY:
        return now - timedelta(days=1)
    if time_range == TimeRange.WEEKLY:
        return now - timedelta(days=7)
    if time_range == TimeRange.MONTHLY:
        return _subtract_months(now, 1)
    return _subtract_months(now, 12)


class ProductHuntApiClient:
    """
    Thin typed mapper over the GraphQL endpoint.
    Every public method returns a result envelope and never raises.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = config.REQUEST_TIMEOUT,
    ):
        self.token = token if token is not None else config.PH_DEVELOPER_TOKEN
        self.api_url = api_url or config.PH_API_URL
        self.client = client
        self.timeout = timeout
        self.logger = StageLogger("graphql_client")

    def is_configured(self) -> bool:
        return bool(self.token)

    def _get_headers(self) -> Dict[str, str]:
        if not self.token:
            raise ApiError("Developer token not found. Please set PH_DEVELOPER_TOKEN.")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """POST one query; transport, HTTP and GraphQL errors all become `error`."""
        payload = {"query": query, "variables": variables or {}}

        try:
            headers = self._get_headers()
            if self.client is not None:
                response = await self.client.post(self.api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=headers)

            if not response.is_success:
                raise ApiError(f"HTTP error! status: {response.status_code}")

            result = response.json()
            errors = result.get("errors") or []
            if errors:
                raise ApiError(errors[0].get("message", "Unknown GraphQL error"))

            return ApiResponse(data=result.get("data") or {})

        except (ApiError, httpx.HTTPError, ValueError) as e:
            self.logger.log_error(str(e), error_type=type(e).__name__, api_url=self.api_url)
            return ApiResponse(error=str(e))

    # =========================================================================
    # MAPPERS
    # =========================================================================

    def _user(self, node: Dict[str, Any]) -> Person:
        return Person(
            id=str(node.get("id") or ""),
            name=node.get("name") or "",
            username=node.get("username") or "",
            headline=node.get("headline"),
            avatar_url=node.get("profileImage") or "",
            profile_image=node.get("profileImage"),
            website_url=node.get("websiteUrl"),
            twitter_username=node.get("twitterUsername"),
            products_count=node.get("productsCount"),
            followers_count=node.get("followersCount"),
        )

    def _product(self, node: Dict[str, Any]) -> Product:
        topics = (node.get("topics") or {}).get("edges") or []
        user = node.get("user")
        return Product(
            id=str(node.get("id") or ""),
            name=node.get("name") or "",
            tagline=node.get("tagline") or "",
            description=node.get("description") or "",
            url=node.get("url") or "",
            thumbnail=(node.get("thumbnail") or {}).get("url") or "",
            votes_count=node.get("votesCount") or 0,
            comments_count=node.get("commentsCount") or 0,
            created_at=node.get("createdAt"),
            topics=[
                Topic(id=str(e["node"].get("id")), name=e["node"].get("name") or "", slug=e["node"].get("slug") or "")
                for e in topics
                if e.get("node")
            ],
            maker=self._user(user) if user else None,
        )

    def _paged_products(self, connection: Optional[Dict[str, Any]], invalid_message: str) -> PagedProductsResult:
        if not connection or connection.get("edges") is None:
            return PagedProductsResult(error=invalid_message)

        page_info = connection.get("pageInfo") or {}
        return PagedProductsResult(
            products=[
                self._product(edge["node"])
                for edge in connection["edges"]
                if isinstance(edge.get("node"), dict)
            ],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor") or "",
        )

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def search_products(self, query: str, first: int = 20, after: Optional[str] = None) -> PagedProductsResult:
        response = await self.execute(queries.SEARCH_PRODUCTS_QUERY, {"query": query, "first": first, "after": after})
        if response.error:
            return PagedProductsResult(error=response.error)
        return self._paged_products(response.data.get("search"), "Invalid search response")

    async def get_trending_products(self, first: int = 20, after: Optional[str] = None) -> PagedProductsResult:
        response = await self.execute(queries.GET_TRENDING_PRODUCTS_QUERY, {"first": first, "after": after})
        if response.error:
            return PagedProductsResult(error=response.error)
        return self._paged_products(response.data.get("posts"), "Invalid posts response")

    async def get_upcoming_products(self, first: int = 20, after: Optional[str] = None) -> PagedProductsResult:
        response = await self.execute(queries.GET_UPCOMING_PRODUCTS_QUERY, {"first": first, "after": after})
        if response.error:
            return PagedProductsResult(error=response.error)
        return self._paged_products(response.data.get("upcoming"), "Invalid upcoming response")

    async def get_launch_archive(
        self,
        time_range: TimeRange,
        first: int = 20,
        after: Optional[str] = None,
    ) -> PagedProductsResult:
        now = datetime.now(timezone.utc)
        response = await self.execute(queries.GET_LAUNCH_ARCHIVE_QUERY, {
            "first": first,
            "after": after,
            "postedAfter": posted_after(TimeRange(time_range), now).isoformat(),
            "postedBefore": now.isoformat(),
        })
        if response.error:
            return PagedProductsResult(error=response.error)
        return self._paged_products(response.data.get("posts"), "Invalid posts response")

    async def get_products_by_topic(
        self,
        topic_slug: str,
        first: int = 20,
        after: Optional[str] = None,
    ) -> PagedProductsResult:
        response = await self.execute(
            queries.GET_PRODUCTS_BY_TOPIC_QUERY, {"topicSlug": topic_slug, "first": first, "after": after}
        )
        if response.error:
            return PagedProductsResult(error=response.error)

        topic = response.data.get("topic")
        if not topic:
            return PagedProductsResult(error="Topic not found")
        return self._paged_products(topic.get("products"), "Invalid topic response")

    async def get_topics(self) -> TopicsResult:
        response = await self.execute(queries.GET_TOPICS_QUERY)
        if response.error:
            return TopicsResult(error=response.error)

        edges = (response.data.get("topics") or {}).get("edges") or []
        return TopicsResult(topics=[
            Topic(
                id=str(edge["node"].get("id")),
                name=edge["node"].get("name") or "",
                slug=edge["node"].get("slug") or "",
                description=edge["node"].get("description"),
            )
            for edge in edges
            if edge.get("node")
        ])

    async def search_users(self, query: str, first: int = 20) -> UsersResult:
        response = await self.execute(queries.SEARCH_USERS_QUERY, {"query": query, "first": first})
        if response.error:
            return UsersResult(error=response.error)

        edges = (response.data.get("search") or {}).get("edges") or []
        return UsersResult(users=[self._user(edge["node"]) for edge in edges if edge.get("node")])

    async def get_user_by_username(self, username: str) -> UserResult:
        response = await self.execute(queries.GET_USER_BY_USERNAME_QUERY, {"username": username})
        if response.error:
            return UserResult(error=response.error)

        user = response.data.get("user")
        if not user:
            return UserResult(error="User not found")
        return UserResult(user=self._user(user))
