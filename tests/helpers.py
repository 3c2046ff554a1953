"""Builders for fixture pages and mocked HTTP transports."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from launchscope.adapters.fetcher import DocumentFetcher


TEST_BASE_URL = "https://ph.test"

Route = Tuple[int, Union[str, bytes]]


def state_script(events: List[Dict[str, Any]]) -> str:
    payload = json.dumps({"rehydrate": {}, "events": events}, separators=(",", ":"))
    return f'<script>(window[Symbol.for("ApolloSSRDataTransport")] ??= []).push({payload})</script>'


def page(body: str = "", head: str = "", events: Optional[List[Dict[str, Any]]] = None) -> str:
    scripts = state_script(events) if events is not None else ""
    return f"<html><head>{head}</head><body>{body}{scripts}</body></html>"


def data_event(**feeds: Any) -> Dict[str, Any]:
    return {"type": "data", "result": {"data": feeds}}


def topic_node(topic_id: str, name: str, slug: Optional[str] = None) -> Dict[str, Any]:
    return {"node": {"id": topic_id, "name": name, "slug": slug or name.lower()}}


def post_item(
    item_id: str,
    name: str,
    typename: str = "Post",
    topics: Optional[List[Dict[str, Any]]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    item = {
        "__typename": typename,
        "id": item_id,
        "name": name,
        "tagline": f"{name} tagline",
        "slug": name.lower().replace(" ", "-"),
        "votesCount": 10,
        "commentsCount": 2,
        "createdAt": "2024-05-01T07:01:00-07:00",
        "topics": {"edges": topics or []},
    }
    item.update(extra)
    return item


def homefeed_event(edges: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    return data_event(homefeed={
        "edges": [{"node": {"id": edge_id, "items": items}} for edge_id, items in edges.items()]
    })


def mock_fetcher(routes: Dict[str, Route], requests: Optional[List[httpx.Request]] = None) -> DocumentFetcher:
    """Fetcher whose client answers from `routes`, keyed by URL path. Unknown paths 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        status, body = routes.get(request.url.path, (404, "not found"))
        content = body.encode() if isinstance(body, str) else body
        return httpx.Response(status, content=content)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DocumentFetcher(client=client)
