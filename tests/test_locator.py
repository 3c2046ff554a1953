import pytest

from launchscope.exceptions import PayloadParseError, StateNotFoundError
from launchscope.layers.locator import EmbeddedStateLocator
from launchscope.models.events import HomefeedEvent, OtherEvent, TopicsEvent

from tests.helpers import data_event, homefeed_event, page, post_item, state_script, topic_node


def test_locate_returns_events_array():
    html = page(events=[{"type": "started"}])
    assert EmbeddedStateLocator().locate(html) == '[{"type":"started"}]'


def test_locate_uses_first_marker_script():
    first = state_script([{"type": "first"}])
    second = state_script([{"type": "second"}])
    html = f"<html><body>{first}{second}</body></html>"
    assert "first" in EmbeddedStateLocator().locate(html)


def test_locate_skips_unrelated_scripts():
    html = page(body='<script>window.analytics = {"events":[1]}</script>', events=[{"type": "data"}])
    assert EmbeddedStateLocator().locate(html) == '[{"type":"data"}]'


def test_missing_marker_raises():
    with pytest.raises(StateNotFoundError, match="Could not extract Apollo data"):
        EmbeddedStateLocator().locate("<html><body><p>Hello</p></body></html>")


def test_marker_without_events_raises():
    html = '<html><body><script>window.ApolloSSRDataTransport = {}</script></body></html>'
    with pytest.raises(StateNotFoundError):
        EmbeddedStateLocator().locate(html)


def test_decode_repairs_payload():
    assert EmbeddedStateLocator().decode('[{"a":undefined},]') == [{"a": None}]


def test_decode_raises_on_unrecoverable_payload():
    with pytest.raises(PayloadParseError, match="Failed to parse Apollo data"):
        EmbeddedStateLocator().decode('[{"a": }]')


def test_decode_rejects_non_array():
    with pytest.raises(PayloadParseError):
        EmbeddedStateLocator().decode('{"a": 1}')


def test_load_events_returns_typed_records():
    html = page(events=[
        {"type": "started"},
        homefeed_event({"FEATURED-0": [post_item("1", "Alpha")]}),
        data_event(topics={"edges": [topic_node("t1", "AI")]}),
    ])

    records = EmbeddedStateLocator().load_events(html)

    assert [type(r) for r in records] == [OtherEvent, HomefeedEvent, TopicsEvent]
