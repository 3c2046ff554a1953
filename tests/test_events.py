from launchscope.models.events import (
    HomefeedEvent,
    OtherEvent,
    PostEvent,
    SearchEvent,
    TopicsEvent,
    parse_event,
    parse_events,
)

from tests.helpers import data_event, homefeed_event, post_item, topic_node


def test_non_data_event_is_other():
    records = parse_event({"type": "started", "result": {"data": {"foo": 1}}})
    assert records == [OtherEvent(type="started", keys=["foo"])]


def test_non_dict_event_is_other():
    assert parse_event("oops") == [OtherEvent()]


def test_homefeed_event_is_typed():
    [record] = parse_event(homefeed_event({"FEATURED-0": [post_item("1", "Alpha")]}))

    assert isinstance(record, HomefeedEvent)
    edge = record.homefeed.edges[0]
    assert edge.node.id == "FEATURED-0"
    assert edge.node.items[0].typename == "Post"
    assert edge.node.items[0].votes_count == 10


def test_null_fields_take_defaults():
    item = post_item("1", "Alpha", tagline=None, votesCount=None)
    item["topics"] = None
    [record] = parse_event(data_event(post=item))

    assert isinstance(record, PostEvent)
    assert record.post.tagline is None
    assert record.post.votes_count is None
    assert record.post.topics is None


def test_numeric_ids_are_coerced_to_strings():
    [record] = parse_event(data_event(post=post_item(42, "Alpha")))
    assert record.post.id == "42"


def test_event_with_two_feeds_yields_two_records():
    event = data_event(
        search={"edges": [{"node": post_item("1", "Alpha")}]},
        topics={"edges": [topic_node("t1", "AI")]},
    )

    records = parse_event(event)

    assert [type(r) for r in records] == [SearchEvent, TopicsEvent]


def test_malformed_feed_is_skipped():
    records = parse_event(data_event(homefeed=[1, 2, 3]))
    assert records == [OtherEvent(type="data", keys=["homefeed"])]


def test_bad_item_is_dropped_and_rest_of_feed_kept():
    records = parse_event(homefeed_event({
        "FEATURED-0": [post_item("1", "Alpha"), post_item("2", "Beta", votesCount="many")],
    }))

    [record] = records
    assert isinstance(record, HomefeedEvent)
    assert [item.id for item in record.homefeed.edges[0].node.items] == ["1"]


def test_topic_edge_without_node_is_dropped():
    item = post_item("1", "Alpha", topics=[topic_node("t1", "AI"), {"node": None}, topic_node("t2", "SaaS")])

    [record] = parse_event(homefeed_event({"FEATURED-0": [item]}))

    [parsed] = record.homefeed.edges[0].node.items
    assert [edge.node.id for edge in parsed.topics.edges] == ["t1", "t2"]


def test_malformed_maker_and_search_edge_are_dropped():
    item = post_item("1", "Alpha", makers=[{"name": "Ann", "username": "ann"}, "not a person"])
    event = data_event(search={"edges": [{"node": item}, {"node": 7}]})

    [record] = parse_event(event)

    assert isinstance(record, SearchEvent)
    [edge] = record.search.edges
    assert [m.username for m in edge.node.makers] == ["ann"]


def test_parse_events_preserves_order():
    records = parse_events([
        data_event(topics={"edges": [topic_node("t1", "AI")]}),
        {"type": "started"},
        data_event(post=post_item("1", "Alpha")),
    ])
    assert [r.feed for r in records] == ["topics", "other", "post"]


def test_parse_events_ignores_non_list():
    assert parse_events({"events": []}) == []
