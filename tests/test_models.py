from launchscope.layers.strategies import Strategy, append_unique, first_success
from launchscope.models.entities import Person, Product, extract_username_from_url
from launchscope.models.results import ProductResult, ProductsResult


def test_username_from_profile_url():
    assert extract_username_from_url("https://example.com/@alice") == "alice"
    assert extract_username_from_url("https://example.com/bob") == "bob"
    assert extract_username_from_url("/carol") == "carol"
    assert extract_username_from_url("") == ""
    assert extract_username_from_url(None) == ""
    assert extract_username_from_url("https://example.com/") == ""


def test_person_from_relative_profile_link():
    person = Person.from_profile_link("maker-0", "Dave", "/@dave", None, "https://ph.test")

    assert person.username == "dave"
    assert person.profile_url == "https://ph.test/@dave"
    assert person.avatar_url == ""


def test_product_field_report():
    product = Product(id="1", name="Alpha", url="https://ph.test/posts/alpha", daily_rank=4, makers=[])

    assert "daily_rank" in product.get_present_fields()
    assert "makers" in product.get_missing_fields()
    assert "thumbnail" in product.get_missing_fields()


def test_result_envelopes():
    assert ProductsResult().ok
    assert ProductsResult(error="boom").items == []
    assert ProductResult().items == []


def test_first_success_skips_empty_and_raising_strategies():
    calls = []

    def empty(ctx):
        calls.append("empty")
        return []

    def broken(ctx):
        calls.append("broken")
        raise ValueError("bad markup")

    def found(ctx):
        calls.append("found")
        return [ctx]

    def never(ctx):
        calls.append("never")
        return ["late"]

    strategies = [Strategy("empty", empty), Strategy("broken", broken), Strategy("found", found), Strategy("never", never)]

    assert first_success("field", strategies, "value") == ["value"]
    assert calls == ["empty", "broken", "found"]


def test_first_success_returns_none_when_all_empty():
    assert first_success("field", [Strategy("none", lambda ctx: None)], None) is None


def test_append_unique_keeps_first_occurrence():
    target = ["a", "b"]
    assert append_unique(target, ["b", "c", "a", "d"]) == ["a", "b", "c", "d"]
    assert append_unique(target, None) is target
