from launchscope.models.entities import Product
from launchscope.storage.saved_products import SavedProductStore


def _product(product_id, name, tagline=""):
    return Product(id=product_id, name=name, tagline=tagline, url=f"https://ph.test/posts/{name.lower()}")


def test_missing_file_reads_as_empty(tmp_path):
    assert SavedProductStore(tmp_path / "saved.json").list() == []


def test_save_is_idempotent(tmp_path):
    store = SavedProductStore(tmp_path / "nested" / "saved.json")

    first = store.save(_product("1", "Alpha"))
    second = store.save(_product("1", "Alpha renamed"))

    assert first == second
    assert first.id == "saved-1"
    assert [p.product_id for p in store.list()] == ["1"]
    assert store.is_saved("1")


def test_records_survive_a_new_store_instance(tmp_path):
    path = tmp_path / "saved.json"
    SavedProductStore(path).save(_product("1", "Alpha"))
    SavedProductStore(path).save(_product("2", "Beta"))

    assert [p.name for p in SavedProductStore(path).list()] == ["Alpha", "Beta"]


def test_remove(tmp_path):
    store = SavedProductStore(tmp_path / "saved.json")
    store.save(_product("1", "Alpha"))

    assert store.remove("1") is True
    assert store.remove("1") is False
    assert not store.is_saved("1")


def test_search_matches_name_or_tagline(tmp_path):
    store = SavedProductStore(tmp_path / "saved.json")
    store.save(_product("1", "Alpha", "Notes for teams"))
    store.save(_product("2", "Beta", "Calendar sync"))

    assert [p.product_id for p in store.search("NOTES")] == ["1"]
    assert [p.product_id for p in store.search("beta")] == ["2"]
    assert len(store.search("")) == 2


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "saved.json"
    path.write_text("{not json")
    assert SavedProductStore(path).list() == []
