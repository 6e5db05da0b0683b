"""Tests for the CSV-backed store."""
import pytest

from bookmark_launcher.drag import ReorderIntent
from bookmark_launcher.errors import NotFoundError, ValidationError
from bookmark_launcher.models import Bookmark, Category


def titles(category):
    return [b.title for b in category.bookmarks]


def orders(category):
    return [b.sort_order for b in category.bookmarks]


def test_created_bookmarks_append(dev_category):
    assert titles(dev_category) == ["Alpha", "Bravo", "Charlie", "Delta"]
    assert orders(dev_category) == [0, 1, 2, 3]


def test_create_ignores_given_sort_order(store, dev_category):
    b = store.create_bookmark(Bookmark(None, "Echo", "echo.example", dev_category.id, sort_order=0))
    assert b.sort_order == 4
    assert b.url == "https://echo.example"


def test_reorder_rewrites_whole_category(store, dev_category):
    a, b, c, d = dev_category.bookmark_ids
    cat = store.reorder(dev_category.id, [b, c, a, d])
    assert titles(cat) == ["Bravo", "Charlie", "Alpha", "Delta"]
    assert orders(cat) == [0, 1, 2, 3]
    assert titles(store.get_category(dev_category.id)) == ["Bravo", "Charlie", "Alpha", "Delta"]


def test_reorder_ignores_unknown_and_keeps_missing(store, dev_category):
    a, b, c, d = dev_category.bookmark_ids
    cat = store.reorder(dev_category.id, [d, "ghost", b])
    assert titles(cat) == ["Delta", "Bravo", "Alpha", "Charlie"]
    assert orders(cat) == [0, 1, 2, 3]


def test_apply_intent(store, dev_category):
    a, b, c, d = dev_category.bookmark_ids
    cat = store.apply_intent(ReorderIntent(dev_category.id, (d, c, b, a)))
    assert titles(cat) == ["Delta", "Charlie", "Bravo", "Alpha"]


def test_reorder_unknown_category(store):
    with pytest.raises(NotFoundError):
        store.reorder("nope", [])


def test_categories_sorted_and_reorderable(store, dev_category):
    news = store.create_category(Category(None, "News", hex_color="#F59E0B"))
    assert news.hex_color == "#f59e0b"
    assert [c.name for c in store.fetch_categories()] == ["Dev Tools", "News"]
    cats = store.reorder_categories([news.id])
    assert [c.name for c in cats] == ["News", "Dev Tools"]
    assert [c.sort_order for c in cats] == [0, 1]


def test_duplicate_appends_copy(store, dev_category):
    src = dev_category.bookmarks[0]
    copy = store.duplicate_bookmark(src.id)
    assert copy.id and copy.id != src.id
    assert copy.title == "Alpha (copy)"
    assert copy.sort_order == 4
    assert titles(store.get_category(dev_category.id))[-1] == "Alpha (copy)"


def test_duplicate_of_model_strips_id():
    b = Bookmark("b1", "Alpha", "https://a.example", "c1", sort_order=3)
    copy = b.duplicate()
    assert copy.id is None and copy.sort_order is None
    assert b.id == "b1"


def test_update_bookmark_to_other_category_appends(store, dev_category):
    other = store.create_category(Category(None, "Other"))
    store.create_bookmark(Bookmark(None, "Zulu", "https://z.example", other.id))
    moved = store.update_bookmark(dev_category.bookmarks[0].id, {"category_id": other.id})
    assert moved.sort_order == 1
    assert titles(store.get_category(other.id)) == ["Zulu", "Alpha"]


def test_update_bookmark_icon_fields(store, dev_category):
    bid = dev_category.bookmarks[0].id
    b = store.update_bookmark(bid, {"icon_type": "symbol", "symbol_name": "rocket", "hex_color": "#10B981"})
    assert (b.icon_type, b.symbol_name, b.hex_color) == ("symbol", "rocket", "#10b981")
    with pytest.raises(ValidationError):
        store.update_bookmark(bid, {"icon_type": "custom", "icon_url": ""})


@pytest.mark.parametrize("changes", [
    {"title": ""},
    {"url": ""},
    {"icon_type": "emoji"},
    {"icon_type": "symbol", "symbol_name": None},
    {"hex_color": "blue"},
])
def test_bookmark_validation(store, dev_category, changes):
    data = {"title": "X", "url": "https://x.example", "category_id": dev_category.id, **changes}
    with pytest.raises(ValidationError):
        store.create_bookmark(Bookmark.from_dict(data))


def test_bookmark_needs_existing_category(store):
    with pytest.raises(NotFoundError):
        store.create_bookmark(Bookmark(None, "X", "https://x.example", "nope"))


def test_delete_category_cascades(store, dev_category):
    assert store.delete_category(dev_category.id) == 4
    assert store.fetch_categories() == []
    assert not [r for r in store.load_rows() if r["rowtype"] == "bookmark"]


def test_delete_bookmark(store, dev_category):
    store.delete_bookmark(dev_category.bookmarks[1].id)
    assert titles(store.get_category(dev_category.id)) == ["Alpha", "Charlie", "Delta"]
    with pytest.raises(NotFoundError):
        store.delete_bookmark(dev_category.bookmarks[1].id)


def test_update_category(store, dev_category):
    cat = store.update_category(dev_category.id, {"name": "Dev", "default_symbol": "terminal"})
    assert (cat.name, cat.default_symbol, cat.hex_color) == ("Dev", "terminal", "#3b82f6")
    assert len(cat.bookmarks) == 4


def test_seed_defaults_once(store):
    assert store.seed_defaults()
    assert not store.seed_defaults()
    assert [c.name for c in store.fetch_categories()] == ["News", "Dev Tools"]


@pytest.mark.parametrize("data", [
    {"title": {"text": "X"}, "url": "https://x.example", "category_id": "c1"},
    {"title": "X", "url": ["https://x.example"], "category_id": "c1"},
    {"title": "X", "url": "https://x.example", "category_id": "c1", "icon_type": ["symbol"]},
])
def test_bookmark_from_dict_rejects_non_strings(data):
    with pytest.raises(ValidationError):
        Bookmark.from_dict(data)


def test_bookmark_from_dict_coerces_scalars():
    b = Bookmark.from_dict({"title": 5, "url": "x.example", "category_id": 7})
    assert (b.title, b.category_id) == ("5", "7")


def test_category_from_dict_rejects_bad_shapes():
    with pytest.raises(ValidationError):
        Category.from_dict({"name": ["News"]})
    with pytest.raises(ValidationError):
        Category.from_dict({"name": "News", "bookmarks": "nope"})
    with pytest.raises(ValidationError):
        Category.from_dict({"name": "News", "bookmarks": ["nope"]})
