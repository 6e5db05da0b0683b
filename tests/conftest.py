import pytest

from bookmark_launcher.app import create_app
from bookmark_launcher.config import TestingConfig
from bookmark_launcher.models import Bookmark, Category
from bookmark_launcher.store import BookmarkStore


@pytest.fixture
def store(tmp_path):
    return BookmarkStore(str(tmp_path / "bookmarks.csv"))


@pytest.fixture
def dev_category(store):
    cat = store.create_category(Category(None, "Dev Tools", hex_color="#3b82f6", default_symbol="code"))
    for title in ("Alpha", "Bravo", "Charlie", "Delta"):
        store.create_bookmark(Bookmark(None, title, f"https://{title.lower()}.example", cat.id))
    return store.get_category(cat.id)


@pytest.fixture
def app(store):
    return create_app(TestingConfig, store=store)


@pytest.fixture
def client(app):
    return app.test_client()
