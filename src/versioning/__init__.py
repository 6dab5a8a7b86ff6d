"""Content versioning — record store, history recorder, restore engine."""

from src.versioning.history import history_recorder
from src.versioning.restore import restore_engine
from src.versioning.store import blog_post_store, get_store, page_store

__all__ = ["history_recorder", "restore_engine", "page_store", "blog_post_store", "get_store"]
