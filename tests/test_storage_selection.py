from unittest.mock import patch

import pytest

from cyber_ai.config import Settings
from cyber_ai.services.memory import MemStorage
from cyber_ai.services.storage import build_storage, parse_firestore_url


def test_parse_firestore_url_with_database():
    assert parse_firestore_url("firestore://my-project/chats") == ("my-project", "chats")


def test_parse_firestore_url_default_database():
    assert parse_firestore_url("firestore://my-project") == ("my-project", "(default)")


def test_parse_firestore_url_requires_project():
    with pytest.raises(ValueError):
        parse_firestore_url("firestore://")


@pytest.mark.parametrize("url", [None, "", "postgres://user:pw@localhost/db"])
def test_build_storage_defaults_to_memory(url):
    assert isinstance(build_storage(Settings(database_url=url)), MemStorage)


def test_build_storage_selects_firestore():
    with patch("cyber_ai.services.firestore.firestore.Client") as client_cls:
        storage = build_storage(Settings(database_url="firestore://proj/db"))

    client_cls.assert_called_once_with(project="proj", database="db")
    assert type(storage).__name__ == "FirestoreStorage"
