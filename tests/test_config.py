"""
Tests for Settings validation
"""

import base64
import json

import pytest
from pydantic import ValidationError

from bookshelf.config import Settings


def encode(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode()).decode()


def test_firebase_key_decodes():
    settings = Settings(firebase_service_key=encode({"project_id": "demo"}))

    assert settings.firebase_credentials == {"project_id": "demo"}


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not base64 at all!",
        base64.b64encode(b"not json").decode(),
        encode(["a", "list"]),
    ],
)
def test_firebase_key_rejected(value: str):
    with pytest.raises(ValidationError):
        Settings(firebase_service_key=value)


def test_allowed_origins_list():
    settings = Settings(
        firebase_service_key=encode({}),
        allowed_origins="http://a.test, http://b.test",
    )

    assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


def test_invalid_environment():
    with pytest.raises(ValidationError):
        Settings(firebase_service_key=encode({}), environment="moon")
