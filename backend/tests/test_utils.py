import pytest

from common.utils import clean_optional_str, is_uuid
from core.config import Settings


@pytest.mark.parametrize("value, expected", [
    ("3f2b9c1e-8d4a-4c7e-9b1a-2d5e6f7a8b9c", True),
    ("missing", False),
    ("", False),
    (None, False),
])
def test_is_uuid(value, expected):
    assert is_uuid(value) is expected


def test_clean_optional_str():
    assert clean_optional_str("  Sony ") == "Sony"
    assert clean_optional_str("   ") is None
    assert clean_optional_str(None) is None


@pytest.mark.parametrize("raw, expected", [
    (None, []),
    ('["https://a.com/", "null"]', ["https://a.com"]),
    ("https://a.com, https://b.com/ ,undefined", ["https://a.com", "https://b.com"]),
])
def test_cors_origins(raw, expected):
    assert Settings(ALLOW_ORIGINS=raw).cors_origins() == expected
