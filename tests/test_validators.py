"""Tests for input normalization."""

import pytest

from app.core.exceptions import InvalidInput
from app.utils.validators import normalize_email, normalize_phone, normalize_slug


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    def test_special_use_domain_is_well_formed(self):
        assert normalize_email("Jane@Yoga.test") == "jane@yoga.test"

    @pytest.mark.parametrize("email", ["", "   ", "not-an-email", "jane@", "@example.com"])
    def test_invalid(self, email):
        with pytest.raises(InvalidInput) as exc_info:
            normalize_email(email)
        assert exc_info.value.to_content() == {"error": "Invalid email address"}


class TestNormalizeSlug:
    def test_lowercase_and_dashes(self):
        assert normalize_slug("  Lotus Yoga  ") == "lotus-yoga"
        assert normalize_slug("Zen--Den!") == "zen-den"

    @pytest.mark.parametrize("slug", ["", "!!!", " - "])
    def test_empty_after_normalizing(self, slug):
        with pytest.raises(InvalidInput) as exc_info:
            normalize_slug(slug)
        assert exc_info.value.to_content() == {"error": "Slug must contain letters or digits"}


class TestNormalizePhone:
    def test_strips_formatting(self):
        assert normalize_phone("+31 (6) 1234-5678") == "+31612345678"

    def test_blank_is_none(self):
        assert normalize_phone(None) is None
        assert normalize_phone("  ") is None
