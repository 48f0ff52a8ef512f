"""Unit tests for the pure slug rules."""

import pytest

from tenancy.domain import slugs


class TestSanitize:
    """Tests for deriving a slug candidate from a company name."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Ahmed Tech", "ahmed-tech"),
            ("  Ahmed   Tech!!  ", "ahmed-tech"),
            ("ACME, Inc.", "acme-inc"),
            ("Müller & Söhne", "mueller-soehne"),
            ("Café Olé", "cafe-ole"),
            ("--Already-Slugged--", "already-slugged"),
        ],
    )
    def test_sanitizes_names(self, name, expected):
        assert slugs.sanitize(name) == expected

    def test_transliterates_arabic(self):
        """Arabic letters map to Latin equivalents."""
        assert slugs.sanitize("شركة") == "shrka"

    def test_caps_length_without_trailing_hyphen(self):
        name = "a" * 49 + " b" + "c" * 20

        slug = slugs.sanitize(name)

        assert len(slug) <= slugs.SANITIZED_MAX_LENGTH
        assert not slug.endswith("-")

    def test_falls_back_when_nothing_usable(self):
        """A name with no usable characters gets a random company slug."""
        slug = slugs.sanitize("!!!")

        assert slug.startswith("company-")
        assert len(slug) == len("company-") + 8
        assert slugs.format_error(slug) is None


class TestFormatError:
    """Tests for slug validation messages."""

    def test_valid_slug(self):
        assert slugs.format_error("ahmed-tech") is None

    @pytest.mark.parametrize(
        ("slug", "fragment"),
        [
            ("ab", "at least 3"),
            ("a" * 64, "must not exceed 63"),
            ("-abc", "start with"),
            ("abc-", "end with"),
            ("Abc", "start with"),
            ("ab_c", "lowercase letters"),
            ("ab--c", "consecutive hyphens"),
            ("admin", "reserved"),
        ],
    )
    def test_invalid_slugs(self, slug, fragment):
        assert fragment in slugs.format_error(slug)

    def test_is_valid_format_ignores_reserved_words(self):
        """Reserved words are well formed; availability is a separate rule."""
        assert slugs.is_valid_format("admin") is True
        assert slugs.is_valid_format("ab--c") is False


class TestReservedSlugs:
    def test_landlord_route_prefixes_are_reserved(self):
        for word in ("api", "auth", "registration", "health", "docs", "redoc"):
            assert slugs.is_reserved(word)

    def test_reserved_check_is_case_insensitive(self):
        assert slugs.is_reserved("ADMIN")


class TestDatabaseNameFor:
    def test_hyphens_become_underscores(self):
        assert slugs.database_name_for("ahmed-tech") == "tenant_ahmed_tech"

    def test_custom_prefix(self):
        assert slugs.database_name_for("acme", prefix="crm_") == "crm_acme"

    def test_underscores_never_reach_the_rewrite(self):
        """Slugs cannot contain underscores, so the hyphen rewrite is unambiguous."""
        assert slugs.format_error("a_b-c") is not None


def test_random_suffix_alphabet():
    suffix = slugs.random_suffix(12)

    assert len(suffix) == 12
    assert suffix.isalnum() and suffix == suffix.lower()
