"""Company slug rules.

A slug is the URL-safe identifier of a company. It names the company in
the request path (``/ahmed-tech/api/...``), doubles as its subdomain in
host-based routing, and determines the physical database name.

Everything here is pure: availability against the registry is checked by
the slug allocator in the application layer.
"""

from __future__ import annotations

import re
import secrets
import string

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
MIN_LENGTH = 3
MAX_LENGTH = 63
SANITIZED_MAX_LENGTH = 50
UNIQUE_BASE_MAX_LENGTH = 45

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits

TRANSLITERATIONS: dict[str, str] = {
    # Arabic
    "أ": "a", "ب": "b", "ت": "t", "ث": "th", "ج": "j",
    "ح": "h", "خ": "kh", "د": "d", "ذ": "dh", "ر": "r",
    "ز": "z", "س": "s", "ش": "sh", "ص": "s", "ض": "d",
    "ط": "t", "ظ": "z", "ع": "a", "غ": "gh", "ف": "f",
    "ق": "q", "ك": "k", "ل": "l", "م": "m", "ن": "n",
    "ه": "h", "و": "w", "ي": "y", "ى": "a", "ة": "a",
    "ا": "a", "إ": "i", "آ": "a", "ء": "",
    # Latin with diacritics
    "ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss",
    "à": "a", "á": "a", "â": "a", "ã": "a", "å": "a",
    "è": "e", "é": "e", "ê": "e", "ë": "e",
    "ì": "i", "í": "i", "î": "i", "ï": "i",
    "ò": "o", "ó": "o", "ô": "o", "õ": "o",
    "ù": "u", "ú": "u", "û": "u",
    "ñ": "n", "ç": "c",
}  # fmt: skip

_TRANSLATION_TABLE = str.maketrans(TRANSLITERATIONS)

RESERVED_SLUGS: frozenset[str] = frozenset(
    {
        "www", "app", "api", "admin", "dashboard", "panel", "login",
        "register", "registration", "auth", "mail", "email", "smtp", "ftp",
        "sftp", "cdn", "static", "assets", "images", "img", "media",
        "files", "docs", "redoc", "help", "support", "status", "health",
        "blog", "news", "shop", "store", "billing", "payment", "payments",
        "checkout", "cart", "account", "accounts", "profile", "settings",
        "config", "test", "demo", "staging", "dev", "development", "prod",
        "production", "beta", "alpha", "preview", "sandbox", "localhost",
        "local", "internal", "private", "public", "secure", "ssl", "vpn",
        "git", "gitlab", "github", "bitbucket", "jenkins", "ci", "cd",
        "deploy", "kubernetes", "k8s", "docker", "redis", "mysql",
        "postgres", "mongodb", "db", "database", "cache", "queue",
        "worker", "cron", "job", "jobs", "webhook", "webhooks", "callback",
        "oauth", "sso", "saml", "ldap", "salesdesk", "crm", "sales",
        "contacts", "accounting", "inventory", "hr", "erp", "system",
        "root", "null", "undefined", "admin1", "administrator",
        "superadmin", "moderator", "mod", "owner", "master", "info",
        "contact", "about", "privacy", "terms", "legal", "security",
        "abuse", "spam", "postmaster", "hostmaster", "webmaster", "ns1",
        "ns2", "ns3", "mx", "mx1", "mx2",
    }
)  # fmt: skip


def random_suffix(length: int = 8) -> str:
    """Return a random lowercase alphanumeric string."""
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))


def transliterate(value: str) -> str:
    """Replace known non-ASCII letters with Latin equivalents."""
    return value.translate(_TRANSLATION_TABLE)


def sanitize(name: str) -> str:
    """Turn a company name into a slug candidate.

    Lowercases, transliterates, collapses every run of characters outside
    ``[a-z0-9]`` into one hyphen, trims hyphens and caps the length. A name
    with nothing usable left falls back to ``company-<random>``.

    Examples:
        >>> sanitize("Ahmed Tech!")
        'ahmed-tech'
    """
    slug = transliterate(name.lower())
    slug = _NON_ALNUM.sub("-", slug).strip("-")
    slug = slug[:SANITIZED_MAX_LENGTH].rstrip("-")
    if not slug:
        slug = f"company-{random_suffix()}"
    return slug


def is_reserved(slug: str) -> bool:
    return slug.lower() in RESERVED_SLUGS


def format_error(slug: str) -> str | None:
    """Return why ``slug`` is not a well-formed slug, or None.

    Reserved words are reported too, but registry availability is not
    checked here.
    """
    if len(slug) < MIN_LENGTH:
        return f"Slug must be at least {MIN_LENGTH} characters long"
    if len(slug) > MAX_LENGTH:
        return f"Slug must not exceed {MAX_LENGTH} characters"
    if not re.match(r"^[a-z0-9]", slug):
        return "Slug must start with a letter or number"
    if not re.search(r"[a-z0-9]$", slug):
        return "Slug must end with a letter or number"
    if not re.fullmatch(r"[a-z0-9-]+", slug):
        return "Slug can only contain lowercase letters, numbers, and hyphens"
    if "--" in slug:
        return "Slug cannot contain consecutive hyphens"
    if is_reserved(slug):
        return "This slug is reserved and cannot be used"
    return None


def is_valid_format(slug: str) -> bool:
    """Check length and character rules (reserved words are not considered)."""
    return MIN_LENGTH <= len(slug) <= MAX_LENGTH and bool(SLUG_PATTERN.match(slug))


def database_name_for(slug: str, prefix: str = "tenant_") -> str:
    """Derive the physical database name for a slug.

    Examples:
        >>> database_name_for("ahmed-tech")
        'tenant_ahmed_tech'
    """
    return f"{prefix}{slug.replace('-', '_')}"
