"""
PageFeed Input Validators
=========================

URL validation for incoming feed requests. Validation is purely syntactic:
reachability is only discovered when the page is fetched.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

from .exceptions import ValidationError, ErrorCode


@dataclass(frozen=True)
class ValidatedURL:
    """A request URL that passed validation, plus its origin."""

    url: str
    origin: str

    def __str__(self) -> str:
        return self.url


class URLValidator:
    """URL validation utilities."""

    # Only schemes the page fetcher can retrieve
    ALLOWED_SCHEMES = {"http", "https"}

    # Characters that can never appear in a hostname
    ILLEGAL_HOST_CHARS = frozenset(' <>"{}|\\^`%')

    @classmethod
    def validate_page_url(cls, url: str) -> ValidatedURL:
        """Validate a page URL and derive its origin.

        The URL is expected to be decoded exactly once already (the HTTP
        layer's query parsing does that). It is not re-encoded, so the
        returned ``url`` doubles as the cache key.

        Args:
            url: URL to validate

        Returns:
            ValidatedURL with the normalized URL and its origin

        Raises:
            ValidationError: If URL is missing or malformed
        """
        if url is None or not isinstance(url, str) or url == "":
            raise ValidationError(
                "URL is required and must be a non-empty string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url",
                user_message="URL parameter is missing.",
            )

        # A present but blank parameter is malformed, not missing
        url = url.strip()
        if not url:
            raise cls._invalid("URL is blank")

        # urlsplit silently drops tabs and newlines, so check the raw text
        if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
            raise cls._invalid("URL contains control characters")

        try:
            parsed = urlsplit(url)
            # Accessing .port raises ValueError for out-of-range ports
            parsed.port
        except ValueError as e:
            raise cls._invalid(f"Invalid URL format: {e}")

        if not parsed.scheme:
            raise cls._invalid("URL must be absolute (scheme missing)")

        if parsed.scheme.lower() not in cls.ALLOWED_SCHEMES:
            raise cls._invalid(
                f"URL scheme must be {' or '.join(sorted(cls.ALLOWED_SCHEMES))}"
            )

        if not parsed.netloc or not parsed.hostname:
            raise cls._invalid("URL must include a hostname")

        cls._check_hostname(parsed.hostname)

        origin = f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"
        return ValidatedURL(url=url, origin=origin)

    @classmethod
    def _check_hostname(cls, hostname: str) -> None:
        """Reject hosts the fetcher could never resolve."""
        bad = cls.ILLEGAL_HOST_CHARS.intersection(hostname)
        if bad:
            raise cls._invalid(f"Hostname contains illegal characters: {''.join(sorted(bad))}")

        # IPv6 literals are not IDNA encodable but were already checked by urlsplit
        if ":" in hostname:
            return

        try:
            hostname.encode("idna")
        except UnicodeError as e:
            raise cls._invalid(f"Invalid hostname: {e}")

    @staticmethod
    def _invalid(message: str) -> ValidationError:
        return ValidationError(
            message,
            error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
            field_name="url",
            user_message="Invalid URL format provided.",
        )

    @classmethod
    def is_valid_page_url(cls, url: str) -> bool:
        """Check a URL without raising."""
        try:
            cls.validate_page_url(url)
            return True
        except ValidationError:
            return False
