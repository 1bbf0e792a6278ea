"""
Model Response Classification
=============================

Turns the model's raw text into exactly one of three shapes. The decision
order is fixed: empty output is an error, an ``<error>`` payload wins over
everything else, an XML prologue is trusted as a feed, and anything else
is a contract violation.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from ..utils.exceptions import EmptyModelResponseError

ERROR_PREFIX = "<error>"
FEED_PREFIX = "<?xml"

_MESSAGE_RE = re.compile(r"<message>(.*?)</message>", re.DOTALL)


@dataclass(frozen=True)
class ValidFeed:
    """Model output that starts with an XML prologue."""
    xml: str


@dataclass(frozen=True)
class StructuredError:
    """Model output reporting that no articles were found."""
    xml: str

    @property
    def message(self) -> Optional[str]:
        return extract_error_message(self.xml)


@dataclass(frozen=True)
class Malformed:
    """Model output that ignored the output-format contract."""
    raw_text: str


ClassifiedResponse = Union[ValidFeed, StructuredError, Malformed]


def extract_error_message(xml: str) -> Optional[str]:
    """Return the text of the first ``<message>`` element, if any."""
    match = _MESSAGE_RE.search(xml)
    if match is None:
        return None
    return match.group(1).strip()


def classify_response(raw_text: Optional[str]) -> ClassifiedResponse:
    """Classify raw model output.

    Args:
        raw_text: Text returned by the model

    Returns:
        ValidFeed, StructuredError or Malformed carrying the trimmed text

    Raises:
        EmptyModelResponseError: If the text is empty after trimming
    """
    text = (raw_text or "").strip()

    if not text:
        raise EmptyModelResponseError()

    if text.startswith(ERROR_PREFIX):
        return StructuredError(xml=text)

    if text.startswith(FEED_PREFIX):
        return ValidFeed(xml=text)

    return Malformed(raw_text=text)
