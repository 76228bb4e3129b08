"""Data types shared across the Gmail modules."""

from dataclasses import dataclass, field
from typing import Any

# A Gmail API message / payload resource as returned by googleapiclient.
RawMessage = dict[str, Any]
PayloadNode = dict[str, Any]

#: Substituted for the body whenever no plain-text content can be decoded.
BODY_UNAVAILABLE = "Body content not available"


@dataclass(frozen=True)
class NormalizedEmail:
    """A Gmail message reduced to the fields the tool reports show.

    Every field has an empty default so formatters never need to tell
    "absent" apart from "empty".
    """

    id: str = ""
    thread_id: str = ""
    snippet: str = ""
    sender: str = ""
    recipient: str = ""
    subject: str = ""
    date: str = ""
    body: str = ""
    labels: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ExtractedBody:
    """Outcome of body extraction.

    ``found`` is False when the payload had no decodable plain-text part;
    callers render that case as BODY_UNAVAILABLE.
    """

    text: str
    found: bool = True

    def render(self) -> str:
        return self.text if self.found else BODY_UNAVAILABLE


@dataclass(frozen=True)
class LabelInfo:
    """A Gmail label as listed by users.labels.list."""

    id: str
    name: str
    type: str = "user"
    messages_total: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "LabelInfo":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            type=str(data.get("type") or "user"),
            messages_total=int(data.get("messagesTotal") or 0),
        )
