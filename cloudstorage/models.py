"""Value types produced by storage operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ObjectSummary:
    """A single stored object as reported by a listing."""

    name: str
    content_length: int
    content_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "contentLength": self.content_length,
        }
        if self.content_type is not None:
            result["contentType"] = self.content_type
        return result


@dataclass(frozen=True)
class MultipartPlan:
    """Signed per-part upload URLs plus the part size bounds they assume."""

    min_part_size: int
    max_part_size: int
    urls: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ListingPage:
    """One page of a provider listing.

    continuation_token is None when the listing is exhausted.
    """

    items: List[ObjectSummary]
    continuation_token: Optional[str] = None
