"""Provider Capability Protocol.

Defines the primitives each storage backend binding must expose. Everything
above this interface (part planning, pagination, upload/download composition)
is provider independent.
"""

from enum import Enum
from typing import BinaryIO, Dict, Iterator, Optional, Protocol, Any

from cloudstorage.models import ListingPage


class SignedUrlAction(str, Enum):
    """Permission granted by a presigned URL."""

    READ = "read"
    WRITE_CHUNK = "write_chunk"


class ProviderCapability(Protocol):
    """Protocol for provider bindings.

    Bindings wrap a provider SDK client for a single bucket/container. They
    convert the library-wide millisecond TTL into the provider's native unit
    and let provider errors propagate unchanged.

    Attributes:
        block_commit: True when parts written through a chunked-write URL
                      must be committed before the object becomes readable.
                      Part URLs then carry a block marker query parameter.
    """

    block_commit: bool

    def generate_signed_url(
        self, key: str, ttl: int, action: SignedUrlAction
    ) -> str:
        """Sign a URL granting a single permission on one object.

        Args:
            key: Object key / blob name
            ttl: Validity window in milliseconds
            action: Permission to grant

        Returns:
            Absolute HTTPS URL, with the CDN host applied when configured
        """
        ...

    def list_page(
        self, prefix: Optional[str], continuation_token: Optional[str]
    ) -> ListingPage:
        """Fetch one page of objects.

        Args:
            prefix: Only list keys starting with this prefix (None for all)
            continuation_token: Token from the previous page, None for the first

        Returns:
            The page items and the next token (None when exhausted)
        """
        ...

    def get_object_stream(self, key: str) -> Iterator[bytes]:
        """Start reading an object, returning an iterator over its bytes.

        The request is issued before returning, so a missing key raises here
        rather than on first iteration.
        """
        ...

    def put_object_stream(self, key: str, stream: BinaryIO) -> Any:
        """Upload a readable binary stream as a whole object."""
        ...

    def get_access_policy(self) -> Optional[Dict[str, Any]]:
        """Read the bucket/container access policy.

        Returns:
            The policy when the response has the recognized shape, else None
        """
        ...
