"""Multipart upload URL planning.

Turns an (optional) size estimate into a list of signed per-part upload URLs.
Each part carries a block identifier: the part index zero-padded to a fixed
width, base64 encoded and percent-encoded, so identifiers sort in upload order.
"""

import base64
import logging
import math
from typing import Optional
from urllib.parse import quote, unquote

from cloudstorage.constants import (
    BLOCK_ID_WIDTH,
    MAX_PART_COUNT,
    MAX_PART_SIZE,
    MIN_PART_SIZE,
)
from cloudstorage.models import MultipartPlan
from cloudstorage.storage_providers.protocol import ProviderCapability, SignedUrlAction

logger = logging.getLogger(__name__)


def block_id(index: int) -> str:
    """Encode a part index as a URL-safe block identifier."""
    if index < 0 or index >= MAX_PART_COUNT:
        raise ValueError(f"Part index out of range: {index}")
    raw = str(index).zfill(BLOCK_ID_WIDTH).encode("utf-8")
    return quote(base64.b64encode(raw).decode("ascii"), safe="")


def decode_block_id(token: str) -> int:
    """Recover the part index from a block identifier."""
    return int(base64.b64decode(unquote(token)).decode("utf-8"))


def part_count(
    estimated_size: Optional[int] = None, max_parts: Optional[int] = None
) -> int:
    """Number of parts to sign for an upload.

    Without a size estimate this is max_parts, or 1 when no cap is given.
    With an estimate it is ceil(estimated_size / MIN_PART_SIZE), at least 1,
    capped at max_parts.

    Raises:
        ValueError: Negative size, non-positive cap, or more parts than the
                    block identifier width can express
    """
    if max_parts is not None and max_parts < 1:
        raise ValueError(f"max_parts must be at least 1: {max_parts}")

    if estimated_size is None:
        count = max_parts or 1
    else:
        if estimated_size < 0:
            raise ValueError(f"estimated_size must not be negative: {estimated_size}")
        count = max(1, math.ceil(estimated_size / MIN_PART_SIZE))
        if max_parts is not None:
            count = min(count, max_parts)

    if count > MAX_PART_COUNT:
        raise ValueError(
            f"Upload needs {count} parts, more than the {MAX_PART_COUNT} supported"
        )
    return count


class MultipartUrlPlanner:
    """Plans signed multipart uploads against a provider binding."""

    def __init__(self, capability: ProviderCapability):
        self.capability = capability

    def plan(
        self,
        key: str,
        ttl: int,
        estimated_size: Optional[int] = None,
        max_parts: Optional[int] = None,
    ) -> MultipartPlan:
        """Produce one signed upload URL per part.

        Args:
            key: Target object key / blob name
            ttl: URL validity window in milliseconds
            estimated_size: Expected upload size in bytes (optional)
            max_parts: Upper bound on the number of parts (optional)

        Returns:
            MultipartPlan with at least one URL, in part order
        """
        count = part_count(estimated_size, max_parts)
        logger.debug(f"Planning {count} upload part(s) for {key}")

        urls = []
        for index in range(count):
            url = self.capability.generate_signed_url(
                key, ttl, SignedUrlAction.WRITE_CHUNK
            )
            if self.capability.block_commit:
                url = f"{url}&comp=block&blockid={block_id(index)}"
            urls.append(url)

        return MultipartPlan(
            min_part_size=MIN_PART_SIZE, max_part_size=MAX_PART_SIZE, urls=urls
        )
