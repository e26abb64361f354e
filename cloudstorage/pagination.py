"""Drains provider-paged listings into a single list."""

import logging
from typing import List, Optional

from cloudstorage.errors import ListingProtocolError
from cloudstorage.models import ObjectSummary
from cloudstorage.storage_providers.protocol import ProviderCapability

logger = logging.getLogger(__name__)


class PaginatedLister:
    """Follows continuation tokens until a listing is exhausted.

    Pages are fetched strictly one after another. Items keep the order the
    provider returned them in.
    """

    def __init__(self, capability: ProviderCapability):
        self.capability = capability

    def list_all(self, prefix: Optional[str] = None) -> List[ObjectSummary]:
        """List every object under prefix.

        Args:
            prefix: Key prefix to filter by (None or "" lists everything)

        Returns:
            Fully materialized list of object summaries

        Raises:
            ListingProtocolError: A page returned a token already seen
        """
        results: List[ObjectSummary] = []
        seen_tokens = set()
        token = None
        pages = 0

        while True:
            page = self.capability.list_page(prefix or None, token)
            pages += 1
            results.extend(page.items)

            next_token = page.continuation_token
            if not next_token:
                break
            if next_token in seen_tokens:
                raise ListingProtocolError(
                    f"Listing of prefix '{prefix or ''}' repeated continuation "
                    f"token {next_token!r} after {pages} page(s)"
                )
            seen_tokens.add(next_token)
            token = next_token

        logger.debug(
            f"Listed {len(results)} object(s) under '{prefix or ''}' in {pages} page(s)"
        )
        return results
