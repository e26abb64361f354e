"""Azure Blob Storage Provider.

Binds the provider capability primitives to an Azure Blob Storage container.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, BinaryIO, Dict, Iterator, List, Optional
from urllib.parse import quote

from azure.storage.blob import (
    BlobBlock,
    BlobSasPermissions,
    ContainerClient,
    generate_blob_sas,
)

from cloudstorage.config import AzureCredentials
from cloudstorage.constants import (
    AZURE_BLOB_HOST_TEMPLATE,
    AZURE_UPLOAD_BLOCK_SIZE,
    UPLOAD_CONCURRENCY,
)
from cloudstorage.models import ListingPage, ObjectSummary
from cloudstorage.storage_providers.protocol import SignedUrlAction

logger = logging.getLogger(__name__)


def _permissions(action: SignedUrlAction) -> BlobSasPermissions:
    if action == SignedUrlAction.READ:
        return BlobSasPermissions(read=True)
    return BlobSasPermissions(create=True, write=True)


class AzureBlobCapability:
    """Provider primitives for a single Azure Blob Storage container.

    Signed URLs are SAS URLs built from the account shared key. Writes made
    through chunked-write URLs land as uncommitted blocks and only become a
    readable blob after commit_blocks().
    """

    block_commit = True

    def __init__(
        self,
        credentials: AzureCredentials,
        container_name: str,
        cdn_url: Optional[str] = None,
    ):
        """Initialize Azure container bindings.

        Args:
            credentials: Validated account name and key
            container_name: Trimmed, non-blank container name
            cdn_url: Validated CDN URL replacing the blob endpoint in signed URLs
        """
        self.account_name = credentials.account_name
        self.container_name = container_name
        self._account_key = credentials.account_key

        self.account_url = AZURE_BLOB_HOST_TEMPLATE.format(
            account_name=self.account_name
        )
        self.uri = (cdn_url or self.account_url).rstrip("/")

        self.container_client = ContainerClient(
            account_url=self.account_url,
            container_name=container_name,
            credential={
                "account_name": self.account_name,
                "account_key": credentials.account_key,
            },
            max_block_size=AZURE_UPLOAD_BLOCK_SIZE,
        )

    def generate_signed_url(self, key: str, ttl: int, action: SignedUrlAction) -> str:
        # SAS tokens carry an absolute expiry
        expiry = datetime.now(timezone.utc) + timedelta(milliseconds=int(ttl))
        sas = generate_blob_sas(
            account_name=self.account_name,
            container_name=self.container_name,
            blob_name=key,
            account_key=self._account_key,
            permission=_permissions(action),
            expiry=expiry,
            protocol="https",
        )
        path = quote(f"{self.container_name}/{key}", safe="/")
        return f"{self.uri}/{path}?{sas}"

    def list_page(
        self, prefix: Optional[str], continuation_token: Optional[str]
    ) -> ListingPage:
        pages = self.container_client.list_blobs(
            name_starts_with=prefix or None
        ).by_page(continuation_token=continuation_token)

        items = []
        for blob in next(pages, []):
            content_settings = blob.content_settings
            items.append(
                ObjectSummary(
                    name=blob.name,
                    content_length=blob.size,
                    content_type=(
                        content_settings.content_type if content_settings else None
                    ),
                )
            )

        return ListingPage(items=items, continuation_token=pages.continuation_token)

    def get_object_stream(self, key: str) -> Iterator[bytes]:
        blob_client = self.container_client.get_blob_client(key)
        downloader = blob_client.download_blob(max_concurrency=UPLOAD_CONCURRENCY)
        return downloader.chunks()

    def put_object_stream(self, key: str, stream: BinaryIO) -> Dict[str, Any]:
        blob_client = self.container_client.get_blob_client(key)
        return blob_client.upload_blob(
            stream, overwrite=True, max_concurrency=UPLOAD_CONCURRENCY
        )

    def get_access_policy(self) -> Optional[Dict[str, Any]]:
        # A successful call is the recognized shape; failures raise
        return self.container_client.get_container_access_policy()

    def list_uncommitted_blocks(self, key: str) -> List[BlobBlock]:
        """Return the uncommitted blocks of a blob in provider order."""
        blob_client = self.container_client.get_blob_client(key)
        _, uncommitted = blob_client.get_block_list("uncommitted")
        return list(uncommitted)

    def commit_blocks(self, key: str, blocks: List[BlobBlock]) -> Dict[str, Any]:
        """Commit the given blocks, in order, as the content of the blob."""
        blob_client = self.container_client.get_blob_client(key)
        logger.debug(
            f"Committing {len(blocks)} blocks to {self.container_name}/{key}"
        )
        return blob_client.commit_block_list(blocks)
