"""Storage Provider Bindings.

Bindings expose the small set of provider primitives the storage containers
are built on:
- Amazon S3: S3Capability (boto3)
- Azure Blob Storage: AzureBlobCapability (azure-storage-blob)
"""

from cloudstorage.storage_providers.protocol import ProviderCapability, SignedUrlAction
from cloudstorage.storage_providers.s3 import S3Capability
from cloudstorage.storage_providers.azure import AzureBlobCapability

__all__ = [
    "ProviderCapability",
    "SignedUrlAction",
    "S3Capability",
    "AzureBlobCapability",
]
