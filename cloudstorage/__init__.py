"""Provider-agnostic access to S3 and Azure Blob Storage containers."""

from cloudstorage.config import AwsCredentials, AzureCredentials, ContainerOptions
from cloudstorage.container import AzureContainer, S3Container, StorageContainer
from cloudstorage.errors import (
    CloudStorageError,
    ConfigurationError,
    InvalidSourceError,
    ListingProtocolError,
)
from cloudstorage.models import MultipartPlan, ObjectSummary
from cloudstorage.storage_factory import StorageFactory, create_container

__all__ = [
    "AwsCredentials",
    "AzureCredentials",
    "ContainerOptions",
    "StorageContainer",
    "S3Container",
    "AzureContainer",
    "CloudStorageError",
    "ConfigurationError",
    "InvalidSourceError",
    "ListingProtocolError",
    "MultipartPlan",
    "ObjectSummary",
    "StorageFactory",
    "create_container",
]
