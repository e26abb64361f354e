"""Storage containers.

A StorageContainer composes a provider binding with the provider-independent
multipart planner and paginated lister. S3Container and AzureContainer differ
in how they validate credentials and build their binding, and AzureContainer
also commits block uploads.
"""

import logging
import os
import stat
from typing import Any, Mapping, List, Optional, Union

import requests

from cloudstorage.config import (
    AwsCredentials,
    AzureCredentials,
    ContainerOptions,
    MISSING_CREDENTIALS_MESSAGE,
    parse_credentials,
    parse_options,
    normalize_container_name,
)
from cloudstorage.errors import ConfigurationError, InvalidSourceError
from cloudstorage.models import MultipartPlan, ObjectSummary
from cloudstorage.multipart import MultipartUrlPlanner
from cloudstorage.pagination import PaginatedLister
from cloudstorage.storage_providers.azure import AzureBlobCapability
from cloudstorage.storage_providers.protocol import ProviderCapability, SignedUrlAction
from cloudstorage.storage_providers.s3 import S3Capability
from cloudstorage.url_utils import is_web_uri

logger = logging.getLogger(__name__)

OptionsArg = Union[ContainerOptions, Mapping[str, Any], None]


class StorageContainer:
    """Uniform operations over one bucket or container.

    All TTLs are in milliseconds. Provider errors are raised unchanged.
    Instances hold no mutable state and can be shared across threads.
    """

    def __init__(
        self,
        capability: ProviderCapability,
        container_name: str,
        options: Optional[ContainerOptions] = None,
    ):
        self.capability = capability
        self.container_name = container_name
        self.options = options or ContainerOptions()
        self.planner = MultipartUrlPlanner(capability)
        self.lister = PaginatedLister(capability)

    @property
    def region(self) -> Optional[str]:
        return self.options.region

    def validate(self) -> bool:
        """Check the container is reachable by reading its access policy.

        Returns:
            True when the provider answered with a recognized policy
        """
        return self.capability.get_access_policy() is not None

    def presign_get(self, key: str, ttl: int) -> str:
        """Create a read-only presigned URL for key."""
        return self.capability.generate_signed_url(key, ttl, SignedUrlAction.READ)

    def presign_put(self, key: str, ttl: int) -> str:
        """Create a write-only presigned URL for key (single-part plan)."""
        return self.multipart_presign_put(key, ttl).urls[0]

    def multipart_presign_put(
        self,
        key: str,
        ttl: int,
        estimated_size: Optional[int] = None,
        max_parts: Optional[int] = None,
    ) -> MultipartPlan:
        """Create a set of presigned part upload URLs for key.

        Without block commit (S3) every part URL is a whole-object PUT, so
        each upload through one of them replaces the object written through
        the others. Only the block-commit provider (Azure) assembles parts.
        """
        return self.planner.plan(key, ttl, estimated_size, max_parts)

    def upload(self, source: str, key: str) -> Any:
        """Upload from a web URL or a local file.

        Args:
            source: Absolute http(s) URL or path to a regular local file
            key: Target object key / blob name

        Raises:
            InvalidSourceError: The URL request failed, or the path is missing
                                or not a regular file
        """
        if is_web_uri(source):
            logger.debug(f"Streaming {source} to {self.container_name}/{key}")
            with requests.get(source, stream=True) as response:
                if not response.ok:
                    raise InvalidSourceError(
                        f"Unable to request {source}: {response.status_code}"
                    )
                response.raw.decode_content = True
                result = self.capability.put_object_stream(key, response.raw)
        else:
            try:
                file_stat = os.stat(source)
            except FileNotFoundError as e:
                raise InvalidSourceError(f"Asset path does not exist: {source}") from e
            if not stat.S_ISREG(file_stat.st_mode):
                raise InvalidSourceError(f"Asset path is invalid: {source}")

            logger.debug(f"Uploading {source} to {self.container_name}/{key}")
            with open(source, "rb") as stream:
                result = self.capability.put_object_stream(key, stream)

        logger.info(f"Uploaded {source} to {self.container_name}/{key}")
        return result

    def download(self, local_path: str, key: str) -> None:
        """Stream an object to a local file.

        A failure part way through leaves the partially written file behind.
        """
        chunks = self.capability.get_object_stream(key)
        with open(local_path, "wb") as fh:
            for chunk in chunks:
                fh.write(chunk)
        logger.info(f"Downloaded {self.container_name}/{key} to {local_path}")

    def list_objects(self, prefix: Optional[str] = None) -> List[ObjectSummary]:
        """List all objects under prefix, following every page."""
        return self.lister.list_all(prefix)

    def get_metadata(self, key: str) -> Optional[ObjectSummary]:
        """Return the summary of key, or None unless exactly one object matches."""
        matches = self.list_objects(key)
        if len(matches) != 1:
            return None
        return matches[0]


class S3Container(StorageContainer):
    """Storage container backed by an S3 bucket."""

    def __init__(
        self,
        auth: Union[AwsCredentials, Mapping[str, Any]],
        bucket_name: str,
        options: OptionsArg = None,
    ):
        credentials = parse_credentials(auth)
        if not isinstance(credentials, AwsCredentials):
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        bucket_name = normalize_container_name(bucket_name, "S3 bucket")
        options = parse_options(options)

        capability = S3Capability(
            credentials,
            bucket_name,
            region=options.region,
            cdn_url=options.cdn_url,
        )
        super().__init__(capability, bucket_name, options)

    @property
    def bucket_name(self) -> str:
        return self.container_name


class AzureContainer(StorageContainer):
    """Storage container backed by an Azure Blob Storage container."""

    def __init__(
        self,
        auth: Union[AzureCredentials, Mapping[str, Any]],
        container_name: str,
        options: OptionsArg = None,
    ):
        credentials = parse_credentials(auth)
        if not isinstance(credentials, AzureCredentials):
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        container_name = normalize_container_name(container_name, "Azure container")
        options = parse_options(options)

        capability = AzureBlobCapability(
            credentials, container_name, cdn_url=options.cdn_url
        )
        super().__init__(capability, container_name, options)

    def commit_multipart(self, key: str) -> Any:
        """Commit blocks uploaded through presigned part URLs.

        Blocks are committed in the order the service reports them as
        uncommitted, after which key is readable as a single blob.
        """
        blocks = self.capability.list_uncommitted_blocks(key)
        return self.capability.commit_blocks(key, blocks)
