"""Storage Factory for creating storage containers.

The container variant is chosen by the shape of the supplied credentials:
- accessKeyId / secretAccessKey: S3Container
- accountName / accountKey: AzureContainer
"""

import logging
from typing import Any, Mapping, Optional, Union

from cloudstorage.config import (
    AwsCredentials,
    AzureCredentials,
    Credentials,
    MISSING_CREDENTIALS_MESSAGE,
    credentials_from_env,
    parse_credentials,
)
from cloudstorage.container import (
    AzureContainer,
    OptionsArg,
    S3Container,
    StorageContainer,
)
from cloudstorage.errors import ConfigurationError

logger = logging.getLogger(__name__)


class StorageFactory:
    """Creates storage containers from credentials."""

    @staticmethod
    def create(
        auth: Union[Credentials, Mapping[str, Any], None],
        container_name: str,
        options: OptionsArg = None,
    ) -> StorageContainer:
        """Create the storage container matching the credential shape.

        Credential resolution precedence:
        1. Explicit auth parameter
        2. AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY or
           AZURE_STORAGE_ACCOUNT/AZURE_STORAGE_KEY environment variables

        Args:
            auth: AWS or Azure credentials (mapping or model), None to use env vars
            container_name: S3 bucket name or Azure container name
            options: Optional ContainerOptions (cdnUrl, region)

        Returns:
            S3Container or AzureContainer

        Raises:
            ConfigurationError: Missing, blank or mixed credentials, blank
                                container name, or invalid CDN URL

        Examples:
            >>> container = StorageFactory.create(
            ...     {"accountName": "myaccount", "accountKey": "..."},
            ...     "assets",
            ... )
        """
        credentials = StorageFactory._resolve_credentials(auth)

        if isinstance(credentials, AzureCredentials):
            logger.debug(f"Creating Azure container: {container_name}")
            return AzureContainer(credentials, container_name, options)

        if isinstance(credentials, AwsCredentials):
            logger.debug(f"Creating S3 container: {container_name}")
            return S3Container(credentials, container_name, options)

        raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)

    @staticmethod
    def _resolve_credentials(
        auth: Union[Credentials, Mapping[str, Any], None],
    ) -> Optional[Credentials]:
        if auth is not None:
            return parse_credentials(auth)

        logger.debug("No explicit credentials, reading environment")
        return credentials_from_env()


def create_container(
    auth: Union[Credentials, Mapping[str, Any], None],
    container_name: str,
    options: OptionsArg = None,
) -> StorageContainer:
    """Create the storage container matching the credential shape."""
    return StorageFactory.create(auth, container_name, options)
