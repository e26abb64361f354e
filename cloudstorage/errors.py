"""Errors raised by cloudstorage itself.

Provider SDK errors (botocore ClientError, azure AzureError) are never
wrapped and reach the caller as raised by the SDK.
"""


class CloudStorageError(Exception):
    """Base class for errors raised by this library."""


class ConfigurationError(CloudStorageError, ValueError):
    """Invalid credentials, container name or container options."""


class InvalidSourceError(CloudStorageError, ValueError):
    """Upload source is neither a fetchable web URL nor a regular file."""


class ListingProtocolError(CloudStorageError, RuntimeError):
    """A paged listing stopped making progress."""
