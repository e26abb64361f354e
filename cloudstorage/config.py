"""
Credential and container option models using Pydantic for validation.
"""

import logging
import os
from typing import Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from cloudstorage.errors import ConfigurationError
from cloudstorage.url_utils import is_blank, is_web_uri

logger = logging.getLogger(__name__)

MIXED_CREDENTIALS_MESSAGE = (
    "Only one set of cloud storage credentials is allowed. "
    "Both Azure and AWS credentials are currently defined"
)
MISSING_CREDENTIALS_MESSAGE = "Authentication was not provided"

_AWS_FIELDS = ("access_key_id", "secret_access_key")
_AZURE_FIELDS = ("account_name", "account_key")

_FIELD_ALIASES = {
    "access_key_id": ("access_key_id", "accessKeyId", "aws_access_key_id"),
    "secret_access_key": (
        "secret_access_key",
        "secretAccessKey",
        "aws_secret_access_key",
    ),
    "account_name": ("account_name", "accountName"),
    "account_key": ("account_key", "accountKey"),
}


class AwsCredentials(BaseModel):
    """AWS access key pair"""

    access_key_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices(*_FIELD_ALIASES["access_key_id"]),
    )
    secret_access_key: str = Field(
        min_length=1,
        repr=False,
        validation_alias=AliasChoices(*_FIELD_ALIASES["secret_access_key"]),
    )

    model_config = {"frozen": True, "str_strip_whitespace": True}


class AzureCredentials(BaseModel):
    """Azure Blob Storage account name and shared key"""

    account_name: str = Field(
        min_length=1,
        validation_alias=AliasChoices(*_FIELD_ALIASES["account_name"]),
    )
    account_key: str = Field(
        min_length=1,
        repr=False,
        validation_alias=AliasChoices(*_FIELD_ALIASES["account_key"]),
    )

    model_config = {"frozen": True, "str_strip_whitespace": True}


Credentials = Union[AwsCredentials, AzureCredentials]


class ContainerOptions(BaseModel):
    """Optional per-container settings"""

    cdn_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("cdn_url", "cdnUrl"),
        description="Overrides the scheme and host of presigned URLs",
    )
    region: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("region", "bucketRegion", "bucket_region"),
        description="S3 bucket region",
    )

    model_config = {"frozen": True}

    @field_validator("cdn_url", mode="before")
    @classmethod
    def _check_cdn_url(cls, value: Any) -> Optional[str]:
        if is_blank(value):
            return None
        if not is_web_uri(value):
            raise ValueError(
                f"CDN URL is not valid, it may be missing protocol: {value}"
            )
        return value.strip()

    @field_validator("region", mode="before")
    @classmethod
    def _check_region(cls, value: Any) -> Optional[str]:
        if is_blank(value):
            return None
        return str(value).strip()


def _lookup(auth: Mapping[str, Any], field_name: str) -> Optional[str]:
    for alias in _FIELD_ALIASES[field_name]:
        value = auth.get(alias)
        if not is_blank(value):
            return value
    return None


def parse_credentials(auth: Union[Credentials, Mapping[str, Any], None]) -> Credentials:
    """Resolve a credential mapping into exactly one tagged variant.

    Args:
        auth: Either a credentials model or a mapping holding the AWS pair
              (accessKeyId/secretAccessKey) or the Azure pair
              (accountName/accountKey)

    Returns:
        AwsCredentials or AzureCredentials

    Raises:
        ConfigurationError: Credentials are missing, blank or mix both variants
    """
    if isinstance(auth, (AwsCredentials, AzureCredentials)):
        return auth

    if not auth:
        raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)

    aws = {name: _lookup(auth, name) for name in _AWS_FIELDS}
    azure = {name: _lookup(auth, name) for name in _AZURE_FIELDS}

    if any(aws.values()) and any(azure.values()):
        raise ConfigurationError(MIXED_CREDENTIALS_MESSAGE)

    if all(azure.values()):
        logger.debug("Resolved Azure credentials")
        return AzureCredentials(**azure)
    if all(aws.values()):
        logger.debug("Resolved AWS credentials")
        return AwsCredentials(**aws)

    raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)


def parse_options(
    options: Union[ContainerOptions, Mapping[str, Any], None],
) -> ContainerOptions:
    """Validate container options, converting validation failures.

    Raises:
        ConfigurationError: The CDN URL is not an absolute web URL
    """
    if isinstance(options, ContainerOptions):
        return options
    try:
        return ContainerOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise ConfigurationError(messages) from e


def normalize_container_name(name: Optional[str], label: str = "Container") -> str:
    """Trim a bucket/container name, rejecting blank names."""
    if is_blank(name):
        raise ConfigurationError(f"{label} name was not provided")
    return name.strip()


def credentials_from_env() -> Optional[Credentials]:
    """Read credentials from the standard provider environment variables.

    Returns None when no variable is set, so callers can report missing
    authentication the same way as for explicit arguments.
    """
    auth = {
        "access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "account_name": os.getenv("AZURE_STORAGE_ACCOUNT"),
        "account_key": os.getenv("AZURE_STORAGE_KEY"),
    }
    if not any(not is_blank(value) for value in auth.values()):
        return None
    return parse_credentials(auth)
