"""S3 Storage Provider.

Binds the provider capability primitives to an Amazon S3 bucket.
"""

import logging
from typing import Any, BinaryIO, Dict, Iterator, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config

from cloudstorage.config import AwsCredentials
from cloudstorage.constants import DOWNLOAD_CHUNK_SIZE, UPLOAD_CONCURRENCY
from cloudstorage.errors import ListingProtocolError
from cloudstorage.models import ListingPage, ObjectSummary
from cloudstorage.storage_providers.protocol import SignedUrlAction
from cloudstorage.url_utils import apply_cdn

logger = logging.getLogger(__name__)

_CLIENT_METHODS = {
    SignedUrlAction.READ: "get_object",
    # S3 PUT is atomic, so chunked writes are plain whole-object PUTs
    SignedUrlAction.WRITE_CHUNK: "put_object",
}


class S3Capability:
    """Provider primitives for a single S3 bucket.

    Uses boto3 with SigV4 signing and the explicit access key pair the
    container was built with.
    """

    block_commit = False

    def __init__(
        self,
        credentials: AwsCredentials,
        bucket_name: str,
        region: Optional[str] = None,
        cdn_url: Optional[str] = None,
    ):
        """Initialize S3 bindings.

        Args:
            credentials: Validated AWS access key pair
            bucket_name: Trimmed, non-blank bucket name
            region: Bucket region (optional, boto3 default resolution otherwise)
            cdn_url: Validated CDN URL replacing the scheme and host of signed URLs
        """
        self.bucket_name = bucket_name
        self.region = region
        self.cdn_url = cdn_url

        session_kwargs = {
            "aws_access_key_id": credentials.access_key_id,
            "aws_secret_access_key": credentials.secret_access_key,
        }
        if region:
            session_kwargs["region_name"] = region
        session = boto3.Session(**session_kwargs)

        self.s3_client = session.client("s3", config=Config(signature_version="s3v4"))
        self.transfer_config = TransferConfig(max_concurrency=UPLOAD_CONCURRENCY)

    def generate_signed_url(self, key: str, ttl: int, action: SignedUrlAction) -> str:
        # boto3 expects whole seconds
        expires_in = max(1, int(ttl) // 1000)
        url = self.s3_client.generate_presigned_url(
            ClientMethod=_CLIENT_METHODS[action],
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=expires_in,
        )
        return apply_cdn(url, self.cdn_url)

    def list_page(
        self, prefix: Optional[str], continuation_token: Optional[str]
    ) -> ListingPage:
        params: Dict[str, Any] = {"Bucket": self.bucket_name}
        if prefix:
            params["Prefix"] = prefix
        if continuation_token:
            params["Marker"] = continuation_token

        response = self.s3_client.list_objects(**params)
        contents = response.get("Contents", [])
        items = [
            ObjectSummary(name=item["Key"], content_length=item["Size"])
            for item in contents
        ]

        next_token = None
        if response.get("IsTruncated"):
            # NextMarker is only returned when a delimiter is used
            next_token = response.get("NextMarker")
            if not next_token and contents:
                next_token = contents[-1]["Key"]
            if not next_token:
                raise ListingProtocolError(
                    f"S3 listing of s3://{self.bucket_name}/{prefix or ''} is "
                    "truncated but carries no resumption marker"
                )

        return ListingPage(items=items, continuation_token=next_token)

    def get_object_stream(self, key: str) -> Iterator[bytes]:
        response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        return response["Body"].iter_chunks(chunk_size=DOWNLOAD_CHUNK_SIZE)

    def put_object_stream(self, key: str, stream: BinaryIO) -> None:
        self.s3_client.upload_fileobj(
            stream, self.bucket_name, key, Config=self.transfer_config
        )

    def get_access_policy(self) -> Optional[Dict[str, Any]]:
        response = self.s3_client.get_bucket_acl(Bucket=self.bucket_name)
        if response and "Grants" in response:
            return response
        logger.debug(f"Unrecognized ACL response for bucket {self.bucket_name}")
        return None
