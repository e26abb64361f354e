"""Unit tests for AzureBlobCapability."""

import time
from unittest.mock import Mock, patch
from urllib.parse import parse_qs, urlsplit

import pytest
from azure.core.exceptions import ResourceNotFoundError

from cloudstorage.config import AzureCredentials
from cloudstorage.constants import UPLOAD_CONCURRENCY
from cloudstorage.models import ObjectSummary
from cloudstorage.storage_providers.azure import AzureBlobCapability
from cloudstorage.storage_providers.protocol import SignedUrlAction

CREDENTIALS = AzureCredentials(
    account_name="testaccount", account_key="dGVzdC1hY2NvdW50LWtleQ=="
)


def _blob(name, size, content_type=None):
    blob = Mock()
    blob.name = name
    blob.size = size
    blob.content_settings.content_type = content_type
    return blob


class _Pager:
    """Stands in for the SDK page iterator returned by by_page()."""

    def __init__(self, pages, continuation_token):
        self._pages = iter(pages)
        self.continuation_token = continuation_token

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._pages)


@pytest.fixture
def mock_container_client():
    with patch("cloudstorage.storage_providers.azure.ContainerClient") as mock_cls:
        yield mock_cls


class TestAzureCapabilityInit:
    """Tests for AzureBlobCapability initialization."""

    def test_builds_container_client(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")

        assert capability.block_commit is True
        assert capability.uri == "https://testaccount.blob.core.windows.net"
        kwargs = mock_container_client.call_args[1]
        assert kwargs["account_url"] == "https://testaccount.blob.core.windows.net"
        assert kwargs["container_name"] == "assets"
        assert kwargs["credential"] == {
            "account_name": "testaccount",
            "account_key": "dGVzdC1hY2NvdW50LWtleQ==",
        }

    def test_cdn_overrides_uri(self, mock_container_client):
        capability = AzureBlobCapability(
            CREDENTIALS, "assets", cdn_url="http://fake.site.com:8080/"
        )

        assert capability.uri == "http://fake.site.com:8080"


class TestGenerateSignedUrl:
    """Tests for SAS URL generation."""

    def test_read_url_shape(self):
        capability = AzureBlobCapability(CREDENTIALS, "assets")

        url = capability.generate_signed_url(
            "documents/txt/00 README.txt", 600000, SignedUrlAction.READ
        )

        parts = urlsplit(url)
        query = parse_qs(parts.query)
        assert parts.scheme == "https"
        assert parts.netloc == "testaccount.blob.core.windows.net"
        assert parts.path == "/assets/documents/txt/00%20README.txt"
        assert query["sp"] == ["r"]
        assert query["spr"] == ["https"]
        assert query["sr"] == ["b"]
        assert "se" in query
        assert "sig" in query
        assert "sv" in query

    def test_write_url_permissions(self):
        capability = AzureBlobCapability(CREDENTIALS, "assets")

        url = capability.generate_signed_url("blob", 1000, SignedUrlAction.WRITE_CHUNK)

        assert parse_qs(urlsplit(url).query)["sp"] == ["cw"]

    def test_cdn_host(self):
        capability = AzureBlobCapability(
            CREDENTIALS, "assets", cdn_url="http://fake.site.com:8080"
        )

        url = capability.generate_signed_url("blob", 1000, SignedUrlAction.READ)

        assert url.startswith("http://fake.site.com:8080/assets/blob?")

    @patch("cloudstorage.storage_providers.azure.generate_blob_sas")
    def test_ttl_is_absolute_expiry(self, mock_sas, mock_container_client):
        mock_sas.return_value = "sv=x&sig=y"
        capability = AzureBlobCapability(CREDENTIALS, "assets")

        capability.generate_signed_url("blob", 60000, SignedUrlAction.READ)

        kwargs = mock_sas.call_args[1]
        remaining = kwargs["expiry"].timestamp() - time.time()
        assert 55 < remaining <= 60
        assert kwargs["protocol"] == "https"
        assert kwargs["blob_name"] == "blob"


class TestListPage:
    """Tests for list_page."""

    def test_maps_blobs_and_token(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        client = mock_container_client.return_value
        pager = _Pager([[_blob("a", 1, "text/plain"), _blob("b", 2)]], "next-marker")
        client.list_blobs.return_value.by_page.return_value = pager

        page = capability.list_page("pre", "marker-0")

        client.list_blobs.assert_called_once_with(name_starts_with="pre")
        client.list_blobs.return_value.by_page.assert_called_once_with(
            continuation_token="marker-0"
        )
        assert page.items == [
            ObjectSummary("a", 1, "text/plain"),
            ObjectSummary("b", 2, None),
        ]
        assert page.continuation_token == "next-marker"

    def test_last_page(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        client = mock_container_client.return_value
        client.list_blobs.return_value.by_page.return_value = _Pager([[]], None)

        page = capability.list_page(None, None)

        client.list_blobs.assert_called_once_with(name_starts_with=None)
        assert page.items == []
        assert page.continuation_token is None


class TestStreams:
    """Tests for blob streaming."""

    def test_get_object_stream(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        blob_client = mock_container_client.return_value.get_blob_client.return_value
        blob_client.download_blob.return_value.chunks.return_value = iter([b"x"])

        assert list(capability.get_object_stream("blob")) == [b"x"]
        blob_client.download_blob.assert_called_once_with(
            max_concurrency=UPLOAD_CONCURRENCY
        )

    def test_missing_blob_raises_on_request(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        blob_client = mock_container_client.return_value.get_blob_client.return_value
        blob_client.download_blob.side_effect = ResourceNotFoundError("BlobNotFound")

        with pytest.raises(ResourceNotFoundError):
            capability.get_object_stream("blob")

    def test_put_object_stream(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        blob_client = mock_container_client.return_value.get_blob_client.return_value
        stream = Mock()

        capability.put_object_stream("blob", stream)

        mock_container_client.return_value.get_blob_client.assert_called_with("blob")
        blob_client.upload_blob.assert_called_once_with(
            stream, overwrite=True, max_concurrency=UPLOAD_CONCURRENCY
        )


class TestBlocks:
    """Tests for block listing and commit."""

    def test_commit_uses_uncommitted_order(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        blob_client = mock_container_client.return_value.get_blob_client.return_value
        blocks = [Mock(id="000000"), Mock(id="000001")]
        blob_client.get_block_list.return_value = ([], blocks)

        uncommitted = capability.list_uncommitted_blocks("blob")
        capability.commit_blocks("blob", uncommitted)

        blob_client.get_block_list.assert_called_once_with("uncommitted")
        blob_client.commit_block_list.assert_called_once_with(blocks)

    def test_access_policy(self, mock_container_client):
        capability = AzureBlobCapability(CREDENTIALS, "assets")
        client = mock_container_client.return_value
        client.get_container_access_policy.return_value = {
            "public_access": None,
            "signed_identifiers": [],
        }

        assert capability.get_access_policy() is not None
