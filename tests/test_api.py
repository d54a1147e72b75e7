"""End-to-end tests of the public client over the in-memory transport."""

from __future__ import annotations

import io
from unittest.mock import patch

import objstore
from objstore.api import ObjectStorage, new
from objstore.infra.storage.s3_client import S3StorageClient


def _client(mock_storage, settings):
    return new(settings, transport=mock_storage)


def test_new_uses_injected_transport(mock_storage, settings):
    client = _client(mock_storage, settings)

    assert isinstance(client, ObjectStorage)
    assert client.storage is mock_storage
    assert client.objects() is client.objects()
    assert client.buckets() is client.buckets()


def test_new_builds_s3_transport_from_settings(settings):
    with patch.object(S3StorageClient, "_build_client") as build:
        client = new(settings)

    assert isinstance(client.storage, S3StorageClient)
    build.assert_called_once_with(settings)


def test_upload_then_list_and_read_back(mock_storage, settings, small_part_size):
    client = _client(mock_storage, settings)
    client.create_bucket("docs")
    large = b"z" * (2 * small_part_size + 7)

    client.create_object("docs", "reports/big.bin", len(large), io.BytesIO(large))
    client.create_object("docs", "reports/small.txt", 5, io.BytesIO(b"hello"))
    client.create_object("docs", "readme.txt", 2, io.BytesIO(b"hi"))

    top_level = [item.data.key for item in client.list_objects("docs")]
    everything = [m.key for m in client.list_objects("docs", recursive=True).values()]
    body, metadata = client.get_object("docs", "reports/big.bin")

    assert top_level == ["readme.txt"]
    assert everything == ["readme.txt", "reports/big.bin", "reports/small.txt"]
    assert body.read() == large
    assert metadata.size_bytes == len(large)
    assert client.stat_object("docs", "reports/small.txt").size_bytes == 5
    assert [b.name for b in client.list_buckets().values()] == ["docs"]


def test_bucket_lifecycle(mock_storage, settings):
    client = _client(mock_storage, settings)

    client.create_bucket("tmp", "public-read")
    client.set_bucket_acl("tmp", "private")
    client.stat_bucket("tmp")
    client.create_object("tmp", "x", 1, io.BytesIO(b"x"))
    client.delete_object("tmp", "x")
    client.delete_bucket("tmp")

    assert mock_storage.buckets == {}


def test_package_exports():
    assert objstore.new is new
    assert issubclass(objstore.StorageError, objstore.ObjectStorageError)
    assert issubclass(objstore.IncompleteUploadError, objstore.ObjectStorageError)
    assert issubclass(objstore.InvalidArgumentError, ValueError)
