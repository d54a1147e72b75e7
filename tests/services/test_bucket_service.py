"""Tests for BucketService."""

from __future__ import annotations

import pytest

from objstore.common.config import Settings
from objstore.errors import InvalidArgumentError
from objstore.infra.storage.client import StorageError
from objstore.services.bucket_service import BucketService


@pytest.fixture()
def service(mock_storage, settings):
    return BucketService(mock_storage, settings=settings)


@pytest.fixture()
def paged_service(mock_storage):
    """Service listing two keys per page."""
    return BucketService(mock_storage, settings=Settings(S3_LIST_MAX_KEYS=2))


def _seed(mock_storage, keys):
    for key in keys:
        mock_storage.add_object("photos", key, key.encode())


class TestBucketOperations:
    def test_create_bucket_defaults_to_private(self, service, mock_storage):
        service.create_bucket("photos")

        assert mock_storage.buckets["photos"]["acl"] == "private"

    def test_create_bucket_normalizes_acl(self, service, mock_storage):
        service.create_bucket("photos", " Public-Read ")

        assert mock_storage.calls_to("put_bucket") == [
            {"bucket": "photos", "acl": "public-read"}
        ]

    def test_rejects_unknown_acl_before_transport(self, service, mock_storage):
        with pytest.raises(InvalidArgumentError, match="Unsupported bucket ACL"):
            service.create_bucket("photos", "world-writable")

        assert mock_storage.calls == []

    def test_set_bucket_acl(self, service, mock_storage):
        service.create_bucket("photos")

        service.set_bucket_acl("photos", "public-read-write")

        assert mock_storage.buckets["photos"]["acl"] == "public-read-write"

    def test_stat_bucket(self, service, mock_storage):
        service.create_bucket("photos")

        service.stat_bucket("photos")

        with pytest.raises(StorageError, match="not found"):
            service.stat_bucket("missing")

    def test_delete_bucket(self, service, mock_storage):
        service.create_bucket("photos")

        service.delete_bucket("photos")

        assert "photos" not in mock_storage.buckets

    def test_requires_bucket_name(self, service):
        with pytest.raises(InvalidArgumentError):
            service.stat_bucket("")


class TestListObjects:
    def test_non_recursive_yields_single_page(self, service, mock_storage):
        _seed(mock_storage, ["a.jpg", "b.jpg", "c.jpg"])

        items = list(service.list_objects("photos"))

        assert [item.data.key for item in items] == ["a.jpg", "b.jpg", "c.jpg"]
        assert all(item.error is None for item in items)
        (call,) = mock_storage.calls_to("list_objects")
        assert call["delimiter"] == "/"
        assert call["marker"] == ""
        assert call["max_keys"] == 1000

    def test_non_recursive_ignores_truncation(self, paged_service, mock_storage):
        _seed(mock_storage, ["a", "b", "c", "d", "e"])

        items = list(paged_service.list_objects("photos"))

        assert [item.data.key for item in items] == ["a", "b"]
        assert len(mock_storage.calls_to("list_objects")) == 1

    def test_non_recursive_stays_at_one_level(self, service, mock_storage):
        _seed(mock_storage, ["2024/a.jpg", "2024/trip/b.jpg", "2024/c.jpg"])

        items = list(service.list_objects("photos", "2024/"))

        assert [item.data.key for item in items] == ["2024/a.jpg", "2024/c.jpg"]

    def test_recursive_walks_all_pages_using_last_key_as_marker(
        self, paged_service, mock_storage
    ):
        _seed(mock_storage, ["a", "b", "c", "d", "e"])

        items = list(paged_service.list_objects("photos", recursive=True))

        assert [item.data.key for item in items] == ["a", "b", "c", "d", "e"]
        calls = mock_storage.calls_to("list_objects")
        assert [call["marker"] for call in calls] == ["", "b", "d"]
        assert all(call["delimiter"] == "" for call in calls)

    def test_recursive_includes_nested_keys(self, service, mock_storage):
        _seed(mock_storage, ["2024/a.jpg", "2024/trip/b.jpg", "2025/c.jpg"])

        keys = [item.key for item in service.list_objects("photos", "2024/", True).values()]

        assert keys == ["2024/a.jpg", "2024/trip/b.jpg"]

    def test_page_failure_ends_stream_with_error(self, paged_service, mock_storage):
        _seed(mock_storage, ["a", "b", "c", "d", "e"])
        error = StorageError("SlowDown")
        mock_storage.fail_list_calls[2] = error

        items = list(paged_service.list_objects("photos", recursive=True))

        assert [item.data.key for item in items[:-1]] == ["a", "b"]
        assert items[-1].error is error
        assert items[-1].data is None
        assert len(mock_storage.calls_to("list_objects")) == 2

    def test_first_page_failure_yields_only_error(self, service, mock_storage):
        error = StorageError("NoSuchBucket")
        mock_storage.fail_list_calls[1] = error

        items = list(service.list_objects("photos"))

        assert len(items) == 1
        assert items[0].error is error

    def test_values_raises_stream_error(self, service, mock_storage):
        mock_storage.fail_list_calls[1] = StorageError("AccessDenied")

        with pytest.raises(StorageError, match="AccessDenied"):
            list(service.list_objects("photos").values())

    def test_counts_list_pages(self, paged_service, mock_storage):
        from prometheus_client import REGISTRY

        _seed(mock_storage, ["a", "b", "c"])
        before = REGISTRY.get_sample_value("objstore_list_pages_total", {"kind": "objects"}) or 0.0

        list(paged_service.list_objects("photos", recursive=True))

        after = REGISTRY.get_sample_value("objstore_list_pages_total", {"kind": "objects"})
        assert after == before + 2


class TestListBuckets:
    def test_lists_all_buckets(self, service, mock_storage):
        service.create_bucket("alpha")
        service.create_bucket("beta")

        names = [item.data.name for item in service.list_buckets()]

        assert names == ["alpha", "beta"]

    def test_failure_yields_single_error(self, service, mock_storage):
        error = StorageError("AccessDenied")
        mock_storage.fail_methods["list_buckets"] = error

        items = list(service.list_buckets())

        assert len(items) == 1
        assert items[0].error is error
