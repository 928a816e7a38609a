"""公開APIのテスト"""
import logging
import threading

import pytest

from bucket_uploader import StorageUploader, UploadOptions
from bucket_uploader.core.errors import FilesystemError, ProvisioningError, TransferError
from conftest import FakeStorageClient, client_error


def make_tree(root, files):
    for relative in files:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"body of {relative}", encoding="utf-8")


def test_upload_directory(tmp_path, storage):
    make_tree(tmp_path, ["a.txt", "sub/b.txt"])

    uploaded = StorageUploader(storage).upload_directory("bucket", str(tmp_path))

    assert uploaded == 2
    assert storage.created_buckets == ["bucket"]
    assert storage.objects == {
        ("bucket", "a.txt"): b"body of a.txt",
        ("bucket", "sub/b.txt"): b"body of sub/b.txt",
    }


def test_upload_directory_with_prefix(tmp_path, storage):
    make_tree(tmp_path, ["a.txt", "sub/b.txt"])

    StorageUploader(storage).upload_directory("bucket", str(tmp_path), "backup/2024")

    assert sorted(key for _, key in storage.objects) == ["backup/2024/a.txt", "backup/2024/sub/b.txt"]


def test_upload_directory_applies_content_type(tmp_path, storage):
    make_tree(tmp_path, ["a.json", "b.json", "c.json"])

    uploader = StorageUploader(storage, UploadOptions(content_type="application/json"))
    uploader.upload_directory("bucket", str(tmp_path))

    assert [s.content_type for s in storage.streams] == ["application/json"] * 3


def test_empty_directory(tmp_path, storage):
    assert StorageUploader(storage).upload_directory("bucket", str(tmp_path)) == 0
    assert storage.streams == []


def test_provisioning_failure_starts_no_upload(tmp_path):
    make_tree(tmp_path, ["a.txt"])
    storage = FakeStorageClient(client_error("AccessDenied", operation="CreateBucket"))

    with pytest.raises(ProvisioningError):
        StorageUploader(storage).upload_directory("bucket", str(tmp_path))
    assert storage.streams == []


def test_already_owned_bucket_proceeds(tmp_path):
    make_tree(tmp_path, ["a.txt"])
    storage = FakeStorageClient(client_error("BucketAlreadyOwnedByYou", operation="CreateBucket"))

    assert StorageUploader(storage).upload_directory("bucket", str(tmp_path)) == 1
    assert ("bucket", "a.txt") in storage.objects


def test_walk_failure_starts_no_upload(tmp_path, storage):
    with pytest.raises(FilesystemError):
        StorageUploader(storage).upload_directory("bucket", str(tmp_path / "missing"))
    assert storage.created_buckets == ["bucket"]
    assert storage.streams == []


def test_one_failure_is_reported(tmp_path, storage):
    make_tree(tmp_path, ["a.txt", "b.txt", "c.txt"])
    gate = threading.Event()
    storage.gates["a.txt"] = gate
    storage.gates["c.txt"] = gate
    storage.write_failures["b.txt"] = client_error("SlowDown")

    try:
        with pytest.raises(TransferError) as excinfo:
            StorageUploader(storage).upload_directory("bucket", str(tmp_path))
        assert excinfo.value.key == "b.txt"
    finally:
        gate.set()


def test_upload_file(tmp_path, storage):
    make_tree(tmp_path, ["report.csv"])

    StorageUploader(storage).upload_file("bucket", str(tmp_path / "report.csv"), "reports/r.csv")

    assert storage.created_buckets == ["bucket"]
    assert storage.objects == {("bucket", "reports/r.csv"): b"body of report.csv"}
    assert storage.streams[0].content_type is None


def test_upload_file_provisioning_failure(tmp_path):
    make_tree(tmp_path, ["a.txt"])
    storage = FakeStorageClient(client_error("TooManyBuckets", operation="CreateBucket"))

    with pytest.raises(ProvisioningError):
        StorageUploader(storage).upload_file("bucket", str(tmp_path / "a.txt"), "a.txt")
    assert storage.streams == []


def test_dry_run_touches_nothing_remote(tmp_path, storage):
    make_tree(tmp_path, ["a.txt", "sub/b.txt"])

    uploaded = StorageUploader(storage, UploadOptions(dry_run=True)).upload_directory(
        "bucket", str(tmp_path)
    )

    assert uploaded == 2
    assert storage.created_buckets == []
    assert storage.streams == []


def test_dry_run_does_not_log_success(tmp_path, storage, caplog):
    make_tree(tmp_path, ["a.txt", "sub/b.txt"])
    caplog.set_level(logging.INFO, logger="bucket_uploader")

    uploader = StorageUploader(storage, UploadOptions(dry_run=True))
    uploader.upload_directory("bucket", str(tmp_path))
    uploader.upload_file("bucket", str(tmp_path / "a.txt"), "a.txt")

    messages = [record.getMessage() for record in caplog.records]
    assert not any(m.startswith(("UploadFile success", "UploadDir success")) for m in messages)
    assert "[DRY RUN]: Would upload 2 files" in messages
