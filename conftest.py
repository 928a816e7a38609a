"""テスト用の共通フィクスチャ"""
import threading
from typing import Dict, List, Optional

import pytest
from botocore.exceptions import ClientError

from bucket_uploader.utils.logger import LoggerManager


class FakeStream:
    """メモリ上のシンク。呼び出し順を記録する"""

    def __init__(self, storage: 'FakeStorageClient', bucket: str, key: str):
        self.storage = storage
        self.bucket = bucket
        self.key = key
        self.calls: List[tuple] = []
        self.content_type: Optional[str] = None
        self._chunks: List[bytes] = []

    def set_content_type(self, content_type: str):
        self.calls.append(("set_content_type", content_type))
        self.content_type = content_type

    def write(self, data: bytes) -> int:
        self.calls.append(("write", len(data)))
        failure = self.storage.write_failures.get(self.key)
        if failure is not None:
            raise failure
        gate = self.storage.gates.get(self.key)
        if gate is not None:
            gate.wait(timeout=5)
        self._chunks.append(data)
        return len(data)

    def close(self):
        self.calls.append(("close",))
        failure = self.storage.close_failures.get(self.key)
        if failure is not None:
            raise failure
        with self.storage.lock:
            self.storage.objects[(self.bucket, self.key)] = b"".join(self._chunks)


class FakeStorageClient:
    """StorageClient と同じインターフェースを持つテスト用クライアント"""

    def __init__(self, bucket_error: Optional[Exception] = None):
        self.bucket_error = bucket_error
        self.created_buckets: List[str] = []
        self.streams: List[FakeStream] = []
        self.objects: Dict[tuple, bytes] = {}
        self.write_failures: Dict[str, Exception] = {}
        self.open_failures: Dict[str, Exception] = {}
        self.close_failures: Dict[str, Exception] = {}
        self.gates: Dict[str, threading.Event] = {}
        self.lock = threading.Lock()

    def create_bucket(self, bucket: str):
        self.created_buckets.append(bucket)
        if self.bucket_error is not None:
            raise self.bucket_error

    def open_write_stream(self, bucket: str, key: str) -> FakeStream:
        failure = self.open_failures.get(key)
        if failure is not None:
            raise failure
        stream = FakeStream(self, bucket, key)
        with self.lock:
            self.streams.append(stream)
        return stream


def client_error(code: str, message: str = "error", operation: str = "PutObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


@pytest.fixture
def storage():
    return FakeStorageClient()


@pytest.fixture(autouse=True)
def reset_logger():
    LoggerManager.reset()
    yield
    LoggerManager.reset()
