"""Bucket Uploader コアモジュール"""
from .errors import (
    UploaderError,
    AuthError,
    ProvisioningError,
    FilesystemError,
    TransferError,
    UploadCancelled,
)
from .s3_client import S3ClientManager, StorageClient, S3WriteStream
from .bucket import ensure_bucket
from .uploader import UploadExecutor, ParallelUploadExecutor
from .storage_uploader import StorageUploader
from .task_runner import TaskRunner

__all__ = [
    'UploaderError',
    'AuthError',
    'ProvisioningError',
    'FilesystemError',
    'TransferError',
    'UploadCancelled',
    'S3ClientManager',
    'StorageClient',
    'S3WriteStream',
    'ensure_bucket',
    'UploadExecutor',
    'ParallelUploadExecutor',
    'StorageUploader',
    'TaskRunner',
]
