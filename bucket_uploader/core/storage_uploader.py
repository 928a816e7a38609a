"""ファイル・ディレクトリのアップロード（公開API）"""
from typing import Optional

from ..models.config import UploadOptions
from ..utils.logger import LoggerManager
from ..utils.file_utils import FileScanner, join_key
from .bucket import ensure_bucket
from .uploader import UploadExecutor, ParallelUploadExecutor


class StorageUploader:
    """バケットを準備してからアップロードする

    クライアントとオプションは呼び出しごとに作り直さず、全タスクで共有する。
    """

    def __init__(self, client, options: Optional[UploadOptions] = None):
        self.client = client
        self.options = options or UploadOptions()
        self.logger = LoggerManager.get_logger()
        self.executor = UploadExecutor(client, self.options)
        self.parallel_executor = ParallelUploadExecutor(
            self.executor,
            max_workers=self.options.max_workers,
            cancel_on_error=self.options.cancel_on_error,
        )
        self.file_scanner = FileScanner(self.options.exclude_patterns)

    def upload_file(self, bucket: str, source: str, key: str):
        """単一ファイルをアップロード"""
        self._ensure_bucket(bucket)
        self.executor.upload_file(bucket, source, key)
        if not self.options.dry_run:
            self.logger.info("UploadFile success")

    def upload_directory(self, bucket: str, source_root: str, key_prefix: str = "") -> int:
        """ディレクトリ以下の全ファイルを並列でアップロード

        Returns:
            アップロードしたファイル数
        """
        self._ensure_bucket(bucket)

        batch = {
            source: join_key(key_prefix, key)
            for source, key in self.file_scanner.walk(source_root).items()
        }
        if not batch:
            self.logger.warning(f"No files found in {source_root}")
            return 0

        uploaded = self.parallel_executor.upload_all(bucket, batch)
        if self.options.dry_run:
            self.logger.info(f"[DRY RUN]: Would upload {uploaded} files")
        else:
            self.logger.info(f"UploadDir success: {uploaded} files")
        return uploaded

    def _ensure_bucket(self, bucket: str):
        if self.options.dry_run:
            self.logger.info(f"[DRY RUN]: Would ensure bucket {bucket}")
            return
        ensure_bucket(self.client, bucket)
