"""アップロード実行クラス"""
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..models.config import UploadOptions
from ..utils.logger import LoggerManager
from .errors import FilesystemError, TransferError, UploadCancelled


class UploadExecutor:
    """単一ファイルのアップロード"""

    def __init__(self, client, options: Optional[UploadOptions] = None):
        self.client = client
        self.options = options or UploadOptions()
        self.logger = LoggerManager.get_logger()

    def upload_file(self, bucket: str, source: str, key: str,
                    cancel_event: Optional[threading.Event] = None):
        """ファイル全体を読み込んでストリームに書き込み、閉じる

        open / read / write / close のどれかが失敗した時点で中断する。
        書きかけのリモートオブジェクトの後始末はしない。
        """
        self.logger.info(f"UploadFile: {source} ---> {bucket}/{key}")
        if self.options.dry_run:
            self.logger.info(f"[DRY RUN]: Would upload {source} to {bucket}/{key}")
            return

        self._check_cancelled(cancel_event, key)
        try:
            stream = self.client.open_write_stream(bucket, key)
            if self.options.content_type:
                stream.set_content_type(self.options.content_type)
        except (BotoCoreError, ClientError) as e:
            raise TransferError(str(e), key=key) from e

        try:
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise FilesystemError(str(e), path=source) from e

        self._check_cancelled(cancel_event, key)
        try:
            stream.write(data)
            self._check_cancelled(cancel_event, key)
            stream.close()
        except (BotoCoreError, ClientError) as e:
            raise TransferError(str(e), key=key) from e

        self.logger.debug(f"UploadFile success: {bucket}/{key}")

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], key: str):
        if cancel_event is not None and cancel_event.is_set():
            raise UploadCancelled(f"Upload cancelled: {key}", key=key)


class ParallelUploadExecutor:
    """ファイルごとに1タスクを並列実行し、最初の失敗で即座に戻る"""

    def __init__(self, executor: UploadExecutor, max_workers: Optional[int] = None,
                 cancel_on_error: bool = True):
        self.executor = executor
        self.max_workers = max_workers
        self.cancel_on_error = cancel_on_error
        self.logger = LoggerManager.get_logger()

    def upload_all(self, bucket: str, batch: Dict[str, str]) -> int:
        """複数ファイルを並列でアップロード

        Args:
            bucket: 宛先バケット
            batch: 絶対パス -> 宛先キー の辞書

        Returns:
            成功したファイル数（常に len(batch)）

        Raises:
            最初に届いた失敗の例外をそのまま送出する。他のタスクの完了は待たない。
        """
        total_files = len(batch)
        if total_files == 0:
            return 0

        workers = min(self.max_workers or total_files, total_files)
        self.logger.info(
            f"Starting parallel upload of {total_files} files with {workers} workers"
        )

        cancel_event = threading.Event()
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="upload")
        futures = [
            pool.submit(self.executor.upload_file, bucket, source, key, cancel_event)
            for source, key in batch.items()
        ]

        completed = 0
        try:
            # 完了した順に結果を受け取る
            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    self.logger.error(f"Parallel upload aborted: {error}")
                    raise error
                completed += 1
        except BaseException:
            self._abort(pool, cancel_event)
            raise

        pool.shutdown(wait=True)
        return completed

    def _abort(self, pool: ThreadPoolExecutor, cancel_event: threading.Event):
        """残りのタスクを待たずにプールを閉じる"""
        if self.cancel_on_error:
            # 未開始のタスクを先に取り消してから、実行中のタスクに通知する
            pool.shutdown(wait=False, cancel_futures=True)
            cancel_event.set()
        else:
            pool.shutdown(wait=False)
