"""アップロードタスクの実行"""
import os
from typing import Tuple

from ..models.config import UploadTask, Config
from ..utils.logger import LoggerManager
from .s3_client import S3ClientManager
from .storage_uploader import StorageUploader


class TaskRunner:
    """設定ファイルのアップロードタスクを実行"""

    def __init__(self, config: Config, client=None):
        self.config = config
        self.logger = LoggerManager.get_logger()

        # クライアントはタスク全体で1つだけ作る
        if client is None:
            client = S3ClientManager(config.aws).get_storage_client()
        self.uploader = StorageUploader(client, config.options)

    def run_all_tasks(self) -> Tuple[int, int]:
        """全てのタスクを実行"""
        total_tasks = len(self.config.upload_tasks)
        successful_tasks = 0
        failed_tasks = 0

        self.logger.info(f"Starting upload tasks: {total_tasks} tasks to process")

        for i, task in enumerate(self.config.upload_tasks, 1):
            if not task.enabled:
                self.logger.info(f"Skipping disabled task: {task.name}")
                continue

            self.logger.info(f"Task {i}/{total_tasks}: Starting '{task.name}'")

            try:
                self._run_single_task(task)
                successful_tasks += 1
                self.logger.info(f"Task {i}/{total_tasks}: '{task.name}' completed successfully")
            except Exception as e:
                failed_tasks += 1
                self.logger.error(f"Task {i}/{total_tasks}: '{task.name}' failed with error: {e}")

        self.logger.info(
            f"Upload tasks completed: {successful_tasks} successful, {failed_tasks} failed"
        )
        return successful_tasks, failed_tasks

    def _run_single_task(self, task: UploadTask):
        """単一タスクを実行"""
        if os.path.isfile(task.source):
            key = task.key or os.path.basename(task.source)
            self.uploader.upload_file(task.bucket, task.source, key)
        elif os.path.isdir(task.source):
            self.uploader.upload_directory(task.bucket, task.source, task.key_prefix or "")
        else:
            raise ValueError(f"Source is neither file nor directory: {task.source}")
