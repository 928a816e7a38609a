"""Bucket Uploader パッケージ"""
from typing import Tuple
from .models.config import Config, UploadOptions
from .utils.logger import LoggerManager
from .core.storage_uploader import StorageUploader
from .core.task_runner import TaskRunner


class BucketUploader:
    """アップローダーのメインクラス"""

    def __init__(self, config_path: str = "config.json"):
        self.config = Config.from_file(config_path)

        self.logger = LoggerManager.setup(self.config.logging)
        self.logger.info("Bucket Uploader initialized")

        self.task_runner = TaskRunner(self.config)

    def run(self) -> Tuple[int, int]:
        """アップロードタスクを実行"""
        self.logger.info("Starting upload process...")
        return self.task_runner.run_all_tasks()


__all__ = ['BucketUploader', 'Config', 'UploadOptions', 'StorageUploader']
