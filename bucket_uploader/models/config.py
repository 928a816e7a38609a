"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from typing import List, Optional
import json
import os
import re


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class AssumeRoleConfig:
    """AssumeRole設定"""
    role_arn: str
    session_name: str
    external_id: Optional[str] = None
    duration_seconds: int = 3600

    def __post_init__(self):
        """AssumeRole設定のバリデーション"""
        arn_pattern = r'^arn:aws:iam::[0-9]{12}:role\/[a-zA-Z0-9+=,.@_-]+$'
        if not re.match(arn_pattern, self.role_arn):
            raise ValueError(
                f"Invalid role_arn format: {self.role_arn}. "
                "Expected format: arn:aws:iam::ACCOUNT_ID:role/ROLE_NAME"
            )

        if not self.session_name or not self.session_name.strip():
            raise ValueError("session_name cannot be empty")

        # 2-64文字の英数字、アンダースコア、ハイフン、ピリオドのみ
        session_name_pattern = r'^[a-zA-Z0-9_.-]{2,64}$'
        if not re.match(session_name_pattern, self.session_name):
            raise ValueError(
                f"Invalid session_name: {self.session_name}. "
                "Must be 2-64 characters long and contain only alphanumeric characters, "
                "underscores, hyphens, and periods"
            )

        if not (900 <= self.duration_seconds <= 43200):
            raise ValueError(
                f"Invalid duration_seconds: {self.duration_seconds}. "
                "Must be between 900 and 43200 seconds (15 minutes to 12 hours)"
            )


@dataclass
class AWSConfig:
    """AWS関連の設定"""
    region: str
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None  # S3互換ストレージ用
    assume_role: Optional[AssumeRoleConfig] = None

    def __post_init__(self):
        if self.assume_role:
            if isinstance(self.assume_role, dict):
                self.assume_role = AssumeRoleConfig(**self.assume_role)
            elif not isinstance(self.assume_role, AssumeRoleConfig):
                raise TypeError(
                    f"assume_role must be dict or AssumeRoleConfig, got {type(self.assume_role)}"
                )


@dataclass(frozen=True)
class UploadOptions:
    """アップロードオプション

    全ワーカーから読み取り専用で共有されるため frozen にしている。

    Attributes:
        content_type: 全オブジェクトに設定する MIME タイプ
        max_workers: 並列数の上限。None ならファイル数と同じだけ並列実行
        cancel_on_error: 最初の失敗で残りのタスクにキャンセルを通知する
        exclude_patterns: スキャン時に除外する fnmatch パターン
        dry_run: 実際にはアップロードしない
    """
    content_type: Optional[str] = None
    max_workers: Optional[int] = None
    cancel_on_error: bool = True
    exclude_patterns: List[str] = field(default_factory=list)
    dry_run: bool = False

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass
class UploadTask:
    """個別のアップロードタスク"""
    name: str
    source: str
    bucket: str

    description: Optional[str] = None
    enabled: bool = True
    key: Optional[str] = None  # ファイルの場合
    key_prefix: Optional[str] = None  # ディレクトリの場合


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    aws: AWSConfig
    options: UploadOptions
    upload_tasks: List[UploadTask]

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {config_path}: {e}")

        try:
            return cls.from_dict(data)
        except Exception as e:
            raise RuntimeError(f"Error loading configuration: {e}") from e

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """辞書から設定を組み立てる"""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            aws=AWSConfig(**data.get("aws", {})),
            options=UploadOptions(**data.get("options", {})),
            upload_tasks=[UploadTask(**task) for task in data.get("upload_tasks", [])],
        )
