"""アップローダーの例外クラス

元の例外は __cause__ に残し、メッセージもそのまま引き継ぐ。
"""
from typing import Optional


class UploaderError(Exception):
    """アップローダー例外の基底クラス"""


class AuthError(UploaderError):
    """クライアント作成時の認証・設定エラー"""


class ProvisioningError(UploaderError):
    """バケット作成の失敗（自分が所有済みの場合を除く）"""

    def __init__(self, message: str, bucket: Optional[str] = None):
        super().__init__(message)
        self.bucket = bucket


class FilesystemError(UploaderError):
    """ローカルファイルの読み込み・走査エラー"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class TransferError(UploaderError):
    """リモートへの書き込み失敗"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class UploadCancelled(TransferError):
    """キャンセル通知を受けて中断した"""
