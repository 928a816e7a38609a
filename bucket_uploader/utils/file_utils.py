"""ファイル操作関連のユーティリティ"""
import os
import fnmatch
from typing import Dict, List

from ..core.errors import FilesystemError


def join_key(prefix: str, relative_key: str) -> str:
    """プレフィックスと相対キーを '/' 1つで連結"""
    if not prefix:
        return relative_key
    return prefix.rstrip("/") + "/" + relative_key.lstrip("/")


class FileScanner:
    """ファイルスキャン機能"""

    def __init__(self, exclude_patterns: List[str] = None):
        self.exclude_patterns = exclude_patterns or []

    def should_exclude(self, file_path: str) -> bool:
        """ファイルが除外パターンに一致するかチェック"""
        file_name = os.path.basename(file_path)

        for pattern in self.exclude_patterns:
            # ファイル名でのマッチ
            if fnmatch.fnmatch(file_name, pattern):
                return True
            # パス全体でのマッチ
            if fnmatch.fnmatch(file_path, f"*{pattern}*"):
                return True

        return False

    def walk(self, directory: str) -> Dict[str, str]:
        """ディレクトリを再帰的に走査し、絶対パス -> 宛先キー の辞書を返す

        途中で1つでもエラーが起きたら FilesystemError を送出し、部分的な結果は返さない。
        """
        if not os.path.isdir(directory):
            raise FilesystemError(f"Not a directory: {directory}", path=directory)

        root = os.path.abspath(directory)
        file_map: Dict[str, str] = {}

        def on_error(error: OSError):
            raise FilesystemError(str(error), path=error.filename) from error

        for current, dirs, files in os.walk(root, onerror=on_error):
            relative_dir = os.path.relpath(current, root)
            if relative_dir == os.curdir:
                relative_dir = ""

            # 除外パターンはルートからの相対パスで判定する
            dirs[:] = [d for d in dirs if not self.should_exclude(os.path.join(relative_dir, d))]

            for file in files:
                relative_path = os.path.join(relative_dir, file)
                if self.should_exclude(relative_path):
                    continue
                file_path = os.path.join(current, file)
                # シンボリックリンク先のディレクトリなどは除く
                if not os.path.isfile(file_path):
                    continue
                file_map[file_path] = relative_path.replace(os.sep, "/")

        return file_map
