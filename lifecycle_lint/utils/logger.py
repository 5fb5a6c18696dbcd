"""ロギング設定モジュール。"""

import logging
import sys
from pathlib import Path
from typing import Optional

# コンソールは検出結果を読みやすく、ファイルは時刻付きで残す
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """ロギング設定をセットアップする。

    Args:
        level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_file: ログファイルへのパス（省略可）

    Returns:
        ルートロガー
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger


class ProgressLogger:
    """検査対象ファイルごとの進捗と検出件数をログ出力する。

    検出のあったファイルは毎回、それ以外はlog_interval件ごとに出力する。
    """

    def __init__(
        self,
        total: int,
        logger: Optional[logging.Logger] = None,
        log_interval: int = 10
    ):
        """進捗ロガーを初期化する。

        Args:
            total: 検査対象ファイルの総数
            logger: 使用するロガー
            log_interval: 進捗を出力するファイル数の間隔
        """
        self.total = total
        self.logger = logger or logging.getLogger(__name__)
        self.log_interval = log_interval
        self.files = 0
        self.diagnostics = 0
        self.failed = 0

    def update(self, file_path: str, diagnostics: int = 0, failed: bool = False) -> None:
        """1ファイル分の結果を記録する。

        Args:
            file_path: 検査したファイル
            diagnostics: そのファイルの検出件数
            failed: パースに失敗した場合True
        """
        self.files += 1
        self.diagnostics += diagnostics
        if failed:
            self.failed += 1

        prefix = f"[{self.files}/{self.total}] {file_path}"
        if failed:
            self.logger.info(f"{prefix}: not analyzed")
        elif diagnostics:
            self.logger.info(f"{prefix}: {diagnostics} diagnostics")
        elif self.files % self.log_interval == 0 or self.files == self.total:
            self.logger.info(f"{prefix}: ok ({self.diagnostics} diagnostics so far)")

    def complete(self) -> None:
        self.logger.info(
            f"Checked {self.files - self.failed}/{self.total} files, "
            f"{self.diagnostics} diagnostics, {self.failed} failed"
        )
