"""設定管理モジュール。"""

from dataclasses import dataclass, field, fields
from typing import List, Dict, Optional, Any
from pathlib import Path
import os
import logging

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSIONS = [".cpp", ".cc", ".cxx", ".h", ".hpp", ".hh", ".hxx"]
ENV_LOG_LEVEL = "LIFECYCLE_LINT_LOG_LEVEL"


@dataclass
class Config:
    """アプリケーション設定。

    監視対象の型名・メソッド名はルールの固定値であり、ここでは設定しない。
    """

    # C++パース用インクルードパス
    include_paths: List[str] = field(default_factory=list)

    # 検査対象のソースディレクトリ
    source_directories: List[str] = field(default_factory=list)

    # 追加のコンパイラ引数
    compiler_args: List[str] = field(default_factory=list)

    # 検査対象とする拡張子
    source_extensions: List[str] = field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS)
    )

    # libclangの場所（未指定時は自動検出）
    libclang_path: Optional[str] = None

    # Excelレポートの出力先（未指定時は出力しない）
    report_file: Optional[str] = None

    # ロギング設定
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, file_path: str) -> "Config":
        """YAMLファイルから設定を読み込む。

        Args:
            file_path: YAML設定ファイルのパス

        Returns:
            Configインスタンス
        """
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)

        logger.info(f"Configuration loaded from {file_path}")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """辞書から設定を作成する。

        未知のキーは警告を出して無視する。

        Args:
            data: 設定辞書

        Returns:
            Configインスタンス
        """
        config = cls()
        known_keys = {f.name for f in fields(cls)}

        for key, value in data.items():
            if key in known_keys:
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown configuration key: {key}")

        return config

    def apply_environment(self) -> None:
        """環境変数による上書きを適用する。

        LIFECYCLE_LINT_LOG_LEVELが設定されていればlog_levelより優先する。
        """
        self.log_level = os.getenv(ENV_LOG_LEVEL, self.log_level)

    def validate(self) -> List[str]:
        """設定を検証する。

        Returns:
            検証エラーのリスト（有効な場合は空）
        """
        errors = []

        if not self.source_extensions:
            errors.append("source_extensionsが空です")

        # パスの存在を検証
        for path in self.include_paths:
            if not Path(path).exists():
                logger.warning(f"Include path does not exist: {path}")

        for path in self.source_directories:
            if not Path(path).exists():
                errors.append(f"ソースディレクトリが存在しません: {path}")

        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            errors.append(f"不正なlog_levelです: {self.log_level}")

        return errors

    def to_dict(self) -> dict:
        """設定を辞書に変換する。

        Returns:
            辞書形式の設定
        """
        return {
            "include_paths": self.include_paths,
            "source_directories": self.source_directories,
            "compiler_args": self.compiler_args,
            "source_extensions": self.source_extensions,
            "libclang_path": self.libclang_path,
            "report_file": self.report_file,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    def get_source_files(self) -> List[str]:
        """ソースディレクトリから検査対象ファイルを取得する。

        Returns:
            ソースファイルパスのリスト（ソート済み）
        """
        extensions = {ext.lower() for ext in self.source_extensions}
        source_files = []

        for source_dir in self.source_directories:
            path = Path(source_dir)
            if path.exists():
                source_files.extend(
                    str(f) for f in path.rglob("*")
                    if f.is_file() and f.suffix.lower() in extensions
                )

        logger.debug(f"Found {len(source_files)} source files")
        return sorted(source_files)

    def save_yaml(self, file_path: str) -> None:
        """設定をYAMLファイルに保存。

        Args:
            file_path: 保存先パス
        """
        # 出力先ディレクトリが存在しない場合は作成
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = {
            key: value for key, value in self.to_dict().items()
            if value is not None
        }

        with open(file_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False
            )

        logger.info(f"Configuration saved to {file_path}")
