"""ライフサイクル検査ツールのメインエントリーポイント。"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass
import logging

from .config import Config
from .analyzer.clang_analyzer import ClangAnalyzer, ClangParseError
from .analyzer.class_extractor import ClassExtractor
from .io.excel_writer import ExcelWriter
from .models.diagnostic import Diagnostic
from .rules.detector import LifecycleDetector
from .utils.logger import setup_logging, ProgressLogger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DIAGNOSTICS = 2


@dataclass
class ProcessingStats:
    """処理統計情報。"""
    files: int = 0
    classes: int = 0
    diagnostics: int = 0
    parse_errors: int = 0


class LifecycleLinter:
    """ソースファイル群にライフサイクル検査を適用するメインクラス。"""

    def __init__(self, config: Config):
        """リンターを初期化する。

        Args:
            config: アプリケーション設定
        """
        self.config = config
        self.stats = ProcessingStats()

        self.clang_analyzer = ClangAnalyzer(
            include_paths=self.config.include_paths,
            additional_args=self.config.compiler_args,
            library_path=self.config.libclang_path
        )
        self.extractor = ClassExtractor(self.clang_analyzer)
        self.detector = LifecycleDetector()

        logger.info("All components initialized")

    def process(self, source_files: List[str]) -> List[Diagnostic]:
        """ソースファイルを検査する。

        パースに失敗したファイルはログに記録して処理を続ける。

        Args:
            source_files: 検査対象ファイルのリスト

        Returns:
            全ファイルの検出結果
        """
        logger.info(f"Processing started: {len(source_files)} files")

        diagnostics: List[Diagnostic] = []
        progress = ProgressLogger(len(source_files), logger, log_interval=10)

        for file_path in source_files:
            self.stats.files += 1
            try:
                classes = self.extractor.extract_classes(file_path)
            except ClangParseError as e:
                logger.error(f"Skipping {file_path}: {e}")
                self.stats.parse_errors += 1
                progress.update(file_path, failed=True)
                continue

            self.stats.classes += len(classes)
            found = self.detector.analyze_classes(classes)
            for diagnostic in found:
                logger.warning(str(diagnostic))
            diagnostics.extend(found)

            progress.update(file_path, diagnostics=len(found))

        progress.complete()
        self.stats.diagnostics = len(diagnostics)
        self._log_statistics()
        return diagnostics

    def _log_statistics(self) -> None:
        """処理統計をログ出力する。"""
        logger.info("=" * 50)
        logger.info("Processing Statistics:")
        logger.info(f"  Files: {self.stats.files}")
        logger.info(f"  Classes: {self.stats.classes}")
        logger.info(f"  Diagnostics: {self.stats.diagnostics}")
        logger.info(f"  Parse errors: {self.stats.parse_errors}")
        logger.info("=" * 50)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="リソースのstart/stop呼び出し対応を検査する静的解析ツール"
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="検査対象ファイル（省略時は設定のsource_directoriesを検査）"
    )
    parser.add_argument(
        "-c", "--config",
        help="設定ファイルパス"
    )
    parser.add_argument(
        "-o", "--output",
        help="出力Excelファイル（設定のreport_fileより優先）"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="詳細ログを有効にする"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="検出結果が1件以上あれば終了コード2を返す"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """メインエントリーポイント。

    Returns:
        終了コード
    """
    args = _build_parser().parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: 設定ファイルが見つかりません: {args.config}")
            return EXIT_ERROR
        config = Config.from_yaml(str(config_path))
    else:
        config = Config()

    config.apply_environment()
    if args.verbose:
        config.log_level = "DEBUG"

    setup_logging(level=config.log_level, log_file=config.log_file)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return EXIT_ERROR

    source_files = args.files or config.get_source_files()
    if not source_files:
        logger.error("検査対象ファイルがありません")
        return EXIT_ERROR

    missing = [f for f in source_files if not Path(f).exists()]
    if missing:
        for file_path in missing:
            logger.error(f"入力ファイルが見つかりません: {file_path}")
        return EXIT_ERROR

    try:
        linter = LifecycleLinter(config)
        diagnostics = linter.process(source_files)

        output = args.output or config.report_file
        if output:
            ExcelWriter(output).write(diagnostics)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return EXIT_ERROR

    if args.strict and diagnostics:
        return EXIT_DIAGNOSTICS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
