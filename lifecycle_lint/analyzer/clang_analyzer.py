"""libclangを使用したC++ソースコード解析のラッパー。"""

from typing import List, Optional, Dict
from pathlib import Path
import os
import logging
import threading

logger = logging.getLogger(__name__)


class ClangParseError(Exception):
    """Clangパース時のエラー。"""
    pass


class ClangAnalyzer:
    """libclangを使用したC++解析のメインクラス。

    ライフサイクル検査では関数本体内の呼び出し式が必要なため、
    常に関数本体を含めてパースする。TranslationUnitはファイル単位でキャッシュする。
    """

    # libclangが自動検出できない場合に探すディレクトリ
    LIBRARY_SEARCH_PATHS: List[str] = [
        r"C:\Program Files\LLVM\bin",
        r"C:\Program Files (x86)\LLVM\bin",
        "/usr/lib/llvm-18/lib",
        "/usr/lib/llvm-17/lib",
        "/usr/lib/llvm-16/lib",
        "/usr/lib/llvm-15/lib",
        "/opt/homebrew/opt/llvm/lib",
        "/usr/local/opt/llvm/lib",
    ]

    LIBRARY_NAMES: List[str] = ["libclang.dll", "libclang.so", "libclang.dylib"]

    def __init__(
        self,
        include_paths: Optional[List[str]] = None,
        additional_args: Optional[List[str]] = None,
        library_path: Optional[str] = None
    ):
        """Clangアナライザーを初期化する。

        Args:
            include_paths: インクルードディレクトリのリスト
            additional_args: 追加のコンパイラ引数
            library_path: libclangライブラリのパス（任意、未指定時は自動検出）

        Raises:
            ClangParseError: libclangを読み込めない場合
        """
        self._setup_libclang(library_path)

        import clang.cindex as ci
        self._ci = ci

        self.include_paths = include_paths or []
        self.additional_args = additional_args or []
        self.index = ci.Index.create()

        # スレッドセーフなTranslationUnitキャッシュ
        self._translation_units: Dict[str, ci.TranslationUnit] = {}
        self._cache_lock = threading.Lock()

        logger.info(f"ClangAnalyzer initialized with {len(self.include_paths)} include paths")

    def _setup_libclang(self, library_path: Optional[str] = None) -> None:
        """libclangライブラリパスを設定する。

        Args:
            library_path: libclangへの明示的なパス（任意）
        """
        import clang.cindex as ci

        if library_path:
            if not ci.Config.loaded:
                ci.Config.set_library_path(library_path)
            return

        # pip install libclangでインストールされたライブラリを使用
        try:
            ci.Index.create()
            logger.debug("libclang loaded successfully from pip package")
        except Exception as e:
            for path in self.LIBRARY_SEARCH_PATHS:
                if any((Path(path) / name).exists() for name in self.LIBRARY_NAMES):
                    ci.Config.set_library_path(path)
                    logger.info(f"Using libclang from: {path}")
                    return

            raise ClangParseError(
                f"Failed to load libclang: {e}. "
                "Please install libclang with 'pip install libclang' or install LLVM."
            )

    def _build_compiler_args(self) -> List[str]:
        """パース用のコンパイラ引数を構築する。

        Returns:
            コンパイラ引数のリスト
        """
        args = [
            "-x", "c++",
            "-std=c++14",
            "-Wno-pragma-once-outside-header",  # ヘッダー単体のパースで出る警告を抑制
        ]

        for inc_path in self.include_paths:
            args.extend(["-I", inc_path])

        args.extend(self.additional_args)

        return args

    def _log_diagnostics(self, tu, name: str) -> None:
        for diag in tu.diagnostics:
            if diag.severity >= self._ci.Diagnostic.Error:
                logger.warning(f"Parse error in {name}: {diag.spelling}")

    def get_translation_unit(self, file_path: str, force_reparse: bool = False):
        """ファイルのTranslationUnitを取得する。

        同じファイルの再パースを避けるためにキャッシュを使用する。

        Args:
            file_path: ソースファイルのパス
            force_reparse: キャッシュがあっても強制的に再パース

        Returns:
            clang.cindex.TranslationUnit

        Raises:
            ClangParseError: パースに失敗した場合
        """
        abs_path = os.path.abspath(file_path)

        with self._cache_lock:
            if not force_reparse and abs_path in self._translation_units:
                return self._translation_units[abs_path]

        try:
            tu = self.index.parse(
                abs_path,
                args=self._build_compiler_args(),
                options=self._ci.TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD
            )
        except Exception as e:
            raise ClangParseError(f"Failed to parse {abs_path}: {e}")

        if tu is None:
            raise ClangParseError(f"Failed to parse {abs_path}: returned None")

        self._log_diagnostics(tu, abs_path)

        with self._cache_lock:
            self._translation_units[abs_path] = tu

        return tu

    def parse_string(self, source_code: str, filename: str = "temp.cpp"):
        """文字列からC++ソースコードをパースする。

        Args:
            source_code: C++ソースコード
            filename: ソースの仮想ファイル名

        Returns:
            clang.cindex.TranslationUnit

        Raises:
            ClangParseError: パースに失敗した場合
        """
        try:
            tu = self.index.parse(
                filename,
                args=self._build_compiler_args(),
                unsaved_files=[(filename, source_code)],
                options=self._ci.TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD
            )
        except Exception as e:
            raise ClangParseError(f"Failed to parse source string: {e}")

        self._log_diagnostics(tu, filename)
        return tu

    def clear_cache(self) -> None:
        """TranslationUnitキャッシュをクリアする。"""
        with self._cache_lock:
            self._translation_units.clear()
        logger.debug("TranslationUnit cache cleared")

    @property
    def ci(self):
        """clang.cindexモジュールを取得する。"""
        return self._ci
