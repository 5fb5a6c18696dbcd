"""libclangを使用したC++ソースコード解析モジュール。"""

from .clang_analyzer import ClangAnalyzer, ClangParseError
from .class_extractor import ClassExtractor

__all__ = [
    "ClangAnalyzer",
    "ClangParseError",
    "ClassExtractor",
]
