"""解析対象クラスの構文モデル。

C++フロントエンド（libclang）から抽出したクラス宣言を、
ルール本体が参照する読み取り専用の値として表現する。
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import os


@dataclass(frozen=True)
class SourceLocation:
    """ソースコードの位置情報。"""
    file_path: str
    line: int
    column: Optional[int] = None

    def __post_init__(self):
        # Windowsパスを正規化
        object.__setattr__(self, "file_path", os.path.normpath(self.file_path))

    def __str__(self) -> str:
        if self.column:
            return f"{self.file_path}:{self.line}:{self.column}"
        return f"{self.file_path}:{self.line}"


@dataclass(frozen=True)
class FieldDeclaration:
    """クラスのメンバ変数宣言。"""
    name: str
    type_name: str  # 正規化済みの型名（canonical spelling）
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.type_name} {self.name} ({self.location})"


@dataclass(frozen=True)
class CallExpression:
    """関数呼び出し式。

    receiverはレシーバ式をテキスト化したもの。暗黙のthisによる呼び出しなど、
    明示的なレシーバがない場合はNone。
    """
    method_name: str
    receiver: Optional[str] = None
    nested: Tuple["CallExpression", ...] = ()
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        if self.receiver is None:
            return f"{self.method_name}()"
        return f"{self.receiver}.{self.method_name}()"


@dataclass(frozen=True)
class ClassUnderAnalysis:
    """解析単位となるクラス宣言。"""
    name: str
    fields: Tuple[FieldDeclaration, ...] = ()
    calls: Tuple[CallExpression, ...] = ()
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"{self.name} (fields: {len(self.fields)}, calls: {len(self.calls)})"
