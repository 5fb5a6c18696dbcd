"""ルールの検出結果モデル。"""

from dataclasses import dataclass
from enum import Enum

from .syntax import SourceLocation


class Severity(Enum):
    """検出結果の重大度。"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class RuleDefinition:
    """ルール定義（ID、説明、重大度、メッセージ）。"""
    rule_id: str
    name: str
    summary: str
    explanation: str
    severity: Severity
    message: str
    category: str = "correctness"
    priority: int = 10


@dataclass(frozen=True)
class Diagnostic:
    """フィールド宣言位置に紐づく検出結果。"""
    rule_id: str
    severity: Severity
    location: SourceLocation
    message: str
    field_name: str
    class_name: str = ""

    def __str__(self) -> str:
        return f"{self.location}: {self.severity.value}: {self.message} [{self.rule_id}]"
