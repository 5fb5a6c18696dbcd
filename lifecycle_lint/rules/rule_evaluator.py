"""追跡状態からルール違反を判定する。"""

from typing import List

from ..models.diagnostic import Diagnostic
from ..models.syntax import FieldDeclaration
from ..models.tracking import TrackingState
from .issues import MISSING_OWNER, MISSING_START, MISSING_STOP, get_rule


def _diagnostic(rule_id: str, field: FieldDeclaration, class_name: str) -> Diagnostic:
    rule = get_rule(rule_id)
    return Diagnostic(
        rule_id=rule.rule_id,
        severity=rule.severity,
        location=field.location,
        message=rule.message,
        field_name=field.name,
        class_name=class_name
    )


def evaluate(state: TrackingState, class_name: str = "") -> List[Diagnostic]:
    """最終的な追跡状態に3つのルールを適用する。

    リソースフィールドはmissing-stopを先に判定するため、startもstopも
    呼ばれていない場合はmissing-startのみ報告される。

    Args:
        state: 全走査後の追跡状態
        class_name: 診断に付与するクラス名

    Returns:
        フィールド宣言順の診断リスト（リソース、オプションビルダーの順）
    """
    diagnostics: List[Diagnostic] = []

    for record in state.adapters:
        if record.start_called and not record.stop_called:
            diagnostics.append(_diagnostic(MISSING_STOP, record.field, class_name))
        elif not record.start_called:
            diagnostics.append(_diagnostic(MISSING_START, record.field, class_name))

    for field in state.unbound_options:
        diagnostics.append(_diagnostic(MISSING_OWNER, field, class_name))

    return diagnostics
