"""クラス単位のライフサイクル呼び出し検査。"""

from typing import Iterable, List
import logging

from ..models.diagnostic import Diagnostic
from ..models.syntax import ClassUnderAnalysis
from .call_scanner import scan_owner_binding_calls, scan_start_calls, scan_stop_calls
from .field_classifier import classify_fields
from .rule_evaluator import evaluate

logger = logging.getLogger(__name__)


class LifecycleDetector:
    """リソースのstart/stop対応とオーナー設定漏れを検出する。

    状態は解析ごとに新しく作るため、同じインスタンスを複数クラスや
    複数スレッドで使い回してよい。
    """

    def analyze_class(self, node: ClassUnderAnalysis) -> List[Diagnostic]:
        """1クラスを解析する。

        Args:
            node: 解析対象クラス

        Returns:
            検出された診断のリスト（問題がなければ空）
        """
        state = classify_fields(node.fields)

        if not state.adapters and not state.unbound_options:
            logger.debug(f"No tracked fields in {node.name}")
            return []

        state = scan_start_calls(node.calls, state)
        state = scan_stop_calls(node.calls, state)
        state = scan_owner_binding_calls(node.calls, state)

        diagnostics = evaluate(state, node.name)
        logger.debug(
            f"Analyzed {node.name}: {len(state.adapters)} adapters, "
            f"{len(diagnostics)} diagnostics"
        )
        return diagnostics

    def analyze_classes(self, nodes: Iterable[ClassUnderAnalysis]) -> List[Diagnostic]:
        """複数クラスを順に解析する。"""
        diagnostics: List[Diagnostic] = []
        for node in nodes:
            diagnostics.extend(self.analyze_class(node))
        return diagnostics
