"""リソースのライフサイクル呼び出し対応を検査するルール。"""

from .detector import LifecycleDetector
from .issues import RULES, get_rule
from .rule_evaluator import evaluate

__all__ = ["LifecycleDetector", "RULES", "get_rule", "evaluate"]
