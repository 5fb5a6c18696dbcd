"""監視対象の型名・メソッド名とルール定義テーブル。"""

from typing import Dict

from ..models.diagnostic import RuleDefinition, Severity

# 監視対象の型（正規化済みの型名と完全一致で比較する）
RESOURCE_TYPE = "FirestoreRecyclerAdapter"
OPTIONS_BUILDER_TYPE = "FirestoreRecyclerOptions::Builder"

# 監視対象のメソッド名
START_METHOD = "startListening"
STOP_METHOD = "stopListening"
OWNER_METHOD = "setLifecycleOwner"

MISSING_START = "resource-missing-start"
MISSING_STOP = "resource-missing-stop"
MISSING_OWNER = "options-missing-owner"

RULES: Dict[str, RuleDefinition] = {
    MISSING_OWNER: RuleDefinition(
        rule_id=MISSING_OWNER,
        name="FirestoreRecyclerOptionsMissingLifecycleOwnerMethod",
        summary="Checks if FirestoreRecyclerOptions has called .setLifecycleOwner().",
        explanation=(
            "If a class is using a FirestoreAdapter with FirestoreRecyclerOptions and "
            "has not called .setLifecycleOwner() on FirestoreRecyclerOptions, it won't be "
            "notified on changes."
        ),
        severity=Severity.WARNING,
        message="Have not called .setLifecycleOwner() on FirestoreRecyclerOptions.",
    ),
    MISSING_START: RuleDefinition(
        rule_id=MISSING_START,
        name="FirestoreAdapterMissingStartListeningMethod",
        summary="Checks if FirestoreAdapter has called .startListening() method.",
        explanation=(
            "If a class is using a FirestoreAdapter and does not call startListening it won't be "
            "notified on changes."
        ),
        severity=Severity.WARNING,
        message="Have not called .startListening().",
    ),
    MISSING_STOP: RuleDefinition(
        rule_id=MISSING_STOP,
        name="FirestoreAdapterMissingStopListeningMethod",
        summary="Checks if FirestoreAdapter has called .stopListening() method.",
        explanation=(
            "If a class is using a FirestoreAdapter and has called .startListening() but missing "
            ".stopListening() might cause issues with RecyclerView data changes."
        ),
        severity=Severity.WARNING,
        message="Have called .startListening() without .stopListening().",
    ),
}


def get_rule(rule_id: str) -> RuleDefinition:
    """ルールIDからルール定義を取得する。

    Raises:
        KeyError: 未知のルールIDの場合
    """
    return RULES[rule_id]
