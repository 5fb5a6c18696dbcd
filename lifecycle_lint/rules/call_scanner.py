"""呼び出し式を走査して追跡状態を更新する。"""

from typing import Callable, Iterable, Iterator, Optional, Sequence
import logging

from ..models.syntax import CallExpression, FieldDeclaration
from ..models.tracking import TrackingState
from .issues import OWNER_METHOD, START_METHOD, STOP_METHOD

logger = logging.getLogger(__name__)

CandidateSelector = Callable[[TrackingState], Sequence[FieldDeclaration]]
StateUpdater = Callable[[TrackingState, FieldDeclaration], TrackingState]


def iter_calls(calls: Iterable[CallExpression]) -> Iterator[CallExpression]:
    """呼び出し式を入れ子も含めて深さ優先で列挙する。

    一致した呼び出しの内側も必ず走査する。
    """
    for call in calls:
        yield call
        yield from iter_calls(call.nested)


def resolve_receiver(
    receiver: Optional[str],
    fields: Sequence[FieldDeclaration]
) -> Optional[FieldDeclaration]:
    """レシーバのテキストと名前が一致するフィールドを返す。

    単純な文字列比較のみ行い、"this->"などの正規化はしない。

    Args:
        receiver: レシーバ式のテキスト（暗黙のレシーバの場合None）
        fields: 候補フィールド

    Returns:
        一致したフィールド、見つからない場合はNone
    """
    if receiver is None:
        return None

    for field in fields:
        if field.name == receiver:
            return field
    return None


def scan_calls(
    calls: Iterable[CallExpression],
    method_name: str,
    state: TrackingState,
    candidates: CandidateSelector,
    update: StateUpdater
) -> TrackingState:
    """指定メソッドの呼び出しを探し、一致したフィールドの状態を更新する。

    Args:
        calls: クラス本体の呼び出し式
        method_name: 対象メソッド名
        state: 現在の追跡状態
        candidates: 状態から照合対象フィールドを取り出す関数
        update: 一致したフィールドについて新しい状態を返す関数

    Returns:
        更新後の追跡状態
    """
    for call in iter_calls(calls):
        if call.method_name != method_name:
            continue

        field = resolve_receiver(call.receiver, candidates(state))
        if field is None:
            logger.debug(f"Ignoring {call}: receiver does not match a tracked field")
            continue

        state = update(state, field)

    return state


def _adapter_candidates(state: TrackingState) -> Sequence[FieldDeclaration]:
    return state.adapter_fields


def _options_candidates(state: TrackingState) -> Sequence[FieldDeclaration]:
    return state.unbound_options


def _mark_started(state: TrackingState, field: FieldDeclaration) -> TrackingState:
    return state.update_adapter(state.record_for(field).mark_started())


def _mark_stopped(state: TrackingState, field: FieldDeclaration) -> TrackingState:
    return state.update_adapter(state.record_for(field).mark_stopped())


def scan_start_calls(
    calls: Iterable[CallExpression],
    state: TrackingState
) -> TrackingState:
    """startListening()の呼び出しを記録する。"""
    return scan_calls(calls, START_METHOD, state, _adapter_candidates, _mark_started)


def scan_stop_calls(
    calls: Iterable[CallExpression],
    state: TrackingState
) -> TrackingState:
    """stopListening()の呼び出しを記録する。"""
    return scan_calls(calls, STOP_METHOD, state, _adapter_candidates, _mark_stopped)


def scan_owner_binding_calls(
    calls: Iterable[CallExpression],
    state: TrackingState
) -> TrackingState:
    """setLifecycleOwner()が呼ばれたオプションビルダーを未設定集合から除く。"""
    return scan_calls(
        calls, OWNER_METHOD, state, _options_candidates, TrackingState.bind_options
    )
