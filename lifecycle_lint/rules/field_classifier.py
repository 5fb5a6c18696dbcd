"""メンバ変数を型名で分類する。"""

from typing import Dict, Iterable

from ..models.syntax import FieldDeclaration
from ..models.tracking import AdapterTrackingRecord, FieldKind, TrackingState
from .issues import OPTIONS_BUILDER_TYPE, RESOURCE_TYPE

WATCHED_TYPES: Dict[str, FieldKind] = {
    RESOURCE_TYPE: FieldKind.RESOURCE,
    OPTIONS_BUILDER_TYPE: FieldKind.OPTIONS_BUILDER,
}


def classify_field(field: FieldDeclaration) -> FieldKind:
    """宣言型名の完全一致でフィールドを分類する。

    継承関係や型エイリアスは解決しない。
    """
    return WATCHED_TYPES.get(field.type_name, FieldKind.UNCLASSIFIED)


def classify_fields(fields: Iterable[FieldDeclaration]) -> TrackingState:
    """フィールド一覧から初期の追跡状態を作る。

    Args:
        fields: クラスのフィールド宣言（宣言順）

    Returns:
        リソースフィールドごとの未呼び出し記録と、全オプションビルダーフィールドを
        未設定として含むTrackingState
    """
    adapters = []
    options = []

    for field in fields:
        kind = classify_field(field)
        if kind is FieldKind.RESOURCE:
            adapters.append(AdapterTrackingRecord(field))
        elif kind is FieldKind.OPTIONS_BUILDER:
            options.append(field)

    return TrackingState(adapters=tuple(adapters), unbound_options=tuple(options))
