"""フィールド単位の追跡状態。

各走査はTrackingStateを受け取り、更新済みの新しいTrackingStateを返す。
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .syntax import FieldDeclaration


class FieldKind(Enum):
    """フィールドの分類結果。"""
    RESOURCE = "resource"
    OPTIONS_BUILDER = "options_builder"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class AdapterTrackingRecord:
    """リソースフィールド1件分のstart/stop呼び出し状況。"""
    field: FieldDeclaration
    start_called: bool = False
    stop_called: bool = False

    def mark_started(self) -> "AdapterTrackingRecord":
        return replace(self, start_called=True)

    def mark_stopped(self) -> "AdapterTrackingRecord":
        return replace(self, stop_called=True)


@dataclass(frozen=True)
class TrackingState:
    """1クラス分の追跡状態。

    adaptersはリソースフィールドの記録（宣言順）、unbound_optionsは
    ライフサイクルオーナーが未設定のオプションビルダーフィールド（宣言順）。
    unbound_optionsは走査中に減ることはあっても増えることはない。
    """
    adapters: Tuple[AdapterTrackingRecord, ...] = ()
    unbound_options: Tuple[FieldDeclaration, ...] = ()

    @property
    def adapter_fields(self) -> Tuple[FieldDeclaration, ...]:
        return tuple(record.field for record in self.adapters)

    def update_adapter(self, updated: AdapterTrackingRecord) -> "TrackingState":
        """同じフィールドの記録を置き換えた状態を返す。"""
        return replace(
            self,
            adapters=tuple(
                updated if record.field == updated.field else record
                for record in self.adapters
            )
        )

    def record_for(self, field: FieldDeclaration) -> AdapterTrackingRecord:
        for record in self.adapters:
            if record.field == field:
                return record
        raise KeyError(field.name)

    def bind_options(self, field: FieldDeclaration) -> "TrackingState":
        """オーナー設定済みのフィールドを未設定集合から除いた状態を返す。"""
        return replace(
            self,
            unbound_options=tuple(
                options for options in self.unbound_options if options != field
            )
        )
