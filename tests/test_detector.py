"""LifecycleDetectorのシナリオテスト。"""

from lifecycle_lint.models.syntax import (
    CallExpression,
    ClassUnderAnalysis,
    FieldDeclaration,
    SourceLocation,
)
from lifecycle_lint.rules.detector import LifecycleDetector
from lifecycle_lint.rules.issues import (
    MISSING_OWNER,
    MISSING_START,
    MISSING_STOP,
    OPTIONS_BUILDER_TYPE,
    RESOURCE_TYPE,
)


def _field(name: str, type_name: str = RESOURCE_TYPE, line: int = 3) -> FieldDeclaration:
    return FieldDeclaration(name, type_name, SourceLocation("ChatActivity.cpp", line, 30))


def _start(receiver):
    return CallExpression("startListening", receiver)


def _stop(receiver):
    return CallExpression("stopListening", receiver)


def _analyze(fields, calls):
    node = ClassUnderAnalysis("ChatActivity", fields=tuple(fields), calls=tuple(calls))
    return LifecycleDetector().analyze_class(node)


class TestResourcePairing:
    """startListening/stopListeningの対応検査。"""

    def test_paired_calls_produce_nothing(self):
        """シナリオA: startとstopの両方を呼ぶ。"""
        diagnostics = _analyze([_field("repoAdapter")], [_start("repoAdapter"), _stop("repoAdapter")])

        assert diagnostics == []

    def test_start_without_stop(self):
        """シナリオB: startのみ呼ぶ。"""
        field = _field("repoAdapter")

        diagnostics = _analyze([field], [_start("repoAdapter")])

        assert len(diagnostics) == 1
        assert diagnostics[0].rule_id == MISSING_STOP
        assert diagnostics[0].location == field.location
        assert diagnostics[0].field_name == "repoAdapter"
        assert diagnostics[0].class_name == "ChatActivity"

    def test_never_started(self):
        """シナリオC: どちらも呼ばない場合はmissing-startのみ。"""
        field = _field("repoAdapter")

        diagnostics = _analyze([field], [CallExpression("setTitle", None)])

        assert [d.rule_id for d in diagnostics] == [MISSING_START]
        assert diagnostics[0].location == field.location

    def test_only_the_unpaired_field_is_reported(self):
        """シナリオE: 片方だけstart/stopが揃っている。"""
        paired = _field("paired", line=3)
        leaking = _field("leaking", line=4)

        diagnostics = _analyze(
            [paired, leaking],
            [_start("paired"), _stop("paired"), _start("leaking")]
        )

        assert [(d.field_name, d.rule_id) for d in diagnostics] == [("leaking", MISSING_STOP)]

    def test_call_order_is_not_considered(self):
        diagnostics = _analyze([_field("adapter")], [_stop("adapter"), _start("adapter")])

        assert diagnostics == []

    def test_nested_calls_are_found(self):
        outer = CallExpression(
            "post",
            "handler",
            nested=(CallExpression("run", None, nested=(_start("adapter"), _stop("adapter"))),)
        )

        assert _analyze([_field("adapter")], [outer]) == []

    def test_matching_outer_call_still_descends(self):
        outer = CallExpression("startListening", "adapter", nested=(_stop("adapter"),))

        assert _analyze([_field("adapter")], [outer]) == []

    def test_unrelated_receiver_is_ignored(self):
        """別名のローカル変数や中間オブジェクト経由の呼び出しは無視される。"""
        diagnostics = _analyze(
            [_field("adapter")],
            [_start("localAdapter"), _start("holder.adapter"), _start(None)]
        )

        assert [d.rule_id for d in diagnostics] == [MISSING_START]

    def test_receiver_is_not_attributed_to_other_field(self):
        first = _field("first", line=3)
        second = _field("second", line=4)

        diagnostics = _analyze([first, second], [_start("first"), _stop("first")])

        assert [(d.field_name, d.rule_id) for d in diagnostics] == [("second", MISSING_START)]

    def test_this_qualified_receiver_does_not_match(self):
        """this->修飾付きのレシーバは正規化されず一致しない。"""
        diagnostics = _analyze(
            [_field("repoAdapter")],
            [_start("this->repoAdapter"), _stop("this->repoAdapter")]
        )

        assert [d.rule_id for d in diagnostics] == [MISSING_START]

    def test_this_qualified_stop_leaves_start_unpaired(self):
        diagnostics = _analyze(
            [_field("repoAdapter")],
            [_start("repoAdapter"), _stop("this->repoAdapter")]
        )

        assert [d.rule_id for d in diagnostics] == [MISSING_STOP]


class TestOptionsOwner:
    """setLifecycleOwnerの設定漏れ検査。"""

    def test_missing_owner(self):
        """シナリオD: オーナーを設定しない。"""
        opts = _field("opts", OPTIONS_BUILDER_TYPE)

        diagnostics = _analyze([opts], [])

        assert [d.rule_id for d in diagnostics] == [MISSING_OWNER]
        assert diagnostics[0].location == opts.location

    def test_owner_bound(self):
        opts = _field("opts", OPTIONS_BUILDER_TYPE)

        assert _analyze([opts], [CallExpression("setLifecycleOwner", "opts")]) == []

    def test_owner_bound_on_other_object(self):
        opts = _field("opts", OPTIONS_BUILDER_TYPE)

        diagnostics = _analyze([opts], [CallExpression("setLifecycleOwner", "builder")])

        assert [d.rule_id for d in diagnostics] == [MISSING_OWNER]

    def test_owner_rule_is_independent_of_resource_rules(self):
        adapter = _field("adapter", line=3)
        opts = _field("opts", OPTIONS_BUILDER_TYPE, line=4)

        diagnostics = _analyze([adapter, opts], [_start("adapter")])

        assert [(d.field_name, d.rule_id) for d in diagnostics] == [
            ("adapter", MISSING_STOP),
            ("opts", MISSING_OWNER),
        ]


class TestDetectorBehaviour:
    """検出器全体の性質。"""

    def test_idempotent(self):
        node = ClassUnderAnalysis(
            "ChatActivity",
            fields=(_field("a", line=3), _field("b", line=4), _field("o", OPTIONS_BUILDER_TYPE, 5)),
            calls=(_start("a"),)
        )
        detector = LifecycleDetector()

        assert detector.analyze_class(node) == detector.analyze_class(node)

    def test_class_without_tracked_fields(self):
        assert _analyze([_field("title", "std::string")], [_start("title")]) == []

    def test_analyze_classes_keeps_class_order(self):
        first = ClassUnderAnalysis("First", fields=(_field("a"),))
        second = ClassUnderAnalysis("Second", fields=(_field("b", OPTIONS_BUILDER_TYPE),))

        diagnostics = LifecycleDetector().analyze_classes([first, second])

        assert [(d.class_name, d.rule_id) for d in diagnostics] == [
            ("First", MISSING_START),
            ("Second", MISSING_OWNER),
        ]
