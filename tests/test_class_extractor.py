"""libclangによるクラス抽出のテスト。"""

import pytest

from lifecycle_lint.analyzer.clang_analyzer import ClangAnalyzer
from lifecycle_lint.analyzer.class_extractor import ClassExtractor
from lifecycle_lint.rules.detector import LifecycleDetector
from lifecycle_lint.rules.issues import (
    MISSING_OWNER,
    MISSING_START,
    MISSING_STOP,
    OPTIONS_BUILDER_TYPE,
    RESOURCE_TYPE,
)

FILENAME = "chat_activity.cpp"

DECLARATIONS = """\
class FirestoreRecyclerAdapter {
public:
    void startListening() {}
    void stopListening() {}
};

class FirestoreRecyclerOptions {
public:
    class Builder {
    public:
        Builder& setLifecycleOwner(void* owner) { return *this; }
    };
};

class Handler {
public:
    void post(int value) {}
};
"""


@pytest.fixture(scope="module")
def analyzer():
    pytest.importorskip("clang.cindex")
    try:
        return ClangAnalyzer()
    except Exception as e:
        pytest.skip(f"libclang is not available: {e}")


def _extract(analyzer, source):
    tu = analyzer.parse_string(DECLARATIONS + source, FILENAME)
    classes = ClassExtractor(analyzer).extract_from_translation_unit(tu, FILENAME)
    return {c.name: c for c in classes}


def _line_of(source, needle):
    text = DECLARATIONS + source
    for number, line in enumerate(text.splitlines(), 1):
        if needle in line:
            return number
    raise AssertionError(needle)


def _receivers(node, method_name):
    calls = []
    stack = list(node.calls)
    while stack:
        call = stack.pop()
        if call.method_name == method_name:
            calls.append(call.receiver)
        stack.extend(call.nested)
    return sorted(calls, key=str)


class TestFieldExtraction:
    """フィールド抽出のテスト。"""

    SOURCE = """
class ChatActivity {
    FirestoreRecyclerAdapter adapter;
    FirestoreRecyclerOptions::Builder options;
    FirestoreRecyclerAdapter* adapterPtr;
    int count;
};
"""

    def test_fields_use_canonical_type_names(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        types = {f.name: f.type_name for f in node.fields}
        assert types["adapter"] == RESOURCE_TYPE
        assert types["options"] == OPTIONS_BUILDER_TYPE
        assert types["adapterPtr"] != RESOURCE_TYPE
        assert types["count"] == "int"
        assert [f.name for f in node.fields] == ["adapter", "options", "adapterPtr", "count"]

    def test_field_location(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        adapter = node.fields[0]
        assert adapter.location.file_path == FILENAME
        assert adapter.location.line == _line_of(self.SOURCE, "FirestoreRecyclerAdapter adapter;")

    def test_nested_classes_are_extracted(self, analyzer):
        names = _extract(analyzer, self.SOURCE)

        assert {"FirestoreRecyclerAdapter", "Builder", "Handler", "ChatActivity"} <= set(names)


class TestCallExtraction:
    """呼び出し式とレシーバ抽出のテスト。"""

    SOURCE = """
class ChatActivity {
    FirestoreRecyclerAdapter adapter;
    FirestoreRecyclerAdapter other;
    Handler handler;

    int refresh() { return 0; }

public:
    void onStart() {
        adapter.startListening();
        this->other.startListening();
        handler.post(refresh());
    }
    void onStop();
};

void ChatActivity::onStop() {
    adapter.stopListening();
}
"""

    def test_receiver_text(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        assert _receivers(node, "startListening") == ["adapter", "this->other"]
        assert _receivers(node, "post") == ["handler"]

    def test_implicit_this_has_no_receiver(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        assert _receivers(node, "refresh") == [None]

    def test_argument_calls_are_nested(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        post = next(c for c in node.calls if c.method_name == "post")
        assert [c.method_name for c in post.nested] == ["refresh"]

    def test_out_of_line_definitions_are_included(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        assert _receivers(node, "stopListening") == ["adapter"]


class TestEndToEnd:
    """抽出から検出までの結合テスト。"""

    SOURCE = """
class ChatActivity {
    FirestoreRecyclerAdapter paired;
    FirestoreRecyclerAdapter leaking;
    FirestoreRecyclerAdapter idle;
    FirestoreRecyclerOptions::Builder options;
    FirestoreRecyclerOptions::Builder boundOptions;

public:
    void onCreate() {
        boundOptions.setLifecycleOwner(this);
    }
    void onStart() {
        paired.startListening();
        leaking.startListening();
    }
    void onStop() {
        paired.stopListening();
    }
};
"""

    def test_diagnostics(self, analyzer):
        node = _extract(analyzer, self.SOURCE)["ChatActivity"]

        diagnostics = LifecycleDetector().analyze_class(node)

        assert [(d.field_name, d.rule_id) for d in diagnostics] == [
            ("leaking", MISSING_STOP),
            ("idle", MISSING_START),
            ("options", MISSING_OWNER),
        ]
        assert diagnostics[0].location.line == _line_of(self.SOURCE, "FirestoreRecyclerAdapter leaking;")
        assert diagnostics[2].location.line == _line_of(self.SOURCE, "Builder options;")

    def test_declaration_classes_have_no_diagnostics(self, analyzer):
        classes = _extract(analyzer, self.SOURCE)

        detector = LifecycleDetector()
        for name in ["FirestoreRecyclerAdapter", "FirestoreRecyclerOptions", "Builder", "Handler"]:
            assert detector.analyze_class(classes[name]) == []


class TestFileExtraction:
    """ディスク上のファイルからの抽出テスト。"""

    def test_relative_path(self, analyzer, tmp_path, monkeypatch):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "ChatActivity.cpp").write_text(
            DECLARATIONS + TestFieldExtraction.SOURCE, encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        names = [c.name for c in ClassExtractor(analyzer).extract_classes("src/ChatActivity.cpp")]

        assert "ChatActivity" in names
