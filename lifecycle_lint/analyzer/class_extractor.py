"""Class extraction from C++ translation units using libclang."""

from typing import Dict, List, Optional, Set
import os
import logging

from ..models.syntax import (
    CallExpression,
    ClassUnderAnalysis,
    FieldDeclaration,
    SourceLocation,
)
from .clang_analyzer import ClangAnalyzer

logger = logging.getLogger(__name__)


def _normalize(path: str) -> str:
    # libclang reports the absolute path of files parsed from disk
    return os.path.normcase(os.path.abspath(path))


class ClassExtractor:
    """Build ClassUnderAnalysis values from libclang cursors."""

    # Cursor kinds that represent class definitions
    CLASS_KINDS: Set[str] = {
        "CLASS_DECL",
        "STRUCT_DECL",
        "CLASS_TEMPLATE",
    }

    # Cursor kinds that can be defined outside the class body
    MEMBER_FUNCTION_KINDS: Set[str] = {
        "CXX_METHOD",
        "CONSTRUCTOR",
        "DESTRUCTOR",
        "FUNCTION_TEMPLATE",
    }

    def __init__(self, clang_analyzer: ClangAnalyzer):
        """Initialize the class extractor.

        Args:
            clang_analyzer: ClangAnalyzer instance for parsing
        """
        self.analyzer = clang_analyzer
        self._ci = clang_analyzer.ci

    def extract_classes(self, file_path: str) -> List[ClassUnderAnalysis]:
        """Extract every class defined in a source file.

        Args:
            file_path: Path to the source file

        Returns:
            List of ClassUnderAnalysis in source order

        Raises:
            ClangParseError: If the file cannot be parsed
        """
        tu = self.analyzer.get_translation_unit(file_path)
        return self.extract_from_translation_unit(tu, file_path)

    def extract_from_translation_unit(
        self,
        tu,
        file_path: str
    ) -> List[ClassUnderAnalysis]:
        """Extract classes defined in the main file of a translation unit.

        Classes coming from included headers are skipped. Member functions
        defined outside the class body contribute their calls to the class
        when they appear in the same file.

        Args:
            tu: clang.cindex.TranslationUnit
            file_path: Main file of the translation unit

        Returns:
            List of ClassUnderAnalysis in source order
        """
        main_file = _normalize(file_path)
        class_cursors = []
        out_of_line: Dict[str, list] = {}

        def traverse(node):
            # Skip nodes from other files
            if node.location.file:
                if _normalize(node.location.file.name) != main_file:
                    return

            kind = node.kind.name
            if kind in self.CLASS_KINDS and node.is_definition():
                class_cursors.append(node)
            elif kind in self.MEMBER_FUNCTION_KINDS and node.is_definition():
                owner = self._out_of_line_owner(node)
                if owner is not None:
                    out_of_line.setdefault(owner, []).append(node)

            for child in node.get_children():
                traverse(child)

        traverse(tu.cursor)

        classes = [
            self._cursor_to_class(cursor, out_of_line.get(cursor.get_usr(), []))
            for cursor in class_cursors
        ]
        logger.debug(f"Extracted {len(classes)} classes from {file_path}")
        return classes

    def _out_of_line_owner(self, cursor) -> Optional[str]:
        """Return the USR of the class owning an out-of-line definition."""
        parent = cursor.semantic_parent
        lexical = cursor.lexical_parent
        if parent is None or lexical is None:
            return None
        if parent.kind.name not in self.CLASS_KINDS or parent == lexical:
            return None
        return parent.get_usr()

    def _cursor_to_class(self, cursor, member_definitions: list) -> ClassUnderAnalysis:
        """Convert a class cursor to ClassUnderAnalysis.

        Args:
            cursor: Class definition cursor
            member_definitions: Out-of-line member function cursors

        Returns:
            ClassUnderAnalysis instance
        """
        CursorKind = self._ci.CursorKind

        fields = tuple(
            self._cursor_to_field(child)
            for child in cursor.get_children()
            if child.kind == CursorKind.FIELD_DECL
        )

        calls = self._collect_calls(cursor)
        for definition in member_definitions:
            calls.extend(self._collect_calls(definition))

        return ClassUnderAnalysis(
            name=cursor.spelling or "<anonymous>",
            fields=fields,
            calls=tuple(calls),
            location=self._location(cursor)
        )

    def _cursor_to_field(self, cursor) -> FieldDeclaration:
        return FieldDeclaration(
            name=cursor.spelling,
            type_name=cursor.type.get_canonical().spelling,
            location=self._location(cursor)
        )

    def _collect_calls(self, node) -> List[CallExpression]:
        """Collect the outermost call expressions below a cursor.

        Calls inside a call's own subexpressions become its nested calls.
        """
        CursorKind = self._ci.CursorKind
        calls: List[CallExpression] = []

        for child in node.get_children():
            if child.kind == CursorKind.CALL_EXPR:
                calls.append(self._cursor_to_call(child))
            else:
                calls.extend(self._collect_calls(child))

        return calls

    def _cursor_to_call(self, cursor) -> CallExpression:
        return CallExpression(
            method_name=cursor.spelling,
            receiver=self._render_receiver(cursor),
            nested=tuple(self._collect_calls(cursor)),
            location=self._location(cursor)
        )

    def _render_receiver(self, call_cursor) -> Optional[str]:
        """Render the object expression a member function is called on.

        Returns None for calls without an explicit receiver, such as free
        functions or member calls through implicit this.
        """
        CursorKind = self._ci.CursorKind

        children = list(call_cursor.get_children())
        if not children:
            return None

        callee = children[0]
        while callee.kind == CursorKind.UNEXPOSED_EXPR:
            inner = list(callee.get_children())
            if len(inner) != 1:
                break
            callee = inner[0]

        if callee.kind != CursorKind.MEMBER_REF_EXPR:
            return None
        if callee.spelling != call_cursor.spelling:
            return None

        # Implicit this is not visited, so the base is missing
        base = list(callee.get_children())
        if not base:
            return None

        return self.render_expression(base[0]) or None

    def render_expression(self, cursor) -> str:
        """Render an expression cursor as its tokens without whitespace."""
        return "".join(token.spelling for token in cursor.get_tokens())

    def _location(self, cursor) -> Optional[SourceLocation]:
        location = cursor.location
        if location.file is None:
            return None
        return SourceLocation(
            file_path=location.file.name,
            line=location.line,
            column=location.column
        )
