"""Data models for lifecycle pairing analysis."""

from .syntax import SourceLocation, FieldDeclaration, CallExpression, ClassUnderAnalysis
from .diagnostic import Diagnostic, RuleDefinition, Severity
from .tracking import AdapterTrackingRecord, FieldKind, TrackingState

__all__ = [
    "SourceLocation",
    "FieldDeclaration",
    "CallExpression",
    "ClassUnderAnalysis",
    "Diagnostic",
    "RuleDefinition",
    "Severity",
    "AdapterTrackingRecord",
    "FieldKind",
    "TrackingState",
]
