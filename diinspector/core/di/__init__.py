"""Dependency-injection checks over parsed C# units.

Public API:
    analyze(source) → AnalysisResult
    suggest_registrations(constructors, source) → list[str]
    DependencyAnalyzer(settings) — same operations with explicit settings
"""

from .analyzer import DependencyAnalyzer, analyze, suggest_registrations
from .models import (
    AnalysisResult,
    CircularDependencyIssue,
    ConcreteTypeIssue,
    IssueKind,
    MissingRegistrationIssue,
    Registration,
    RegistrationEdit,
)
from .registrations import apply_edit, create_registration_edit, find_registrations

__all__ = [
    "DependencyAnalyzer",
    "analyze",
    "suggest_registrations",
    "apply_edit",
    "create_registration_edit",
    "find_registrations",
    "AnalysisResult",
    "CircularDependencyIssue",
    "ConcreteTypeIssue",
    "IssueKind",
    "MissingRegistrationIssue",
    "Registration",
    "RegistrationEdit",
]
