"""DependencyAnalyzer — constructor-injection analysis of one C# unit.

Pipeline per call:
    parse → declarations + constructors → concrete-type issues
          → dependency graph → cycles
          → (optional) missing registrations

The analyzer holds the shared parser and settings only; every call builds
its own tree and result.
"""

import logging
from typing import Iterable, List, Optional

from ..ast_parser import get_parser
from ..ast_parser.base import BaseLanguageParser
from ..ast_parser.models import ConstructorRecord
from ...setting import AnalyzerSettings, get_settings
from .detectors import detect_concrete_types, detect_missing_registrations
from .graph import build_dependency_graph, find_cycles
from .models import AnalysisResult, CircularDependencyIssue
from .registrations import build_registration_suggestions, registered_types

logger = logging.getLogger(__name__)


class DependencyAnalyzer:
    """Recover constructor dependencies and flag DI anti-patterns.

    Usage:
        analyzer = DependencyAnalyzer()
        result = analyzer.analyze(source_text)
        suggestions = analyzer.suggest_registrations(result.constructors, source_text)
    """

    def __init__(
        self,
        settings: Optional[AnalyzerSettings] = None,
        parser: Optional[BaseLanguageParser] = None,
    ):
        self._settings = settings or get_settings()
        self._parser = parser or get_parser("csharp")

    @property
    def settings(self) -> AnalyzerSettings:
        return self._settings

    def analyze(self, source_text: str, file_path: str = "<memory>") -> AnalysisResult:
        """Analyze C# source text.

        Never raises for any string input. Syntax errors add a single
        advisory warning and analysis continues on the partial tree.

        Args:
            source_text: C# source
            file_path: Used in log messages only

        Returns:
            AnalysisResult
        """
        source_text = source_text or ""
        result = AnalysisResult()

        try:
            parsed = self._parser.parse_source(source_text, file_path)
            result.parse_warnings.extend(error.message for error in parsed.errors)
            declarations = self._parser.collect_declarations(parsed.tree, parsed.source)
            result.constructors = self._parser.extract_constructors(parsed.tree, parsed.source)
        except Exception as e:
            logger.error(f"Failed to extract constructors from {file_path}: {e}")
            result.parse_warnings.append(f"Constructor extraction failed: {e}")
            return result

        result.concrete_type_issues = detect_concrete_types(result.constructors, declarations)

        try:
            result.dependency_graph = build_dependency_graph(result.constructors, declarations.classes)
            result.circular_dependency_issues = [
                CircularDependencyIssue(cycle=cycle) for cycle in find_cycles(result.dependency_graph)
            ]
        except Exception as e:
            logger.error(f"Cycle detection failed for {file_path}: {e}")
            result.parse_warnings.append(f"Cycle detection failed: {e}")

        registration = self._settings.registration
        if registration.detect_missing:
            result.missing_registration_issues = detect_missing_registrations(
                result.constructors,
                registered_types(source_text),
                registration.ignored_types,
            )

        logger.debug(
            f"{file_path}: {len(result.constructors)} constructor(s), "
            f"{len(result.concrete_type_issues)} concrete, "
            f"{len(result.circular_dependency_issues)} cycle(s), "
            f"{len(result.missing_registration_issues)} missing registration(s)"
        )
        return result

    def suggest_registrations(
        self, constructors: Iterable[ConstructorRecord], source_text: str
    ) -> List[str]:
        """Suggested registration statements, de-duplicated and sorted."""
        return build_registration_suggestions(constructors, source_text, self._settings.registration)


_default_analyzer: Optional[DependencyAnalyzer] = None


def _get_default_analyzer() -> DependencyAnalyzer:
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = DependencyAnalyzer()
    return _default_analyzer


def analyze(source_text: str) -> AnalysisResult:
    """Analyze C# source with the process-wide analyzer."""
    return _get_default_analyzer().analyze(source_text)


def suggest_registrations(constructors: Iterable[ConstructorRecord], source_text: str) -> List[str]:
    """Suggest registrations with the process-wide analyzer's settings."""
    return _get_default_analyzer().suggest_registrations(constructors, source_text)
