"""Diagnostics and plain-text reports for analysis results.

Turns byte spans into zero-based line/character positions and issues into
editor-style diagnostics. Also renders the text reports printed by the
command line.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from ..ast_parser.models import ConstructorRecord
from .models import AnalysisResult

DIAGNOSTIC_SOURCE = "di-inspector"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass
class Position:
    line: int  # zero-based
    character: int  # zero-based, in characters


@dataclass
class Diagnostic:
    severity: Severity
    message: str
    start: Position
    end: Position
    source: str = DIAGNOSTIC_SOURCE


class OffsetMapper:
    """Translate UTF-8 byte offsets into line/character positions."""

    def __init__(self, source_text: str):
        self._source = source_text.encode("utf-8", errors="replace")

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self._source)))
        line = self._source.count(b"\n", 0, offset)
        line_start = self._source.rfind(b"\n", 0, offset) + 1
        prefix = self._source[line_start:offset].decode("utf-8", errors="replace")
        return Position(line=line, character=len(prefix))

    def range_of(self, start: int, end: int) -> Tuple[Position, Position]:
        return self.position_at(start), self.position_at(end)


_ORIGIN = Position(line=0, character=0)


def build_diagnostics(result: AnalysisResult, source_text: str) -> List[Diagnostic]:
    """Map an AnalysisResult to diagnostics.

    Constructor listings are informational (a hint when there are no
    parameters); every issue kind and every parse warning is a warning.
    """
    mapper = OffsetMapper(source_text)
    diagnostics: List[Diagnostic] = []

    for ctor in result.constructors:
        start, end = mapper.range_of(ctor.start_byte, ctor.end_byte)
        if ctor.parameters:
            deps = ", ".join(f"{p.type} {{{p.name}}}" for p in ctor.parameters)
            diagnostics.append(Diagnostic(Severity.INFORMATION, f"Constructor dependencies: {deps}", start, end))
        else:
            diagnostics.append(Diagnostic(Severity.HINT, "Constructor has no dependencies.", start, end))

    for issue in result.concrete_type_issues:
        start, end = mapper.range_of(issue.start_byte, issue.end_byte)
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f'DI: Prefer interface over concrete type "{issue.param_type}".',
            start, end,
        ))

    for issue in result.circular_dependency_issues:
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"DI: Possible circular dependency: {' → '.join(issue.cycle)}",
            _ORIGIN, _ORIGIN,
        ))

    for issue in result.missing_registration_issues:
        start, end = mapper.range_of(issue.start_byte, issue.end_byte)
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"DI: No Add*(<{issue.param_type}, ...>) registration found in this file.",
            start, end,
        ))

    for warning in result.parse_warnings:
        diagnostics.append(Diagnostic(Severity.WARNING, warning, _ORIGIN, _ORIGIN))

    return diagnostics


def render_analysis_report(result: AnalysisResult, file_name: str) -> List[str]:
    """Render the analysis as report lines."""
    lines = [f"DI Analysis: {file_name}", ""]

    if result.parse_warnings:
        lines.append("Warnings:")
        lines.extend(f"  - {w}" for w in result.parse_warnings)
        lines.append("")

    if result.has_issues:
        lines.append("DI issues:")
        for issue in result.concrete_type_issues:
            lines.append(
                f"  - Concrete type: {issue.class_name}(...) has parameter "
                f"{issue.param_type} {issue.param_name}; prefer an interface."
            )
        for issue in result.circular_dependency_issues:
            lines.append(f"  - Circular dependency: {' → '.join(issue.cycle)}")
        for issue in result.missing_registration_issues:
            lines.append(
                f"  - Missing registration: {issue.param_type} required by {issue.class_name}(...) "
                f"has no Add*(<{issue.param_type}, ...>) call in this file."
            )
        lines.append("")

    if not result.constructors:
        lines.append("No constructors found.")
    else:
        lines.append("Constructors and dependencies:")
        for ctor in result.constructors:
            lines.append(f"  {ctor.class_name}(...)")
            lines.extend(f"    - {p.type} {p.name}" for p in ctor.parameters)

    return lines


def render_suggestions_report(
    constructors: Iterable[ConstructorRecord], suggestions: List[str], file_name: str
) -> List[str]:
    """Render registration suggestions as report lines."""
    lines = [f"DI Registration Suggestions: {file_name}", ""]
    if not list(constructors):
        lines.append("No constructors found to suggest registrations for.")
    elif not suggestions:
        lines.append("No registration suggestions generated.")
    else:
        lines.append("// Example DI registrations (adjust lifetime as needed):")
        lines.extend(f"  {s}" for s in suggestions)
    return lines
