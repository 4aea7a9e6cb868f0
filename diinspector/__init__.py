"""diinspector — constructor-injection analysis for C# sources."""

from .core.di import AnalysisResult, DependencyAnalyzer, analyze, suggest_registrations

__version__ = "0.1.0"

__all__ = ["AnalysisResult", "DependencyAnalyzer", "analyze", "suggest_registrations"]
