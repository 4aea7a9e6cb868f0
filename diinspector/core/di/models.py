"""Data contracts for the dependency-injection checks.

All issue and result types produced by an analysis call. Plain dataclasses,
rebuilt from scratch on every call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..ast_parser.models import ConstructorRecord


class IssueKind(Enum):
    """Tag of an Issue variant."""
    CONCRETE_TYPE = "concrete_type"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_REGISTRATION = "missing_registration"


@dataclass
class ConcreteTypeIssue:
    """Constructor parameter typed as a class declared in the same unit."""
    class_name: str
    param_type: str
    param_name: str
    start_byte: int
    end_byte: int
    kind: IssueKind = field(default=IssueKind.CONCRETE_TYPE, init=False)


@dataclass
class CircularDependencyIssue:
    """Constructor dependency loop, e.g. ["A", "B", "A"]."""
    cycle: List[str]
    kind: IssueKind = field(default=IssueKind.CIRCULAR_DEPENDENCY, init=False)

    @property
    def members(self) -> List[str]:
        """Participants without the repeated closing name."""
        return self.cycle[:-1]


@dataclass
class MissingRegistrationIssue:
    """Constructor parameter with no Add*<T>() registration in the same file."""
    class_name: str
    param_type: str
    param_name: str
    start_byte: int
    end_byte: int
    kind: IssueKind = field(default=IssueKind.MISSING_REGISTRATION, init=False)


@dataclass
class Registration:
    """A registration call found in source, e.g. services.AddScoped<IFoo, Foo>()."""
    method: str  # "AddScoped"
    service_type: str  # "IFoo"
    implementation_type: Optional[str]  # "Foo", None for AddTransient<Foo>()
    start: int  # character offsets into the source text
    end: int


@dataclass
class RegistrationEdit:
    """A pure text insertion at a character offset."""
    offset: int
    text: str


@dataclass
class AnalysisResult:
    """Complete output of one analysis call."""
    constructors: List[ConstructorRecord] = field(default_factory=list)
    parse_warnings: List[str] = field(default_factory=list)
    concrete_type_issues: List[ConcreteTypeIssue] = field(default_factory=list)
    circular_dependency_issues: List[CircularDependencyIssue] = field(default_factory=list)
    missing_registration_issues: List[MissingRegistrationIssue] = field(default_factory=list)
    dependency_graph: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def has_issues(self) -> bool:
        return bool(
            self.concrete_type_issues
            or self.circular_dependency_issues
            or self.missing_registration_issues
        )
