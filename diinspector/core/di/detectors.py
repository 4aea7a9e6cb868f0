"""Per-parameter DI heuristics.

Both detectors look at one unit only. They miss issues involving types
declared elsewhere; they must not flag a type declared here as an
interface.
"""

from typing import Collection, Iterable, List

from ..ast_parser.models import ConstructorRecord, DeclarationSets
from ..constants import TYPE_SUFFIX_RE, UNKNOWN_TYPE
from .models import ConcreteTypeIssue, MissingRegistrationIssue


def detect_concrete_types(
    constructors: Iterable[ConstructorRecord], declarations: DeclarationSets
) -> List[ConcreteTypeIssue]:
    """Flag parameters typed as a class (not an interface) declared in this unit."""
    issues: List[ConcreteTypeIssue] = []
    for ctor in constructors:
        for param in ctor.parameters:
            param_type = param.type
            if not param_type or param_type == UNKNOWN_TYPE:
                continue
            if param_type in declarations.classes and param_type not in declarations.interfaces:
                issues.append(ConcreteTypeIssue(
                    class_name=ctor.class_name,
                    param_type=param_type,
                    param_name=param.name,
                    start_byte=param.start_byte,
                    end_byte=param.end_byte,
                ))
    return issues


def detect_missing_registrations(
    constructors: Iterable[ConstructorRecord],
    registered: Collection[str],
    ignored_types: Collection[str] = (),
) -> List[MissingRegistrationIssue]:
    """Flag parameters whose type has no Add*<T>() call in this unit.

    Args:
        constructors: Extracted constructor records
        registered: Service types registered in the same text
        ignored_types: Types never reported (keywords such as int, string),
            also when nullable or an array
    """
    issues: List[MissingRegistrationIssue] = []
    for ctor in constructors:
        for param in ctor.parameters:
            param_type = param.type
            if param_type == UNKNOWN_TYPE:
                continue
            element_type = TYPE_SUFFIX_RE.sub("", param_type)
            if element_type in ignored_types or element_type in registered:
                continue
            issues.append(MissingRegistrationIssue(
                class_name=ctor.class_name,
                param_type=param_type,
                param_name=param.name,
                start_byte=param.start_byte,
                end_byte=param.end_byte,
            ))
    return issues
