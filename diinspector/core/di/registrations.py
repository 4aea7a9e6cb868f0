"""Registration heuristics.

Everything here works on raw source text with regular expressions, not on
the syntax tree:

- finding Add*<T>() / Add*<T, U>() registration calls,
- pairing classes with the I-prefixed interfaces in their base list,
- suggesting registrations, and
- building the quick-fix insertion inside ConfigureServices.

These are best-effort, single-file guesses. The graph and cycle checks do
not depend on this module.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from ..ast_parser.models import ConstructorRecord
from ..constants import (
    CLASS_BASES_RE,
    GENERIC_ARGS_RE,
    INTERFACE_NAME_RE,
    REGISTRATION_RE,
    WHERE_CLAUSE_RE,
)
from ...setting import RegistrationSettings
from .models import Registration, RegistrationEdit

logger = logging.getLogger(__name__)


def find_registrations(source_text: str) -> List[Registration]:
    """Find Add*<Service>() and Add*<Service, Implementation>() calls."""
    registrations = []
    for match in REGISTRATION_RE.finditer(source_text):
        registrations.append(Registration(
            method=match.group("method"),
            service_type=match.group("service"),
            implementation_type=match.group("implementation"),
            start=match.start(),
            end=match.end(),
        ))
    return registrations


def registered_types(source_text: str) -> Set[str]:
    """Service types registered in the text, both bare and qualified forms.

    `Add*<Ns.IFoo, Foo>()` registers "Ns.IFoo" and "IFoo".
    """
    types: Set[str] = set()
    for registration in find_registrations(source_text):
        types.add(registration.service_type)
        types.add(registration.service_type.split(".")[-1])
    return types


def _strip_generics(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = GENERIC_ARGS_RE.sub("", text)
    return text


def find_interface_implementations(source_text: str) -> Dict[str, Set[str]]:
    """Map each I-prefixed base name to the classes that list it.

    `class Repo<T> : BaseRepo<T>, IRepo<T> where T : class` records
    IRepo -> {Repo}.
    """
    interface_to_impl: Dict[str, Set[str]] = {}
    for match in CLASS_BASES_RE.finditer(source_text):
        bases = match.group("bases")
        if not bases:
            continue
        impl_name = match.group("name")
        bases = WHERE_CLAUSE_RE.sub("", _strip_generics(bases))
        for raw_base in bases.split(","):
            base_name = raw_base.strip().split(".")[-1]
            if INTERFACE_NAME_RE.match(base_name):
                interface_to_impl.setdefault(base_name, set()).add(impl_name)
    return interface_to_impl


def build_registration_suggestions(
    constructors: Iterable[ConstructorRecord],
    source_text: str,
    settings: Optional[RegistrationSettings] = None,
) -> List[str]:
    """Suggest container registrations for the unit.

    1. Every `class Impl : IFace` gets a scoped IFace -> Impl registration.
    2. Every other class owning a constructor gets a transient
       self-registration.

    Returns:
        De-duplicated statements in lexicographic order
    """
    settings = settings or RegistrationSettings()
    collection = settings.collection_name
    suggestions: Set[str] = set()

    interface_to_impl = find_interface_implementations(source_text)
    implementations: Set[str] = set()
    for iface, impls in interface_to_impl.items():
        for impl in impls:
            suggestions.add(f"{collection}.Add{settings.interface_lifetime}<{iface}, {impl}>();")
            implementations.add(impl)

    for ctor in constructors:
        if not ctor.class_name or ctor.class_name in implementations:
            continue
        suggestions.add(f"{collection}.Add{settings.self_lifetime}<{ctor.class_name}>();")

    return sorted(suggestions)


def create_registration_edit(
    source_text: str,
    type_name: str,
    settings: Optional[RegistrationSettings] = None,
) -> Optional[RegistrationEdit]:
    """Build the insertion that registers type_name in ConfigureServices.

    The statement goes right after the opening brace that follows the
    configured method signature.

    Returns:
        RegistrationEdit, or None when the signature or brace is missing
    """
    settings = settings or RegistrationSettings()
    signature = settings.configure_signature
    sig_index = source_text.find(signature)
    if sig_index == -1:
        logger.debug(f"Signature {signature!r} not found; no edit for {type_name}")
        return None
    brace_index = source_text.find("{", sig_index + len(signature))
    if brace_index == -1:
        return None

    text = settings.fix_template.format(
        collection=settings.collection_name,
        type_name=type_name,
    )
    return RegistrationEdit(offset=brace_index + 1, text=text)


def apply_edit(source_text: str, edit: RegistrationEdit) -> str:
    """Return source_text with the edit applied."""
    return source_text[:edit.offset] + edit.text + source_text[edit.offset:]
