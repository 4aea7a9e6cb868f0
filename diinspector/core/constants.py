"""Shared constants for diinspector.

Node kinds of the tree-sitter C# grammar, sentinels, and the regex
patterns behind the registration heuristics. Kept in one module so the
parser layer and the DI checks agree on names.
"""

import re

# =============================================================================
# Tree-sitter node kinds
# =============================================================================

CLASS_DECLARATION = "class_declaration"
INTERFACE_DECLARATION = "interface_declaration"
CONSTRUCTOR_DECLARATION = "constructor_declaration"
PARAMETER_LIST = "parameter_list"

# Older grammars emit `params T[] xs` as a separate node kind
PARAMETER_KINDS = frozenset({"parameter", "parameter_array"})

# Declarations that own constructors; used to find the nearest owner
TYPE_DECLARATIONS = frozenset({
    "class_declaration",
    "struct_declaration",
    "record_declaration",
    "record_struct_declaration",
    "interface_declaration",
})

# Child kinds accepted as a parameter type when there is no `type` field
TYPE_NODE_KINDS = frozenset({
    "identifier",
    "generic_name",
    "nullable_type",
    "predefined_type",
})
TYPE_NODE_KINDS_BEFORE_NAME = TYPE_NODE_KINDS | {"array_type"}

# =============================================================================
# Sentinels and messages
# =============================================================================

UNKNOWN_TYPE = "unknown"

PARSE_ERROR_WARNING = "Parse had syntax errors; analysis may be incomplete."

# C# keyword types; never registered in a container
PREDEFINED_TYPES = (
    "bool", "byte", "sbyte", "char", "decimal", "double", "float",
    "int", "uint", "long", "ulong", "short", "ushort", "nint", "nuint",
    "object", "string", "dynamic",
)

# =============================================================================
# Registration heuristics
# =============================================================================

# services.AddScoped<IFoo, Foo>() / services.AddTransient<Foo>()
REGISTRATION_RE = re.compile(
    r"\b(?P<method>Add\w*)\s*<\s*(?P<service>[\w.]+)\s*"
    r"(?:,\s*(?P<implementation>[\w.]+)\s*)?>\s*\("
)

# class Foo<T>(IBar bar) : Base, IFoo<T> where T : class
CLASS_BASES_RE = re.compile(
    r"\bclass\s+(?P<name>\w+)\s*(?:<[^>{]*>)?\s*(?:\((?:[^()]|\([^()]*\))*\))?\s*"
    r"(?::\s*(?P<bases>[^{\r\n;]+))?"
)
WHERE_CLAUSE_RE = re.compile(r"\bwhere\b.*$")
GENERIC_ARGS_RE = re.compile(r"<[^<>]*>")

# IFoo, IRepository: "I" followed by an uppercase letter
INTERFACE_NAME_RE = re.compile(r"^I[A-Z]")

# string?, int[], byte[,], IFoo?[]: nullable marker and array ranks
TYPE_SUFFIX_RE = re.compile(r"(?:\s*\?|\s*\[[\s,]*\])+$")

# =============================================================================
# Quick-fix defaults
# =============================================================================

DEFAULT_CONFIGURE_SIGNATURE = "ConfigureServices(IServiceCollection services)"
DEFAULT_FIX_TEMPLATE = "\n            {collection}.AddTransient<{type_name}>();"
DEFAULT_COLLECTION_NAME = "services"
DEFAULT_INTERFACE_LIFETIME = "Scoped"
DEFAULT_SELF_LIFETIME = "Transient"
