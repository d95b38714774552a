import re

from stylewalker.base_rule import BaseRule
from stylewalker.syntax import NodeKind


UPPER_CAMEL_CASE = r"[A-Z][A-Za-z0-9]*"
LOWER_CAMEL_CASE = r"_?[a-z][A-Za-z0-9]*"
UPPER_SNAKE_CASE = r"[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*"

_STYLE_NAMES = {
    UPPER_CAMEL_CASE: "UpperCamelCase",
    LOWER_CAMEL_CASE: "lowerCamelCase",
    f"{LOWER_CAMEL_CASE}|{UPPER_CAMEL_CASE}": "camelCase",
    f"{LOWER_CAMEL_CASE}|{UPPER_SNAKE_CASE}": "lowerCamelCase or UPPER_SNAKE_CASE",
    r"[_#]?[a-z][A-Za-z0-9]*": "lowerCamelCase",
}

DEFAULT_PATTERNS = {
    NodeKind.CLASS_DECLARATION: UPPER_CAMEL_CASE,
    NodeKind.FUNCTION_DECLARATION: f"{LOWER_CAMEL_CASE}|{UPPER_CAMEL_CASE}",
    NodeKind.METHOD_DECLARATION: LOWER_CAMEL_CASE,
    NodeKind.PARAMETER: LOWER_CAMEL_CASE,
    NodeKind.VARIABLE_DECLARATION: f"{LOWER_CAMEL_CASE}|{UPPER_SNAKE_CASE}",
    NodeKind.FIELD_DECLARATION: r"[_#]?[a-z][A-Za-z0-9]*",
}

_KIND_LABELS = {
    NodeKind.CLASS_DECLARATION: "Class",
    NodeKind.FUNCTION_DECLARATION: "Function",
    NodeKind.METHOD_DECLARATION: "Method",
    NodeKind.PARAMETER: "Parameter",
    NodeKind.VARIABLE_DECLARATION: "Variable",
    NodeKind.FIELD_DECLARATION: "Field",
}

# variables bound to a function or class expression are named like one
_VALUE_PATTERN_KINDS = {
    NodeKind.FUNCTION_EXPRESSION: NodeKind.FUNCTION_DECLARATION,
    NodeKind.CLASS_DECLARATION: NodeKind.CLASS_DECLARATION,
}


class NamingConventionRule(BaseRule):
    """
    Checks declaration names against the casing pattern of their kind.

    ``kind_to_pattern`` maps a NodeKind to a regular expression that must
    match the whole name. Kinds without a pattern are not checked.
    """

    rule_id = "NamingConvention"

    def __init__(self, kind_to_pattern=None, **kwargs):
        super().__init__(**kwargs)
        patterns = dict(DEFAULT_PATTERNS if kind_to_pattern is None else kind_to_pattern)
        self.patterns = {kind: (source, re.compile(source)) for kind, source in patterns.items()}
        self.applies_to = frozenset(self.patterns)

    def _style_name(self, source):
        return _STYLE_NAMES.get(source, f"the pattern /{source}/")

    def _pattern_kind(self, node):
        if node.kind == NodeKind.VARIABLE_DECLARATION:
            init = node.child("init")
            value_kind = _VALUE_PATTERN_KINDS.get(init.kind) if init is not None else None
            if value_kind in self.patterns:
                return value_kind
        return node.kind

    def evaluate(self, node, ancestors):
        name = node.name
        if not name or node.attributes.get("special"):
            return []

        entry = self.patterns.get(self._pattern_kind(node))
        if entry is None:
            return []

        source, pattern = entry
        if pattern.fullmatch(name):
            return []

        label = _KIND_LABELS.get(node.kind, node.kind.value)
        return [self.finding(node, f"{label} name '{name}' should be {self._style_name(source)}.")]
