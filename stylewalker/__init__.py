from stylewalker.analyzer import Analyzer, RuleOutcome, analyze, analyze_many
from stylewalker.base_rule import BaseRule
from stylewalker.errors import ConfigError, DuplicateRuleId, ParseSourceError, StyleWalkerError
from stylewalker.findings import AnalysisResult, Finding, Severity
from stylewalker.reporter import format_result, to_payload
from stylewalker.rule_set import RuleSet
from stylewalker.syntax import Location, NodeKind, SyntaxNode

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "Analyzer",
    "BaseRule",
    "ConfigError",
    "DuplicateRuleId",
    "Finding",
    "Location",
    "NodeKind",
    "ParseSourceError",
    "RuleOutcome",
    "RuleSet",
    "Severity",
    "StyleWalkerError",
    "SyntaxNode",
    "analyze",
    "analyze_many",
    "format_result",
    "to_payload",
]
