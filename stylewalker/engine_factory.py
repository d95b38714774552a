from stylewalker.config import RULE_GROUPS, StyleConfig
from stylewalker.empty_loop_body_rule import EmptyLoopBodyRule
from stylewalker.guard_clause_rule import GuardClausePreferredRule
from stylewalker.max_nesting_depth_rule import MaxNestingDepthRule
from stylewalker.max_parameters_rule import MaxParametersRule
from stylewalker.naming_convention_rule import DEFAULT_PATTERNS, NamingConventionRule
from stylewalker.no_var_declaration_rule import NoVarDeclarationRule
from stylewalker.rule_set import RuleSet


def _naming_rule(options):
    patterns = dict(DEFAULT_PATTERNS)
    for kind, source in options.pop("patterns", {}).items():
        if source is None:
            patterns.pop(kind, None)
        else:
            patterns[kind] = source
    return NamingConventionRule(patterns, **options)


_FACTORIES = {
    "MaxNestingDepth": lambda options: MaxNestingDepthRule(**options),
    "GuardClausePreferred": lambda options: GuardClausePreferredRule(**options),
    "MaxParameters": lambda options: MaxParametersRule(**options),
    "NoVarDeclaration": lambda options: NoVarDeclarationRule(**options),
    "NamingConvention": _naming_rule,
    "EmptyLoopBody": lambda options: EmptyLoopBodyRule(**options),
}

# registration order, which is also the order findings on one node come out in
_GROUP_ORDER = ("structure", "declarations", "naming", "loops")


def build_rule_set(config=None, groups=None):
    """
    Build the RuleSet for the enabled groups of ``config``.

    ``groups`` overrides the configured groups (e.g. from the command line).
    """
    config = config or StyleConfig()
    enabled_groups = config.groups if groups is None else frozenset(groups)

    rules = []
    for group in _GROUP_ORDER:
        if group not in enabled_groups:
            continue
        for rule_id in RULE_GROUPS[group]:
            if not config.is_enabled(rule_id):
                continue
            options = config.options(rule_id)
            options.pop("enabled", None)
            rules.append(_FACTORIES[rule_id](options))

    return RuleSet(rules)
