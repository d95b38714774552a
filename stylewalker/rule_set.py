from stylewalker.errors import DuplicateRuleId


class RuleSet:
    """
    Ordered, id-deduplicated collection of rules.

    rules_for() answers in registration order, which keeps analysis
    output reproducible.
    """

    def __init__(self, rules=()):
        self._rules = {}
        self._by_kind = {}
        for rule in rules:
            self.register(rule)

    def register(self, rule):
        if rule.id in self._rules:
            raise DuplicateRuleId(rule.id)

        self._rules[rule.id] = rule
        for kind in rule.applies_to:
            self._by_kind.setdefault(kind, []).append(rule)
        return rule

    def rules_for(self, kind) -> tuple:
        return tuple(self._by_kind.get(kind, ()))

    def get(self, rule_id):
        return self._rules.get(rule_id)

    @property
    def ids(self) -> tuple:
        return tuple(self._rules)

    def __contains__(self, rule_id):
        return rule_id in self._rules

    def __iter__(self):
        return iter(tuple(self._rules.values()))

    def __len__(self):
        return len(self._rules)

    def __repr__(self):
        return f"<RuleSet {list(self._rules)}>"
