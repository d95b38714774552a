class StyleWalkerError(Exception):
    pass


class DuplicateRuleId(StyleWalkerError, ValueError):
    def __init__(self, rule_id):
        self.rule_id = rule_id
        super().__init__(f"A rule with id '{rule_id}' is already registered.")


class ConfigError(StyleWalkerError, ValueError):
    pass


class ParseSourceError(StyleWalkerError, RuntimeError):
    pass
