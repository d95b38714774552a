from stylewalker.base_rule import BaseRule
from stylewalker.syntax import FUNCTION_KINDS, parameters


class MaxParametersRule(BaseRule):
    """
    Warns when a function takes more than ``limit`` parameters.
    """

    rule_id = "MaxParameters"
    applies_to = FUNCTION_KINDS

    def __init__(self, limit=3, **kwargs):
        super().__init__(**kwargs)
        if int(limit) < 0:
            raise ValueError("limit must be >= 0")
        self.limit = int(limit)

    def evaluate(self, node, ancestors):
        count = len(parameters(node))
        if count <= self.limit:
            return []

        name = node.name or "anonymous function"
        return [
            self.finding(
                node,
                f"Function '{name}' takes {count} parameters (limit is {self.limit}); "
                "group related arguments into an object.",
            )
        ]
