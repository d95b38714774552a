from stylewalker.base_rule import BaseRule
from stylewalker.syntax import FUNCTION_KINDS, NodeKind, function_body


class GuardClausePreferredRule(BaseRule):
    """
    Warns when a function body is a single if/else that wraps everything.

    Such a body can usually be rewritten as an early return for the short
    branch followed by the main logic at the top level.
    """

    rule_id = "GuardClausePreferred"
    applies_to = FUNCTION_KINDS

    def evaluate(self, node, ancestors):
        body = function_body(node)
        if body is None:
            return []

        statements = body.children
        if len(statements) != 1:
            return []

        first = statements[0]
        if first.kind != NodeKind.IF_STATEMENT or first.child("alternate") is None:
            return []

        name = node.name or "anonymous function"
        return [
            self.finding(
                first,
                f"The body of '{name}' is wrapped in a single if/else; "
                "return early from the short branch instead (guard clause).",
            )
        ]
