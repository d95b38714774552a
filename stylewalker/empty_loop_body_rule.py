from stylewalker.base_rule import BaseRule
from stylewalker.syntax import LOOP_KINDS, NodeKind


class EmptyLoopBodyRule(BaseRule):
    """
    Warns when a loop body is empty (e.g., while (...); or for (...) { }).
    """

    rule_id = "EmptyLoopBody"
    applies_to = LOOP_KINDS

    _LABELS = {
        NodeKind.FOR_STATEMENT: "for-loop",
        NodeKind.WHILE_STATEMENT: "while-loop",
        NodeKind.DO_WHILE_STATEMENT: "do-while loop",
    }

    def _is_empty(self, body):
        if body.kind == NodeKind.BLOCK:
            return not body.children
        return bool(body.attributes.get("empty"))

    def evaluate(self, node, ancestors):
        body = node.child("body")
        if body is None or not self._is_empty(body):
            return []

        label = self._LABELS[node.kind]
        return [self.finding(node, f"Empty {label} body; remove the loop or give it a body.")]
