from stylewalker.base_rule import BaseRule
from stylewalker.syntax import FUNCTION_KINDS, LOOP_KINDS, NodeKind


class MaxNestingDepthRule(BaseRule):
    """
    Warns when conditionals and loops inside a function body are nested
    deeper than ``limit``.

    An else-if does not open a new level, and nested functions are left
    to their own evaluation.
    """

    rule_id = "MaxNestingDepth"
    applies_to = FUNCTION_KINDS

    _NESTING_KINDS = LOOP_KINDS | {NodeKind.IF_STATEMENT, NodeKind.SWITCH_STATEMENT}

    def __init__(self, limit=3, **kwargs):
        super().__init__(**kwargs)
        if int(limit) < 0:
            raise ValueError("limit must be >= 0")
        self.limit = int(limit)

    def _is_else_if(self, node):
        if node.kind != NodeKind.IF_STATEMENT or node.role != "alternate":
            return False
        parent = node.parent
        return parent is not None and parent.kind == NodeKind.IF_STATEMENT

    def _max_depth(self, body):
        deepest = 0
        stack = [(child, 0) for child in body.children]
        while stack:
            node, depth = stack.pop()
            if node.kind in FUNCTION_KINDS:
                continue
            if node.kind in self._NESTING_KINDS and not self._is_else_if(node):
                depth += 1
                deepest = max(deepest, depth)
            stack.extend((child, depth) for child in node.children)
        return deepest

    def evaluate(self, node, ancestors):
        body = node.child("body")
        if body is None:
            return []

        depth = self._max_depth(body)
        if depth <= self.limit:
            return []

        name = node.name or "anonymous function"
        return [
            self.finding(
                node,
                f"Function '{name}' nests conditionals/loops {depth} levels deep "
                f"(limit is {self.limit}); flatten it with guard clauses or helper functions.",
            )
        ]
