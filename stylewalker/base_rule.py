from stylewalker.findings import Finding, Severity


class BaseRule:
    """
    A single mechanical style check.

    Subclasses set ``rule_id`` and ``applies_to`` and implement
    ``evaluate(node, ancestors)``. A rule must not mutate the tree and
    must return an empty sequence when it cannot decide.
    """

    rule_id = None
    applies_to = frozenset()
    default_severity = Severity.WARNING

    def __init__(self, *, rule_id=None, severity=None):
        self.id = rule_id or self.rule_id or type(self).__name__
        self.severity = Severity.parse(severity) if severity is not None else self.default_severity

    def matches(self, node) -> bool:
        return node.kind in self.applies_to

    def evaluate(self, node, ancestors):
        raise NotImplementedError("evaluate() must be implemented")

    def finding(self, node, message, location=None):
        return Finding(
            rule_id=self.id,
            message=message,
            location=location or node.location,
            severity=self.severity,
        )

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id!r}>"
