from stylewalker.base_rule import BaseRule
from stylewalker.syntax import NodeKind


class NoVarDeclarationRule(BaseRule):
    """
    Flags every variable declared with the non-block-scoped ``var`` form.
    """

    rule_id = "NoVarDeclaration"
    applies_to = frozenset({NodeKind.VARIABLE_DECLARATION})

    def evaluate(self, node, ancestors):
        if node.attributes.get("binding") != "var":
            return []

        if node.name:
            message = f"Variable '{node.name}' is not block-scoped ('var'); declare it with 'let' or 'const' in the narrowest scope."
        else:
            message = "Variable is not block-scoped ('var'); declare it with 'let' or 'const' in the narrowest scope."
        return [self.finding(node, message)]
