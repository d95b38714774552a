import weakref
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class NodeKind(Enum):
    PROGRAM = "Program"
    BLOCK = "Block"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    METHOD_DECLARATION = "MethodDeclaration"
    CLASS_DECLARATION = "ClassDeclaration"
    FIELD_DECLARATION = "FieldDeclaration"
    PARAMETER = "Parameter"
    VARIABLE_DECLARATION = "VariableDeclaration"
    IF_STATEMENT = "IfStatement"
    FOR_STATEMENT = "ForStatement"
    WHILE_STATEMENT = "WhileStatement"
    DO_WHILE_STATEMENT = "DoWhileStatement"
    SWITCH_STATEMENT = "SwitchStatement"
    RETURN_STATEMENT = "ReturnStatement"
    CALL_EXPRESSION = "CallExpression"
    OTHER = "Other"


FUNCTION_KINDS = frozenset(
    {
        NodeKind.FUNCTION_DECLARATION,
        NodeKind.FUNCTION_EXPRESSION,
        NodeKind.METHOD_DECLARATION,
    }
)

LOOP_KINDS = frozenset(
    {
        NodeKind.FOR_STATEMENT,
        NodeKind.WHILE_STATEMENT,
        NodeKind.DO_WHILE_STATEMENT,
    }
)


@dataclass(frozen=True, order=True)
class Location:
    line: int
    column: int

    def __str__(self):
        return f"{self.line}:{self.column}"


class SyntaxNode:
    """
    One node of an analyzed source tree.

    Nodes are built by a front end and then treated as read-only. The
    parent link is a weak reference so a subtree never keeps its root
    alive; children are attached with add_child(), which also sets the
    parent, so a node ends up with exactly one parent.
    """

    __slots__ = ("kind", "location", "name", "role", "attributes", "_children", "_parent", "__weakref__")

    def __init__(self, kind, location, *, name=None, role=None, attributes=None):
        if not isinstance(location, Location):
            location = Location(*location)
        self.kind = kind
        self.location = location
        self.name = name
        self.role = role
        self.attributes = MappingProxyType(dict(attributes or {}))
        self._children = []
        self._parent = None

    @property
    def children(self) -> tuple:
        return tuple(self._children)

    @property
    def parent(self):
        if self._parent is None:
            return None
        return self._parent()

    def add_child(self, child, role=None):
        if child._parent is not None:
            raise ValueError(f"{child!r} already has a parent")
        if role is not None:
            child.role = role
        child._parent = weakref.ref(self)
        self._children.append(child)
        return child

    def child(self, role):
        """Return the first child attached under ``role``, or None."""
        for node in self._children:
            if node.role == role:
                return node
        return None

    def children_with_role(self, role) -> tuple:
        return tuple(node for node in self._children if node.role == role)

    def ancestors(self) -> tuple:
        chain = []
        cur = self.parent
        while cur is not None:
            chain.append(cur)
            cur = cur.parent
        return tuple(chain)

    def iter_preorder(self):
        """
        Yield ``(node, ancestors)`` pairs in pre-order.

        ``ancestors`` is a tuple ordered innermost first. The walk uses an
        explicit stack, so very deep trees (long else-if chains) do not hit
        the recursion limit.
        """
        stack = [(self, ())]
        while stack:
            node, ancestors = stack.pop()
            yield node, ancestors
            inner = (node,) + ancestors
            for child in reversed(node._children):
                stack.append((child, inner))

    def __repr__(self):
        label = f" {self.name!r}" if self.name else ""
        return f"<SyntaxNode {self.kind.value}{label} at {self.location}>"


def function_body(node):
    """Return the body block of a function-like node, if it has one."""
    body = node.child("body")
    if body is not None and body.kind == NodeKind.BLOCK:
        return body
    return None


def parameters(node) -> tuple:
    return node.children_with_role("params")
