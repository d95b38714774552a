from stylewalker.syntax import Location, NodeKind, SyntaxNode


def node(kind, line=1, column=1, *, name=None, role=None, children=(), **attributes):
    result = SyntaxNode(kind, Location(line, column), name=name, role=role, attributes=attributes)
    for child in children:
        result.add_child(child)
    return result


def block(line, statements=(), role=None):
    return node(NodeKind.BLOCK, line, role=role, children=statements)


def if_stmt(line, consequent=(), alternate=None, role=None, column=1):
    children = [
        node(NodeKind.OTHER, line, column + 4, role="test", source_kind="Identifier"),
        block(line, consequent, role="consequent"),
    ]
    if alternate is not None:
        alternate.role = "alternate"
        children.append(alternate)
    return node(NodeKind.IF_STATEMENT, line, column, role=role, children=children)


def function(name, line=1, body=(), params=(), kind=NodeKind.FUNCTION_DECLARATION, column=1):
    children = [node(NodeKind.PARAMETER, line, column + 10 + i, name=p, role="params") for i, p in enumerate(params)]
    children.append(block(line, body, role="body"))
    return node(kind, line, column, name=name, children=children)


def program(*statements):
    return node(NodeKind.PROGRAM, 1, 1, children=statements)


def nested_ifs(depth, first_line=2):
    """A chain of ``depth`` ifs, each inside the previous one's consequent."""
    inner = ()
    for level in reversed(range(depth)):
        inner = (if_stmt(first_line + level, consequent=inner, column=5 + 2 * level),)
    return inner[0]
