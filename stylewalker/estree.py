"""
ESTree front end.

Converts ESTree JSON (acorn, espree or babel output with ``locations``
enabled) into SyntaxNode trees.
"""

import json
import logging
from collections import deque
from pathlib import Path

from stylewalker.errors import ParseSourceError
from stylewalker.syntax import FUNCTION_KINDS, Location, NodeKind, SyntaxNode


logger = logging.getLogger(__name__)

_KIND_MAP = {
    "Program": NodeKind.PROGRAM,
    "BlockStatement": NodeKind.BLOCK,
    "StaticBlock": NodeKind.BLOCK,
    "ClassBody": NodeKind.BLOCK,
    "FunctionDeclaration": NodeKind.FUNCTION_DECLARATION,
    "FunctionExpression": NodeKind.FUNCTION_EXPRESSION,
    "ArrowFunctionExpression": NodeKind.FUNCTION_EXPRESSION,
    "ClassDeclaration": NodeKind.CLASS_DECLARATION,
    "ClassExpression": NodeKind.CLASS_DECLARATION,
    "PropertyDefinition": NodeKind.FIELD_DECLARATION,
    "ClassProperty": NodeKind.FIELD_DECLARATION,
    "ClassPrivateProperty": NodeKind.FIELD_DECLARATION,
    "IfStatement": NodeKind.IF_STATEMENT,
    "ForStatement": NodeKind.FOR_STATEMENT,
    "ForInStatement": NodeKind.FOR_STATEMENT,
    "ForOfStatement": NodeKind.FOR_STATEMENT,
    "WhileStatement": NodeKind.WHILE_STATEMENT,
    "DoWhileStatement": NodeKind.DO_WHILE_STATEMENT,
    "SwitchStatement": NodeKind.SWITCH_STATEMENT,
    "ReturnStatement": NodeKind.RETURN_STATEMENT,
    "CallExpression": NodeKind.CALL_EXPRESSION,
}

_SKIP_KEYS = {
    "type",
    "loc",
    "range",
    "start",
    "end",
    "extra",
    "comments",
    "tokens",
    "leadingComments",
    "trailingComments",
    "innerComments",
}


def _location(data, fallback):
    loc = data.get("loc")
    if isinstance(loc, dict) and isinstance(loc.get("start"), dict):
        start = loc["start"]
        line = start.get("line")
        column = start.get("column")
        if isinstance(line, int) and isinstance(column, int):
            return Location(line, column + 1)
    return fallback


def _is_node(value):
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def _key_name(key):
    if not _is_node(key):
        return None
    if key["type"] == "Identifier":
        return key.get("name")
    if key["type"] == "PrivateIdentifier" or key["type"] == "PrivateName":
        inner = key.get("id") if key["type"] == "PrivateName" else key
        if not _is_node(inner) or not isinstance(inner.get("name"), str):
            return None
        return "#" + inner["name"]
    if key["type"] in ("Literal", "StringLiteral") and isinstance(key.get("value"), str):
        return key["value"]
    return None


def _pattern_name(pattern):
    if not _is_node(pattern):
        return None
    kind = pattern["type"]
    if kind == "Identifier":
        return pattern.get("name")
    if kind == "AssignmentPattern":
        return _pattern_name(pattern.get("left"))
    if kind == "RestElement":
        return _pattern_name(pattern.get("argument"))
    return None


def _callee_name(callee):
    if not _is_node(callee):
        return None
    if callee["type"] == "Identifier":
        return callee.get("name")
    if callee["type"] in ("MemberExpression", "OptionalMemberExpression") and not callee.get("computed"):
        return _key_name(callee.get("property"))
    return None


class _Converter:
    """
    Builds the SyntaxNode tree breadth-first from a queue of pending
    (parent, role, data, build) entries. Stack depth stays constant however
    deeply the document nests (long else-if chains, nested callbacks).
    """

    def __init__(self):
        self.unknown_types = set()
        self.pending = deque()

    def run(self, document, fallback):
        roots = self.convert(document, fallback)
        while self.pending:
            parent, role, data, build = self.pending.popleft()
            for child in build(data, parent.location):
                parent.add_child(child, role=role)
        return roots

    def convert(self, data, fallback):
        kind_name = data["type"]

        if kind_name == "VariableDeclaration":
            return self._variable_declarations(data, fallback)
        if kind_name == "MethodDefinition":
            return [self._method(data, fallback)]

        location = _location(data, fallback)
        kind = _KIND_MAP.get(kind_name, NodeKind.OTHER)
        attributes = {}
        name = None
        skip = set()

        if kind == NodeKind.OTHER:
            attributes["source_kind"] = kind_name
            if kind_name == "EmptyStatement":
                attributes["empty"] = True
            elif kind_name == "Identifier":
                name = data.get("name")
            elif kind_name not in self.unknown_types:
                self.unknown_types.add(kind_name)
                logger.debug("Mapping ESTree type %s to Other", kind_name)
        elif kind in FUNCTION_KINDS or kind == NodeKind.CLASS_DECLARATION:
            name = _pattern_name(data.get("id"))
            skip.add("id")
            if kind_name == "ArrowFunctionExpression":
                attributes["arrow"] = True
        elif kind == NodeKind.FIELD_DECLARATION:
            name = _key_name(data.get("key"))
            skip.add("key")
            attributes["static"] = bool(data.get("static"))
        elif kind == NodeKind.CALL_EXPRESSION:
            name = _callee_name(data.get("callee"))

        node = SyntaxNode(kind, location, name=name, attributes=attributes)
        self._queue_fields(node, data, skip=skip)
        return [node]

    def _queue_fields(self, node, data, skip=()):
        for key, value in data.items():
            if key in _SKIP_KEYS or key in skip:
                continue
            if key == "params" and node.kind in FUNCTION_KINDS and isinstance(value, list):
                for param in value:
                    if _is_node(param):
                        self.pending.append((node, "params", param, self._parameter))
                continue
            if _is_node(value):
                self.pending.append((node, key, value, self.convert))
            elif isinstance(value, list):
                for item in value:
                    if _is_node(item):
                        self.pending.append((node, key, item, self.convert))

    def _parameter(self, data, fallback):
        node = SyntaxNode(
            NodeKind.PARAMETER,
            _location(data, fallback),
            name=_pattern_name(data),
            attributes={"source_kind": data["type"]},
        )
        if data["type"] == "AssignmentPattern" and _is_node(data.get("right")):
            self.pending.append((node, "default", data["right"], self.convert))
        return [node]

    def _variable_declarations(self, data, fallback):
        location = _location(data, fallback)
        binding = data.get("kind", "var")
        nodes = []
        for declarator in data.get("declarations") or []:
            if not _is_node(declarator):
                continue
            node = SyntaxNode(
                NodeKind.VARIABLE_DECLARATION,
                location,
                name=_pattern_name(declarator.get("id")),
                attributes={"binding": binding},
            )
            init = declarator.get("init")
            if _is_node(init):
                self.pending.append((node, "init", init, self.convert))
            nodes.append(node)
        return nodes

    def _method(self, data, fallback):
        method_kind = data.get("kind", "method")
        node = SyntaxNode(
            NodeKind.METHOD_DECLARATION,
            _location(data, fallback),
            name=_key_name(data.get("key")),
            attributes={
                "method_kind": method_kind,
                "static": bool(data.get("static")),
                "special": method_kind == "constructor",
            },
        )
        value = data.get("value")
        if _is_node(value):
            self._queue_fields(node, value, skip={"id"})
        return node


def from_estree(document) -> SyntaxNode:
    """Convert a parsed ESTree document (a dict) into a SyntaxNode tree."""
    if not _is_node(document):
        raise ParseSourceError("ESTree document must be an object with a 'type' field")
    if document["type"] == "File" and _is_node(document.get("program")):
        document = document["program"]

    nodes = _Converter().run(document, Location(1, 1))
    if len(nodes) != 1:
        raise ParseSourceError(f"ESTree root of type {document['type']} does not map to a single node")
    return nodes[0]


def load_estree(path) -> SyntaxNode:
    source = Path(path)
    if not source.is_file():
        raise ParseSourceError(f"Input file does not exist: {source}")
    try:
        document = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseSourceError(f"Could not read ESTree JSON from {source}: {exc}") from exc
    except RecursionError as exc:
        raise ParseSourceError(f"ESTree JSON in {source} is nested too deeply to decode") from exc
    return from_estree(document)
