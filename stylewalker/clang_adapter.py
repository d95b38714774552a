"""
libclang front end: parses C/C++ sources and converts the cursor tree of
the target file into SyntaxNode trees.
"""

import logging
import os
import subprocess
import sys
from collections import deque

from clang import cindex
from clang.cindex import CursorKind

from stylewalker.errors import ParseSourceError
from stylewalker.syntax import FUNCTION_KINDS, Location, NodeKind, SyntaxNode


logger = logging.getLogger(__name__)

C_EXTENSIONS = {".c"}
CPP_EXTENSIONS = {".cc", ".cpp", ".cxx", ".c++", ".h", ".hh", ".hpp", ".hxx"}

_LIBRARY_NAMES = ("libclang.so", "libclang.dylib", "libclang.dll")

_KIND_MAP = {
    CursorKind.TRANSLATION_UNIT: NodeKind.PROGRAM,
    CursorKind.COMPOUND_STMT: NodeKind.BLOCK,
    CursorKind.FUNCTION_DECL: NodeKind.FUNCTION_DECLARATION,
    CursorKind.FUNCTION_TEMPLATE: NodeKind.FUNCTION_DECLARATION,
    CursorKind.CXX_METHOD: NodeKind.METHOD_DECLARATION,
    CursorKind.CONSTRUCTOR: NodeKind.METHOD_DECLARATION,
    CursorKind.DESTRUCTOR: NodeKind.METHOD_DECLARATION,
    CursorKind.CONVERSION_FUNCTION: NodeKind.METHOD_DECLARATION,
    CursorKind.LAMBDA_EXPR: NodeKind.FUNCTION_EXPRESSION,
    CursorKind.CLASS_DECL: NodeKind.CLASS_DECLARATION,
    CursorKind.STRUCT_DECL: NodeKind.CLASS_DECLARATION,
    CursorKind.CLASS_TEMPLATE: NodeKind.CLASS_DECLARATION,
    CursorKind.FIELD_DECL: NodeKind.FIELD_DECLARATION,
    CursorKind.PARM_DECL: NodeKind.PARAMETER,
    CursorKind.VAR_DECL: NodeKind.VARIABLE_DECLARATION,
    CursorKind.IF_STMT: NodeKind.IF_STATEMENT,
    CursorKind.FOR_STMT: NodeKind.FOR_STATEMENT,
    CursorKind.CXX_FOR_RANGE_STMT: NodeKind.FOR_STATEMENT,
    CursorKind.WHILE_STMT: NodeKind.WHILE_STATEMENT,
    CursorKind.DO_STMT: NodeKind.DO_WHILE_STATEMENT,
    CursorKind.SWITCH_STMT: NodeKind.SWITCH_STATEMENT,
    CursorKind.RETURN_STMT: NodeKind.RETURN_STATEMENT,
    CursorKind.CALL_EXPR: NodeKind.CALL_EXPRESSION,
}

_FILE_SCOPE_KINDS = {CursorKind.TRANSLATION_UNIT, CursorKind.NAMESPACE}
_CLASS_SCOPE_KINDS = {CursorKind.CLASS_DECL, CursorKind.STRUCT_DECL, CursorKind.CLASS_TEMPLATE}
_SPECIAL_METHOD_KINDS = {CursorKind.CONSTRUCTOR, CursorKind.DESTRUCTOR, CursorKind.CONVERSION_FUNCTION}

_configured = False


def _find_libclang():
    env_path = os.environ.get("LIBCLANG_FILE") or os.environ.get("LIBCLANG_PATH")
    if env_path:
        if os.path.isdir(env_path):
            for name in _LIBRARY_NAMES:
                candidate = os.path.join(env_path, name)
                if os.path.exists(candidate):
                    return candidate
        if os.path.isfile(env_path):
            return env_path

    if getattr(sys, "frozen", False):
        base = getattr(sys, "_MEIPASS", None)
        if base:
            for name in _LIBRARY_NAMES:
                for candidate in (os.path.join(base, name), os.path.join(base, "lib", name)):
                    if os.path.exists(candidate):
                        return candidate

    if sys.platform == "darwin":
        for candidate in (
            "/opt/homebrew/opt/llvm/lib/libclang.dylib",
            "/usr/local/opt/llvm/lib/libclang.dylib",
        ):
            if os.path.exists(candidate):
                return candidate

    # the libclang wheel ships its own library and cindex finds it by default
    return None


def _configure_library():
    global _configured
    if _configured:
        return
    _configured = True

    library = _find_libclang()
    if library and not cindex.Config.loaded:
        logger.debug("Using libclang from %s", library)
        cindex.Config.set_library_file(library)


def clang_available() -> bool:
    _configure_library()
    try:
        cindex.Index.create()
    except cindex.LibclangError:
        return False
    return True


def _sdk_args():
    if sys.platform != "darwin":
        return []
    try:
        sdk_path = subprocess.check_output(
            ["xcrun", "--show-sdk-path"],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.CalledProcessError):
        return []
    if not sdk_path:
        return []
    return ["-isysroot", sdk_path, "-I", os.path.join(sdk_path, "usr/include/c++/v1")]


def _language_args(filename):
    ext = os.path.splitext(filename)[1].lower()
    if ext in C_EXTENSIONS:
        return ["-x", "c", "-std=gnu11"]
    return ["-x", "c++", "-std=gnu++17"]


def parse_source_file(filename, extra_args=None):
    if not os.path.exists(filename):
        raise ParseSourceError(f"Input file does not exist: {filename}")
    if not os.path.isfile(filename):
        raise ParseSourceError(f"Input path is not a file: {filename}")

    _configure_library()
    try:
        index = cindex.Index.create()
    except cindex.LibclangError as exc:
        raise ParseSourceError(f"libclang could not be loaded: {exc}") from exc

    args = _language_args(filename) + _sdk_args() + list(extra_args or [])
    options = cindex.TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD

    try:
        translation_unit = index.parse(filename, args=args, options=options)
    except cindex.TranslationUnitLoadError as exc:
        base = os.path.basename(filename)
        raise ParseSourceError(
            f"Could not parse '{base}'. "
            "This usually means severe syntax errors or missing headers/toolchain paths."
        ) from exc

    for diag in translation_unit.diagnostics:
        if diag.severity >= cindex.Diagnostic.Error:
            loc = diag.location
            logger.warning("%s:%s:%s: %s", _file_label(loc), loc.line, loc.column, diag.spelling)
    return translation_unit


def _file_label(location):
    return os.path.basename(location.file.name) if location.file else "<unknown>"


def _binding(cursor):
    if cursor.type.is_const_qualified():
        return "const"
    parent = cursor.semantic_parent
    if parent is not None and parent.kind in _FILE_SCOPE_KINDS:
        return "var"
    if cursor.storage_class == cindex.StorageClass.STATIC:
        return "var"
    return "let"


def _has_else(cursor, children):
    if len(children) < 3:
        return False
    then_end = children[-2].extent.end.offset
    else_start = children[-1].extent.start.offset
    for token in cursor.get_tokens():
        offset = token.extent.start.offset
        if token.spelling == "else" and then_end <= offset < else_start:
            return True
    return False


def _child_roles(cursor, kind, children):
    """Return one role (or None) per child cursor of ``cursor``."""
    roles = [None] * len(children)
    if not children:
        return roles

    if kind in FUNCTION_KINDS:
        for i, child in enumerate(children):
            if child.kind == CursorKind.PARM_DECL:
                roles[i] = "params"
            elif child.kind == CursorKind.COMPOUND_STMT:
                roles[i] = "body"
    elif kind == NodeKind.IF_STATEMENT:
        if _has_else(cursor, children):
            roles = ["test"] * (len(children) - 2) + ["consequent", "alternate"]
        else:
            roles = ["test"] * (len(children) - 1) + ["consequent"]
    elif kind == NodeKind.DO_WHILE_STATEMENT:
        roles[0] = "body"
        roles[1:] = ["test"] * (len(children) - 1)
    elif kind in (NodeKind.FOR_STATEMENT, NodeKind.WHILE_STATEMENT, NodeKind.SWITCH_STATEMENT):
        roles[-1] = "body"
    elif kind == NodeKind.VARIABLE_DECLARATION:
        roles = ["init"] * len(children)
    return roles


def _convert_cursor(cursor):
    kind = _KIND_MAP.get(cursor.kind, NodeKind.OTHER)
    name = cursor.spelling or None
    attributes = {"source_kind": cursor.kind.name}

    if kind == NodeKind.VARIABLE_DECLARATION:
        parent = cursor.semantic_parent
        if parent is not None and parent.kind in _CLASS_SCOPE_KINDS:
            kind = NodeKind.FIELD_DECLARATION
            attributes["static"] = True
        else:
            attributes["binding"] = _binding(cursor)
    elif kind == NodeKind.METHOD_DECLARATION:
        special = cursor.kind in _SPECIAL_METHOD_KINDS or (name or "").startswith("operator")
        attributes["special"] = special
    elif kind == NodeKind.FUNCTION_DECLARATION:
        attributes["special"] = (name or "").startswith("operator")
        attributes["definition"] = cursor.is_definition()
    elif kind == NodeKind.PROGRAM:
        name = None
    elif cursor.kind == CursorKind.NULL_STMT:
        attributes["empty"] = True

    line = cursor.location.line or 1
    column = cursor.location.column or 1
    return SyntaxNode(kind, Location(line, column), name=name, attributes=attributes)


def _target_children(cursor, target_file, realpath_cache):
    children = []
    for child in cursor.get_children():
        child_file = child.location.file.name if child.location.file else None
        if target_file and child_file:
            cached = realpath_cache.get(child_file)
            if cached is None:
                cached = os.path.realpath(child_file)
                realpath_cache[child_file] = cached
            if cached != target_file:
                continue
        children.append(child)
    return children


def walk_cursor(cursor, target_file=None):
    """
    Convert a Clang cursor and its descendants into a SyntaxNode tree.

    Cursors are visited breadth-first from a queue, so nesting depth in the
    source does not bound the conversion. Cursors located in other files
    (headers) are skipped when ``target_file`` is given.
    """
    realpath_cache = {}
    root = _convert_cursor(cursor)
    pending = deque([(cursor, root)])

    while pending:
        current, node = pending.popleft()
        children = _target_children(current, target_file, realpath_cache)
        for child, role in zip(children, _child_roles(current, node.kind, children)):
            child_node = _convert_cursor(child)
            node.add_child(child_node, role=role)
            pending.append((child, child_node))
    return root


def load_clang_tree(filename, extra_args=None) -> SyntaxNode:
    translation_unit = parse_source_file(filename, extra_args=extra_args)
    return walk_cursor(translation_unit.cursor, target_file=os.path.realpath(filename))
