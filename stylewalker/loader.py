import os

from stylewalker.clang_adapter import C_EXTENSIONS, CPP_EXTENSIONS, load_clang_tree
from stylewalker.errors import ParseSourceError
from stylewalker.estree import load_estree


ESTREE_EXTENSIONS = {".json"}
SUPPORTED_EXTENSIONS = ESTREE_EXTENSIONS | C_EXTENSIONS | CPP_EXTENSIONS


def load_tree(path, clang_args=None):
    """Build a SyntaxNode tree for ``path`` with the front end matching its extension."""
    ext = os.path.splitext(str(path))[1].lower()
    if ext in ESTREE_EXTENSIONS:
        return load_estree(path)
    if ext in C_EXTENSIONS or ext in CPP_EXTENSIONS:
        return load_clang_tree(str(path), extra_args=clang_args)
    raise ParseSourceError(
        f"Unsupported file type '{ext or path}'. Supported: " + ", ".join(sorted(SUPPORTED_EXTENSIONS))
    )
