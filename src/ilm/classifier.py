"""
Call classification for the ignored Logger metadata check.

Decides, for a single node, which of a closed set of shapes it has:

    Logger.error("x", meta)    ->  QUALIFIED_LOGGER_CALL
    error("x", meta)           ->  UNQUALIFIED_LOGGER_CALL  (only after `import Logger`)
    import Logger              ->  LOGGER_IMPORT
    anything else              ->  OTHER

No aliases are resolved. `alias Logger, as: L` followed by `L.error(...)`
is OTHER.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional, Sequence, TYPE_CHECKING

from ilm.ast_nodes import Node, Aliases, LocalCall, RemoteCall

if TYPE_CHECKING:
    from ilm.config import CheckParams


LOGGER_FUNCTIONS: FrozenSet[str] = frozenset({
    "alert",
    "critical",
    "debug",
    "emergency",
    "error",
    "info",
    "notice",
    "warn",
    "warning",
    "metadata",
    "log",
})


class CallKind(Enum):
    """What a node means to the check."""
    QUALIFIED_LOGGER_CALL = "qualified"
    UNQUALIFIED_LOGGER_CALL = "unqualified"
    LOGGER_IMPORT = "import"
    OTHER = "other"


def active_functions(params: "CheckParams") -> FrozenSet[str]:
    """Recognized Logger functions minus the ones the user asked to ignore."""
    return LOGGER_FUNCTIONS - params.ignore_functions


def is_logger_alias(node: Node, logger_module: str) -> bool:
    return isinstance(node, Aliases) and node.segments == (logger_module,)


def is_logger_import(args: Optional[Sequence[Node]], logger_module: str) -> bool:
    """`import Logger` with no options. `import Logger, only: [...]` does not count."""
    if args is None or len(args) != 1:
        return False
    return is_logger_alias(args[0], logger_module)


def classify(
    node: Node,
    logger_imported: bool,
    params: "CheckParams",
    functions: Optional[FrozenSet[str]] = None,
) -> CallKind:
    """
    Classify a node.

    Args:
        node: Any AST node
        logger_imported: Whether `import Logger` was seen earlier in the walk
        params: Check parameters (logger module name, ignored functions)
        functions: Precomputed active function set (computed from params if None)

    Returns:
        CallKind
    """
    if functions is None:
        functions = active_functions(params)

    if isinstance(node, RemoteCall):
        if node.args is None:
            return CallKind.OTHER
        if is_logger_alias(node.target, params.logger_module) and node.function in functions:
            return CallKind.QUALIFIED_LOGGER_CALL
        return CallKind.OTHER

    if isinstance(node, LocalCall):
        if node.args is None:
            return CallKind.OTHER
        if node.name == "import":
            if is_logger_import(node.args, params.logger_module):
                return CallKind.LOGGER_IMPORT
            return CallKind.OTHER
        if logger_imported and node.name in functions:
            return CallKind.UNQUALIFIED_LOGGER_CALL
        return CallKind.OTHER

    return CallKind.OTHER
