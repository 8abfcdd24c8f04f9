"""
Metadata extraction and key-set validation.

Given a recognized Logger function and its arguments, pick the argument
that carries metadata, then decide whether every key in it would be
rendered by the backend.

Only keys are checked. Values never matter.
"""

from typing import AbstractSet, List, Optional, Sequence

from ilm.ast_nodes import Node, Atom, ListNode, Pair


def metadata_candidate(function: str, args: Sequence[Node]) -> Optional[Node]:
    """
    Return the argument holding metadata, or None if the call shape has none.

    Shapes:
        metadata(meta)                  -> meta
        log(level, message, meta)       -> meta
        log(...) any other arity        -> None
        <fun>(message, meta)            -> meta
        anything else                   -> None
    """
    if function == "metadata":
        if len(args) == 1:
            return args[0]
        return None

    if function == "log":
        if len(args) == 3:
            return args[2]
        return None

    if len(args) == 2:
        return args[1]

    return None


def is_keyword(node: Node) -> bool:
    """True if node is a keyword list literal (the empty list included)."""
    if not isinstance(node, ListNode):
        return False
    return all(
        isinstance(item, Pair) and isinstance(item.left, Atom)
        for item in node.items
    )


def keyword_keys(node: ListNode) -> List[str]:
    """Keys of a keyword list, in order, duplicates kept."""
    return [item.left.value for item in node.items]


def metadata_is_valid(candidate: Node, allowed_keys: AbstractSet[str]) -> bool:
    """
    A candidate is valid iff it is a keyword list and all its keys are allowed.

    Anything that is not a keyword literal (a variable, a map, a function
    call) cannot be enumerated statically and is reported.
    """
    if not is_keyword(candidate):
        return False
    return all(key in allowed_keys for key in keyword_keys(candidate))
