"""
Stateful pre-order traversal of ILM ASTs.

The walker threads an accumulator through every node of a tree:

    root, acc = prewalk(root, acc, visit)

`visit(node, acc)` is called once per node, parents before children,
children left to right, and returns the new accumulator.

IMPORTANT: The walker never rewrites the tree and never prunes a subtree.
Argument lists are ordinary children, so a Logger call nested inside
another call's arguments is still visited.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Tuple, TypeVar

from ilm.ast_nodes import (
    Node,
    Atom,
    Literal,
    Variable,
    Aliases,
    ListNode,
    Pair,
    LocalCall,
    RemoteCall,
    AnonymousCall,
)

Acc = TypeVar("Acc")


def children(node: Node) -> Tuple[Node, ...]:
    """Direct children of a node, in source order."""
    if isinstance(node, LocalCall):
        return tuple(node.args or ())

    elif isinstance(node, RemoteCall):
        return (node.target,) + tuple(node.args or ())

    elif isinstance(node, AnonymousCall):
        return (node.callee,) + tuple(node.args or ())

    elif isinstance(node, ListNode):
        return tuple(node.items)

    elif isinstance(node, Pair):
        return (node.left, node.right)

    elif isinstance(node, (Atom, Literal, Variable, Aliases)):
        # Leaves
        return ()

    return ()


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node of the tree in pre-order."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Reversed so the leftmost child is popped first
        stack.extend(reversed(children(node)))


def prewalk(root: Node, acc: Acc, visit: Callable[[Node, Acc], Acc]) -> Tuple[Node, Acc]:
    """
    Depth-first, pre-order walk threading `acc` through `visit`.

    Uses an explicit stack, so deeply nested trees do not hit the
    recursion limit.

    Returns the (unchanged) root and the final accumulator.
    """
    for node in iter_nodes(root):
        acc = visit(node, acc)
    return root, acc
