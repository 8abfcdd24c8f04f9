"""
AST Node Model for ILM

Elixir source code is represented as quoted-form Abstract Syntax Trees
produced by an external parser, never as strings.

Every construct of the quoted form maps onto one of a small, closed set
of node variants:

    {name, meta, args}                       -> LocalCall
    {{:., _, [target, fun]}, meta, args}     -> RemoteCall
    {{:., _, [callee]}, meta, args}          -> AnonymousCall
    {name, meta, context_atom}               -> Variable
    {:__aliases__, meta, segments}           -> Aliases
    :atom                                    -> Atom
    "string", 1, 1.0, true, nil              -> Literal
    [a, b]                                   -> ListNode
    {a, b}                                   -> Pair

ARCHITECTURAL RULE:
    Nodes are structure only.
    Walking, classification and validation belong in their own layers.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Optional, Tuple, Union


class Node(ABC):
    """
    Base class for all AST nodes.

    This is intentionally minimal.
    It exists to provide type-safety for the node hierarchy.

    DO NOT:
        - Add traversal logic here (belongs in traversal layer)
        - Add pattern matching here (belongs in classifier layer)

    This class is structure only.
    """
    pass


@dataclass(frozen=True)
class Meta:
    """
    Positional metadata attached to a node by the parser.

    Properties:
        line: 1-based line number (optional, some parsers omit it)
        column: 1-based column (optional)
    """

    line: Optional[int] = None
    column: Optional[int] = None


NO_META = Meta()


@dataclass(frozen=True)
class Atom(Node):
    """
    An Elixir atom literal.

    Examples:
        :error_code   ->  Atom("error_code")
        :info         ->  Atom("info")

    Keyword list keys are always atoms.
    """

    value: str


@dataclass(frozen=True)
class Literal(Node):
    """
    A literal constant that is not an atom.

    Examples:
        - "We have a problem"
        - 42
        - 1.5
        - true / nil  (True / None)
    """

    value: Union[str, int, float, bool, None]


@dataclass(frozen=True)
class Variable(Node):
    """
    A variable reference, e.g. `meta` in `Logger.error("x", meta)`.

    Variables are never resolved. A variable passed as metadata
    cannot be enumerated statically.
    """

    name: str
    meta: Meta = NO_META


@dataclass(frozen=True)
class Aliases(Node):
    """
    A module alias.

    Examples:
        Logger        ->  Aliases(("Logger",))
        MyApp.Repo    ->  Aliases(("MyApp", "Repo"))
    """

    segments: Tuple[str, ...]
    meta: Meta = NO_META


@dataclass(frozen=True)
class ListNode(Node):
    """
    A list literal.

    A keyword list is a ListNode whose items are all Pair(Atom, value):

        [error_code: :pc_load_letter]

    Becomes:
        ListNode((
            Pair(Atom("error_code"), Atom("pc_load_letter")),
        ))
    """

    items: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Pair(Node):
    """A two-element tuple literal `{left, right}`."""

    left: Node
    right: Node


@dataclass(frozen=True)
class LocalCall(Node):
    """
    An unqualified call.

    Examples:
        error("x", file: "a.ex")
        import Logger
        defmodule Foo do ... end

    Properties:
        name: Function or special form name
        args: Argument nodes, or None when the parser attached none
        meta: Position of the call
    """

    name: str
    args: Optional[Tuple[Node, ...]] = ()
    meta: Meta = NO_META


@dataclass(frozen=True)
class RemoteCall(Node):
    """
    A qualified call `target.function(args)`.

    Example:
        Logger.error("x", error_code: :a)

    Becomes:
        RemoteCall(
            target=Aliases(("Logger",)),
            function="error",
            args=(Literal("x"), ListNode((Pair(Atom("error_code"), Atom("a")),))),
            meta=Meta(line=3),
        )
    """

    target: Node
    function: str
    args: Optional[Tuple[Node, ...]] = ()
    meta: Meta = NO_META


@dataclass(frozen=True)
class AnonymousCall(Node):
    """An anonymous function invocation `callee.(args)`."""

    callee: Node
    args: Optional[Tuple[Node, ...]] = ()
    meta: Meta = NO_META


def keyword(**entries) -> ListNode:
    """
    Build a keyword list from Python keyword arguments.

    Plain str/int/float/bool/None values are wrapped in Literal,
    nodes are used as-is.

        keyword(error_code=Atom("a"), user_id=7)
    """
    items = []
    for key, value in entries.items():
        if not isinstance(value, Node):
            value = Literal(value)
        items.append(Pair(Atom(key), value))
    return ListNode(tuple(items))
