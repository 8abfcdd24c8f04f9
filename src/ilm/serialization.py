"""
Serialization helpers for ILM AST nodes.

An external Elixir parser dumps `Code.string_to_quoted/2` output as JSON
or YAML using tagged dicts. This module turns those documents into AST
nodes and back.

Wire format:
    {"type": "atom", "value": "error_code"}
    {"type": "lit", "value": "text" | 1 | 1.5 | true | null}
    {"type": "var", "name": "meta", "meta": {"line": 3}}
    {"type": "aliases", "segments": ["Logger"], "meta": {...}}
    {"type": "list", "items": [...]}
    {"type": "pair", "left": ..., "right": ...}
    {"type": "call", "name": "error", "args": [...], "meta": {...}}
    {"type": "remote", "target": ..., "function": "error", "args": [...], "meta": {...}}
    {"type": "anon", "callee": ..., "args": [...], "meta": {...}}

Bare scalars decode to Literal and bare arrays to ListNode. A call
whose "args" key is missing or null decodes with args=None.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ilm.ast_nodes import (
    Node,
    Meta,
    NO_META,
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

logger = logging.getLogger(__name__)


class ASTDecodeError(Exception):
    """Raised when a serialized AST cannot be decoded."""
    pass


def meta_to_dict(m: Meta) -> Dict[str, Any]:
    d = {}
    if m.line is not None:
        d["line"] = m.line
    if m.column is not None:
        d["column"] = m.column
    return d


def meta_from_dict(d: Optional[Dict[str, Any]]) -> Meta:
    if not d:
        return NO_META
    if not isinstance(d, dict):
        raise ASTDecodeError(f"Node meta must be a mapping, got {d!r}")
    for key in ("line", "column"):
        value = d.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ASTDecodeError(f"Meta '{key}' must be an integer, got {value!r}")
    return Meta(line=d.get("line"), column=d.get("column"))


def _args_to_list(args: Optional[Tuple[Node, ...]]) -> Any:
    if args is None:
        return None
    return [node_to_dict(a) for a in args]


def _args_from_list(args: Any) -> Optional[Tuple[Node, ...]]:
    if args is None:
        return None
    if not isinstance(args, list):
        raise ASTDecodeError(f"Call args must be a list, got {type(args).__name__}")
    return tuple(node_from_dict(a) for a in args)


def node_to_dict(node: Node) -> Any:
    if isinstance(node, Atom):
        return {"type": "atom", "value": node.value}
    if isinstance(node, Literal):
        return {"type": "lit", "value": node.value}
    if isinstance(node, Variable):
        return {"type": "var", "name": node.name, "meta": meta_to_dict(node.meta)}
    if isinstance(node, Aliases):
        return {"type": "aliases", "segments": list(node.segments), "meta": meta_to_dict(node.meta)}
    if isinstance(node, ListNode):
        return {"type": "list", "items": [node_to_dict(i) for i in node.items]}
    if isinstance(node, Pair):
        return {"type": "pair", "left": node_to_dict(node.left), "right": node_to_dict(node.right)}
    if isinstance(node, LocalCall):
        return {
            "type": "call",
            "name": node.name,
            "args": _args_to_list(node.args),
            "meta": meta_to_dict(node.meta),
        }
    if isinstance(node, RemoteCall):
        return {
            "type": "remote",
            "target": node_to_dict(node.target),
            "function": node.function,
            "args": _args_to_list(node.args),
            "meta": meta_to_dict(node.meta),
        }
    if isinstance(node, AnonymousCall):
        return {
            "type": "anon",
            "callee": node_to_dict(node.callee),
            "args": _args_to_list(node.args),
            "meta": meta_to_dict(node.meta),
        }
    raise TypeError(f"Unsupported Node type: {type(node)}")


def _require(d: Dict[str, Any], key: str) -> Any:
    try:
        return d[key]
    except KeyError:
        raise ASTDecodeError(f"Node of type '{d.get('type')}' is missing '{key}'") from None


def _require_str(d: Dict[str, Any], key: str) -> str:
    value = _require(d, key)
    if not isinstance(value, str):
        raise ASTDecodeError(f"Field '{key}' of '{d.get('type')}' node must be a string, got {value!r}")
    return value


def _scalar(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise ASTDecodeError(f"Literal value must be a scalar, got {value!r}")


def node_from_dict(d: Any) -> Node:
    if isinstance(d, list):
        return ListNode(tuple(node_from_dict(i) for i in d))
    if d is None or isinstance(d, (str, int, float, bool)):
        return Literal(d)
    if not isinstance(d, dict):
        raise ASTDecodeError(f"Unsupported AST value: {d!r}")

    t = d.get("type")
    if t == "atom":
        return Atom(_require_str(d, "value"))
    if t == "lit":
        return Literal(_scalar(d.get("value")))
    if t == "var":
        return Variable(_require_str(d, "name"), meta=meta_from_dict(d.get("meta")))
    if t == "aliases":
        segments = _require(d, "segments")
        if not isinstance(segments, list) or not all(isinstance(s, str) for s in segments):
            raise ASTDecodeError(f"Alias segments must be a list of strings, got {segments!r}")
        return Aliases(tuple(segments), meta=meta_from_dict(d.get("meta")))
    if t == "list":
        items = d.get("items", [])
        if not isinstance(items, list):
            raise ASTDecodeError(f"List items must be a list, got {type(items).__name__}")
        return ListNode(tuple(node_from_dict(i) for i in items))
    if t == "pair":
        return Pair(node_from_dict(_require(d, "left")), node_from_dict(_require(d, "right")))
    if t == "call":
        return LocalCall(
            name=_require_str(d, "name"),
            args=_args_from_list(d.get("args")),
            meta=meta_from_dict(d.get("meta")),
        )
    if t == "remote":
        return RemoteCall(
            target=node_from_dict(_require(d, "target")),
            function=_require_str(d, "function"),
            args=_args_from_list(d.get("args")),
            meta=meta_from_dict(d.get("meta")),
        )
    if t == "anon":
        return AnonymousCall(
            callee=node_from_dict(_require(d, "callee")),
            args=_args_from_list(d.get("args")),
            meta=meta_from_dict(d.get("meta")),
        )
    raise ASTDecodeError(f"Unsupported node dict type: {t}")


def ast_to_json(node: Node) -> str:
    return json.dumps(node_to_dict(node), sort_keys=True)


def ast_from_json(s: str) -> Node:
    try:
        return node_from_dict(json.loads(s))
    except json.JSONDecodeError as e:
        raise ASTDecodeError(f"Invalid JSON: {e}") from e
    except RecursionError:
        raise ASTDecodeError("AST nested too deeply to decode") from None


def ast_to_yaml(node: Node) -> str:
    return yaml.safe_dump(node_to_dict(node))


def ast_from_yaml(s: str) -> Node:
    try:
        return node_from_dict(yaml.safe_load(s))
    except yaml.YAMLError as e:
        raise ASTDecodeError(f"Invalid YAML: {e}") from e
    except RecursionError:
        raise ASTDecodeError("AST nested too deeply to decode") from None


def load_ast_file(filepath: str | Path) -> Node:
    """
    Load a serialized AST from disk.

    `.yaml` / `.yml` files are read as YAML, everything else as JSON.

    Raises:
        FileNotFoundError: If the file does not exist
        ASTDecodeError: If the file cannot be read or is not a valid AST
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"AST file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ASTDecodeError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ASTDecodeError(f"Cannot read {path}: {e}") from e

    if path.suffix.lower() in (".yaml", ".yml"):
        root = ast_from_yaml(text)
    else:
        root = ast_from_json(text)

    logger.debug("Loaded AST from %s", path)
    return root
