"""
Ignored Logger Metadata check.

Ensures custom metadata keys passed to Logger are included in the logger
config, so they are not silently dropped in production.

This module wires the pieces together:
    - traversal walks the whole tree once
    - classifier recognizes Logger calls and `import Logger`
    - validator checks the metadata argument of each Logger call

IMPORTANT: This is the analysis layer. It does NOT read files or
configuration. It takes an AST plus CheckParams and returns diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, List, Optional, Tuple

from ilm.ast_nodes import Node
from ilm.classifier import CallKind, active_functions, classify
from ilm.config import CheckParams
from ilm.traversal import prewalk
from ilm.validator import metadata_candidate, metadata_is_valid

CHECK_NAME = "IgnoredLoggerMetadata"
CATEGORY = "warning"
BASE_PRIORITY = "high"
MESSAGE = "Logger metadata will be ignored in production"

EXPLANATION = """\
Ensures custom metadata keys are included in logger config

Note that all metadata is optional and may not always be available.

For example, you might wish to include a custom `:error_code` metadata in your logs:

    Logger.error("We have a problem", [error_code: :pc_load_letter])

In your app's logger configuration, you would need to include the `:error_code` key:

    config :logger, :console,
      format: "[$level] $message $metadata\\n",
      metadata: [:error_code, :file]

That way your logs might then receive lines like this:

    [error] We have a problem error_code=pc_load_letter file=lib/app.ex
"""

PARAM_EXPLANATIONS = {
    "ignore_logger_functions": "Do not raise an issue for these Logger functions.",
    "metadata_keys": (
        "Do not raise an issue for these Logger metadata keys.\n\n"
        "By default, we assume the metadata keys listed under your `console`\n"
        "backend."
    ),
}


@dataclass(frozen=True)
class Diagnostic:
    """A single offending Logger call."""
    message: str
    line_no: Optional[int] = None


@dataclass(frozen=True)
class TraversalState:
    """
    Accumulator threaded through the walk of one file.

    Properties:
        logger_imported:
            True once `import Logger` has been seen. Never reset, even after
            the import's lexical scope ends (e.g. in a later sibling module).
            Known to be stricter than Elixir's scoping.
        diagnostics:
            Diagnostics in discovery order
    """

    logger_imported: bool = False
    diagnostics: Tuple[Diagnostic, ...] = ()

    def add(self, diagnostic: Optional[Diagnostic]) -> "TraversalState":
        if diagnostic is None:
            return self
        return replace(self, diagnostics=self.diagnostics + (diagnostic,))


@dataclass(frozen=True)
class Issue:
    """A diagnostic located in a file, ready for a reporting backend."""
    filename: str
    line_no: Optional[int]
    message: str
    check: str = CHECK_NAME
    category: str = CATEGORY
    priority: str = BASE_PRIORITY


def diagnostic_for_call(function: str, args, line_no: Optional[int], params: CheckParams) -> Optional[Diagnostic]:
    """Validate one Logger call. Returns None when the call is fine or not checkable."""
    candidate = metadata_candidate(function, args)
    if candidate is None:
        return None
    if metadata_is_valid(candidate, params.metadata_keys):
        return None
    return Diagnostic(message=MESSAGE, line_no=line_no)


def _visitor(params: CheckParams, functions: FrozenSet[str]):
    def visit(node: Node, state: TraversalState) -> TraversalState:
        kind = classify(node, state.logger_imported, params, functions)

        if kind is CallKind.QUALIFIED_LOGGER_CALL:
            return state.add(diagnostic_for_call(node.function, node.args, node.meta.line, params))

        elif kind is CallKind.UNQUALIFIED_LOGGER_CALL:
            return state.add(diagnostic_for_call(node.name, node.args, node.meta.line, params))

        elif kind is CallKind.LOGGER_IMPORT:
            return replace(state, logger_imported=True)

        # CallKind.OTHER
        return state

    return visit


def _line_order(diagnostic: Diagnostic) -> Tuple[bool, int]:
    # Diagnostics without a line go last
    return (diagnostic.line_no is None, diagnostic.line_no or 0)


def find_diagnostics(root: Node, params: Optional[CheckParams] = None) -> List[Diagnostic]:
    """
    Run the check over one file's AST.

    Returns diagnostics ordered by ascending line number. Calls on the
    same line keep their order of appearance.
    """
    if params is None:
        params = CheckParams()

    visit = _visitor(params, active_functions(params))
    _, state = prewalk(root, TraversalState(), visit)

    return sorted(state.diagnostics, key=_line_order)


def run_check(filename: str, root: Node, params: Optional[CheckParams] = None) -> List[Issue]:
    """Run the check and locate its diagnostics in `filename`."""
    return [
        Issue(filename=filename, line_no=d.line_no, message=d.message)
        for d in find_diagnostics(root, params)
    ]


def explain() -> str:
    """Human-readable explanation of the check and its params."""
    lines = [EXPLANATION, "Params:", ""]
    for name, text in PARAM_EXPLANATIONS.items():
        lines.append(f"  {name}:")
        lines.extend(f"    {line}" if line else "" for line in text.splitlines())
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
