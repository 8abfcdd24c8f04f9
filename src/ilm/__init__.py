"""
Ignored Logger Metadata (ILM) Check Package

Static analysis of Elixir ASTs for Logger calls whose metadata keys
the configured console backend will never render.

ARCHITECTURAL GUARANTEE:
------------------------
The core (traversal, classifier, validator, check) contains ZERO knowledge of:
    - Source parsing
    - File discovery
    - Report formatting
    - Where configuration comes from

The core consumes an AST and a CheckParams record and returns diagnostics.

All I/O happens in external layers (serialization, config, backends, cli).
"""

__version__ = "0.1.0"
