"""
Tests for serialization and deserialization of AST nodes.

These tests ensure the JSON/YAML documents produced by the external
parser decode into the expected nodes, and that the explicit
serialization functions in `ilm.serialization` round-trip.
"""

import json

import pytest

from ilm.ast_nodes import (
    Atom,
    Literal,
    Variable,
    Aliases,
    ListNode,
    Pair,
    LocalCall,
    RemoteCall,
    AnonymousCall,
    Meta,
    keyword,
)
from ilm.examples import build_example_worker_module
from ilm.serialization import (
    ASTDecodeError,
    ast_from_json,
    ast_from_yaml,
    ast_to_json,
    ast_to_yaml,
    load_ast_file,
    node_from_dict,
    node_to_dict,
)


LOGGER_ERROR_JSON = """
{
  "type": "remote",
  "target": {"type": "aliases", "segments": ["Logger"], "meta": {"line": 3}},
  "function": "error",
  "meta": {"line": 3, "column": 5},
  "args": [
    "We have a problem",
    [{"type": "pair", "left": {"type": "atom", "value": "error_code"},
      "right": {"type": "atom", "value": "pc_load_letter"}}]
  ]
}
"""


def test_decode_logger_call():
    node = ast_from_json(LOGGER_ERROR_JSON)

    assert node == RemoteCall(
        target=Aliases(("Logger",), meta=Meta(line=3)),
        function="error",
        args=(
            Literal("We have a problem"),
            keyword(error_code=Atom("pc_load_letter")),
        ),
        meta=Meta(line=3, column=5),
    )


@pytest.mark.parametrize("value", ["text", 1, 1.5, True, None])
def test_bare_scalars_decode_to_literals(value):
    assert node_from_dict(value) == Literal(value)


def test_bare_arrays_decode_to_lists():
    assert node_from_dict([1, {"type": "atom", "value": "a"}]) == ListNode((Literal(1), Atom("a")))


def test_missing_args_decode_to_none():
    node = node_from_dict({"type": "call", "name": "error", "meta": {"line": 1}})
    assert node == LocalCall("error", None, meta=Meta(line=1))


def test_missing_meta_decodes_to_empty_meta():
    node = node_from_dict({"type": "var", "name": "x"})
    assert node == Variable("x")
    assert node.meta.line is None


class TestDecodeErrors:

    def test_unknown_type(self):
        with pytest.raises(ASTDecodeError, match="Unsupported node dict type"):
            node_from_dict({"type": "tuple3"})

    def test_missing_field(self):
        with pytest.raises(ASTDecodeError, match="missing 'function'"):
            node_from_dict({"type": "remote", "target": {"type": "aliases", "segments": ["Logger"]}})

    def test_args_not_a_list(self):
        with pytest.raises(ASTDecodeError):
            node_from_dict({"type": "call", "name": "f", "args": "x"})

    def test_segments_not_a_list(self):
        with pytest.raises(ASTDecodeError):
            node_from_dict({"type": "aliases", "segments": "Logger"})

    def test_invalid_json(self):
        with pytest.raises(ASTDecodeError, match="Invalid JSON"):
            ast_from_json("{not json")

    def test_invalid_yaml(self):
        with pytest.raises(ASTDecodeError, match="Invalid YAML"):
            ast_from_yaml("type: [unclosed")

    @pytest.mark.parametrize("meta", [{"line": "3"}, {"line": 2.5}, {"column": True}])
    def test_meta_positions_must_be_integers(self, meta):
        with pytest.raises(ASTDecodeError, match="must be an integer"):
            node_from_dict({"type": "call", "name": "f", "args": [], "meta": meta})

    @pytest.mark.parametrize("d", [
        {"type": "atom", "value": ["error_code"]},
        {"type": "var", "name": 1},
        {"type": "call", "name": None, "args": []},
        {"type": "remote", "target": {"type": "aliases", "segments": ["Logger"]}, "function": 7},
    ])
    def test_names_must_be_strings(self, d):
        with pytest.raises(ASTDecodeError, match="must be a string"):
            node_from_dict(d)

    def test_segments_must_be_strings(self):
        with pytest.raises(ASTDecodeError):
            node_from_dict({"type": "aliases", "segments": ["Logger", 1]})

    def test_literal_value_must_be_scalar(self):
        with pytest.raises(ASTDecodeError):
            node_from_dict({"type": "lit", "value": {"a": 1}})

    def test_list_items_must_be_a_list(self):
        with pytest.raises(ASTDecodeError):
            node_from_dict({"type": "list", "items": "abc"})

    def test_deeply_nested_json(self):
        depth = 3000
        document = '{"type": "call", "name": "wrap", "args": [' * depth + "1" + "]}" * depth
        with pytest.raises(ASTDecodeError, match="nested too deeply"):
            ast_from_json(document)

    def test_unsupported_node_to_dict(self):
        with pytest.raises(TypeError):
            node_to_dict(object())


def build_sample_ast():
    return LocalCall("__block__", (
        LocalCall("import", (Aliases(("Logger",), meta=Meta(line=1)),), meta=Meta(line=1)),
        LocalCall("error", (Literal("x"), keyword(file="a.ex", count=2)), meta=Meta(line=2)),
        AnonymousCall(Variable("f", meta=Meta(line=3)), (Atom("ok"), Literal(None)), meta=Meta(line=3)),
        RemoteCall(Variable("job"), "id", None),
        ListNode((Pair(Literal(1.5), Literal(False)),)),
    ))


def test_json_roundtrip():
    tree = build_sample_ast()
    assert ast_from_json(ast_to_json(tree)) == tree


def test_yaml_roundtrip():
    tree = build_sample_ast()
    assert ast_from_yaml(ast_to_yaml(tree)) == tree


def test_example_module_roundtrip():
    module = build_example_worker_module()
    assert node_from_dict(node_to_dict(module)) == module


def test_meta_omits_missing_fields():
    d = node_to_dict(Variable("x", meta=Meta(line=4)))
    assert d == {"type": "var", "name": "x", "meta": {"line": 4}}


class TestLoadAstFile:

    def test_json_file(self, tmp_path):
        path = tmp_path / "app.json"
        path.write_text(LOGGER_ERROR_JSON)
        assert isinstance(load_ast_file(path), RemoteCall)

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text(ast_to_yaml(build_sample_ast()))
        assert load_ast_file(str(path)) == build_sample_ast()

    def test_unknown_suffix_is_read_as_json(self, tmp_path):
        path = tmp_path / "app.ast"
        path.write_text(json.dumps({"type": "atom", "value": "ok"}))
        assert load_ast_file(path) == Atom("ok")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ast_file(tmp_path / "missing.json")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(b'"\xff"')
        with pytest.raises(ASTDecodeError, match="not valid UTF-8"):
            load_ast_file(path)

    def test_directory(self, tmp_path):
        path = tmp_path / "dir.json"
        path.mkdir()
        with pytest.raises(ASTDecodeError, match="Cannot read"):
            load_ast_file(path)
