"""Tests for syntax tree models and loaders."""

import json
import sys

import pytest

from hdlalign.errors import TreeGenerationError, TreeLoadError
from hdlalign.syntax import (
    CommentKind,
    NodeKind,
    SyntaxNode,
    TreeGenerator,
    describe_tree,
    load_syntax_tree,
    node_kind,
    parse_syntax_tree,
)

TREE = {
    "name": "source_text",
    "children": [
        {
            "name": "IDENTIFIER",
            "value": "clk",
            "leadingComments": [{"text": "// clock", "originalTokenIndex": 0}],
            "trailingComments": [{"text": "/* in */", "kind": "BLOCK", "originalTokenIndex": 2}],
        },
        {"name": "EOF", "value": "<EOF>", "children": None},
    ],
}


class TestSyntaxNode:
    """Test the tree model."""

    def test_parse_dict(self):
        """camelCase comment keys are accepted."""
        tree = parse_syntax_tree(TREE)
        token = tree.children[0]
        assert token.is_terminal
        assert token.leading_comments[0].kind is CommentKind.LINE
        assert token.trailing_comments[0].kind is CommentKind.BLOCK
        assert token.trailing_comments[0].original_token_index == 2

    def test_null_children_are_empty(self):
        """A null child list is treated as empty."""
        tree = parse_syntax_tree(json.dumps(TREE))
        assert tree.children[1].children == []

    def test_tokens_in_order(self):
        """tokens() walks terminals left to right."""
        tree = parse_syntax_tree(TREE)
        assert [token.text for token in tree.tokens()] == ["clk", "<EOF>"]
        assert tree.first_token().text == "clk"
        assert not tree.is_terminal

    def test_find_first(self):
        """find_first() searches depth first."""
        tree = SyntaxNode.tree("a", SyntaxNode.tree("b", SyntaxNode.token("IDENTIFIER", "x")))
        assert tree.find_first("IDENTIFIER").text == "x"
        assert tree.find_first("missing") is None

    def test_describe_tree(self):
        """describe_tree() counts tokens and comments."""
        summary = describe_tree(parse_syntax_tree(TREE))
        assert summary == {"root": "source_text", "tokens": 2, "comments": 2}


class TestNodeKinds:
    """Test the node vocabulary."""

    def test_known_and_aliased_kinds(self):
        """Grammar names map onto the enum; 'range' is an alias."""
        assert node_kind("module_declaration") is NodeKind.MODULE_DECLARATION
        assert node_kind("range") is NodeKind.RANGE
        assert node_kind("range_") is NodeKind.RANGE

    def test_unknown_kind(self):
        """Unrecognized names have no kind."""
        assert node_kind("attribute_instance") is None


class TestLoaders:
    """Test reading and generating tree files."""

    def test_load_file(self, tmp_path):
        """JSON files are validated into trees."""
        path = tmp_path / "top.v.ast.json"
        path.write_text(json.dumps(TREE), encoding="utf-8")
        assert load_syntax_tree(path).name == "source_text"

    def test_missing_file(self, tmp_path):
        """A missing file raises TreeLoadError."""
        with pytest.raises(TreeLoadError) as exc_info:
            load_syntax_tree(tmp_path / "nope.json")
        assert exc_info.value.code == "TREE_LOAD"

    @pytest.mark.parametrize("content", ["{not json", json.dumps({"children": []}), json.dumps([1, 2])])
    def test_malformed_tree(self, content):
        """Invalid JSON or a wrong shape raises TreeLoadError."""
        with pytest.raises(TreeLoadError) as exc_info:
            parse_syntax_tree(content, path="top.json")
        assert "Malformed syntax tree" in exc_info.value.message
        assert "top.json" in exc_info.value.format()

    def test_generator_substitutes_placeholders(self, tmp_path):
        """{source} and {output} are replaced in every argument."""
        generator = TreeGenerator(["parse", "--in={source}", "{output}"])
        command = generator.build_command(tmp_path / "a.v", tmp_path / "a.json")
        assert command == ["parse", f"--in={tmp_path / 'a.v'}", str(tmp_path / "a.json")]

    def test_generator_runs_command(self, tmp_path):
        """The produced file is loaded."""
        script = (
            "import json, sys\n"
            "with open(sys.argv[2], 'w') as handle:\n"
            "    json.dump({'name': 'source_text', 'children': []}, handle)\n"
        )
        source = tmp_path / "top.v"
        source.write_text("module top; endmodule\n", encoding="utf-8")
        generator = TreeGenerator([sys.executable, "-c", script, "{source}", "{output}"])
        assert generator.generate(source, tmp_path / "top.json").name == "source_text"
        assert generator.generate_temporary(source).name == "source_text"

    def test_generator_failure(self, tmp_path):
        """A non-zero exit raises TreeGenerationError."""
        generator = TreeGenerator([sys.executable, "-c", "import sys; sys.exit(3)"])
        with pytest.raises(TreeGenerationError) as exc_info:
            generator.generate(tmp_path / "top.v", tmp_path / "top.json")
        assert "status 3" in exc_info.value.message

    def test_generator_missing_executable(self, tmp_path):
        """An unknown executable raises TreeGenerationError."""
        generator = TreeGenerator(["hdlalign-no-such-parser", "{source}"])
        with pytest.raises(TreeGenerationError):
            generator.generate(tmp_path / "top.v", tmp_path / "top.json")

    def test_generator_without_output(self, tmp_path):
        """A command that writes nothing raises TreeGenerationError."""
        generator = TreeGenerator([sys.executable, "-c", "pass"])
        with pytest.raises(TreeGenerationError) as exc_info:
            generator.generate(tmp_path / "top.v", tmp_path / "top.json")
        assert "did not write" in exc_info.value.message

    def test_generator_needs_a_command(self):
        """An empty command is rejected."""
        with pytest.raises(ValueError):
            TreeGenerator([])
