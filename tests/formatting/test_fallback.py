"""Tests for the regex fallback aligner."""

import pytest

from hdlalign.config import AlignConfig
from hdlalign.formatting.fallback import RegexAligner, align_text


@pytest.fixture
def aligner(config):
    return RegexAligner(config)


class TestRegexAligner:
    """Test line-by-line alignment without a syntax tree."""

    def test_malformed_line_is_unchanged(self, aligner):
        """A line no pattern matches is returned as is."""
        assert aligner.align_line("wire badsyntax(") == "wire badsyntax("

    @pytest.mark.parametrize(
        "line",
        [
            "always @(posedge clk) begin",
            "end",
            "module top (",
            "// wire a;",
            "    x <= y;",
            "",
        ],
    )
    def test_control_and_statement_lines_are_unchanged(self, aligner, line):
        """Only declarations, assigns and connections are aligned."""
        assert aligner.align_line(line) == line

    def test_port_declaration(self, aligner):
        """Port fields land on the port columns."""
        line = aligner.align_line("input wire signed [7:0] data_in;")
        assert line.index("input") == 4
        assert line.index("signed") == 16
        assert line.index("[ 7:0 ]") == 25
        assert line.index("data_in") == 50
        assert line.index(";") == 80

    def test_ansi_port_keeps_comma(self, aligner):
        """A comma terminator stays attached."""
        line = aligner.align_line("  output reg [3:0] count,")
        assert line.startswith("    output reg")
        assert line.endswith("count,")

    def test_signal_with_trailing_comment(self, aligner):
        """Trailing line comments follow the aligned code after one space."""
        line = aligner.align_line("wire ready;   // high when done")
        assert line.index("ready") == 50
        assert line.endswith("; // high when done")

    def test_array_declaration(self):
        """Unpacked dimensions use the array columns."""
        aligner = RegexAligner(AlignConfig(array_num5=56, array_num6=70))
        line = aligner.align_line("reg [7:0] mem [0:15];")
        assert line.index("mem") == 50
        assert line.index("[ 0:15]") == 56
        assert line.index(";") == 70

    def test_array_with_several_names_is_unchanged(self, aligner):
        """Several identifiers with an unpacked dimension are ambiguous."""
        line = "reg [7:0] a, b [0:3];"
        assert aligner.align_line(line) == line

    def test_signal_with_initial_value(self, aligner):
        """An initial value stays with the identifier."""
        line = aligner.align_line("reg valid = 1'b0;")
        assert line.index("valid = 1'b0") == 50

    def test_parameter(self, aligner):
        """Parameters use the param columns."""
        line = aligner.align_line("parameter WIDTH = 8;")
        assert line.index("parameter") == 4
        assert line.index("WIDTH") == 25
        assert line.index("= 8") == 50
        assert line.index(";") == 80

    def test_parameter_list_on_one_line_is_unchanged(self, aligner):
        """Two assignments in one line are not split."""
        line = "parameter A = 1, B = 2;"
        assert aligner.align_line(line) == line

    def test_assign(self, aligner):
        """assign lines share the tree renderer's layout."""
        assert aligner.align_line("assign   y=a&b;") == "    assign  y = a&b;"

    def test_connection_columns(self, aligner):
        """Port connections put '(value)' at inst_port_value_col."""
        line = aligner.align_line("        .clk(sys_clk),")
        assert line.startswith("        .clk ")
        assert line.index("(sys_clk),") == 60

    def test_parameter_connections_use_parameter_column(self):
        """Inside '#(' ... ')' the parameter column applies."""
        aligner = RegexAligner(AlignConfig(inst_param_value_col=40, inst_port_value_col=60))
        text = "    fifo #(\n        .DEPTH(16)\n    ) u_fifo (\n        .clk(clk)\n    );"
        lines = aligner.align(text).split("\n")
        assert lines[1].index("(16)") == 40
        assert lines[3].index("(clk)") == 60

    def test_deeper_lines_shift_columns(self, aligner):
        """Each extra indent unit moves every column by four."""
        line = aligner.align_line("        wire ready;")
        assert line.index("wire") == 8
        assert line.index("ready") == 54

    def test_block_comments_are_untouched(self, aligner):
        """Lines inside block comments are never aligned."""
        text = "/*\nwire a;\n*/\nwire b;"
        lines = aligner.align(text).split("\n")
        assert lines[1] == "wire a;"
        assert lines[3].index("b") == 50

    def test_idempotent(self, aligner):
        """Aligning aligned text changes nothing."""
        text = (
            "module top (\n"
            "input clk,\n"
            "output reg [3:0] count\n"
            ");\n"
            "parameter WIDTH = 8;\n"
            "wire [WIDTH-1:0] bus; // data\n"
            "assign bus = {count, count};\n"
            "endmodule\n"
        )
        once = aligner.align(text)
        assert once != text
        assert aligner.align(once) == once

    def test_align_text_helper(self):
        """align_text() builds an aligner from an optional config."""
        line = align_text("wire a;")
        assert line.index("a") == 50
        assert line.index(";") == 80
