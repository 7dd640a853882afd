"""Tests for instantiation templates."""

import pytest

from hdlalign.config import AlignConfig
from hdlalign.errors import InstanceTemplateError
from hdlalign.instance import generate_instance_code, parse_module_header

FIFO = """
// simple fifo
module fifo #(
    parameter DEPTH = 16,  // entries
    parameter integer WIDTH = 8
) (
    input  wire             clk,
    input  wire             rst_n,
    input  wire [WIDTH-1:0] din,  /* data */
    output reg  [WIDTH-1:0] dout
);
endmodule
"""


class TestParseModuleHeader:
    """Test header extraction."""

    def test_name_parameters_and_ports(self):
        """Comments are ignored and the last identifier of each port is its name."""
        name, parameters, ports = parse_module_header(FIFO)
        assert name == "fifo"
        assert parameters == [("DEPTH", "16"), ("WIDTH", "8")]
        assert ports == ["clk", "rst_n", "din", "dout"]

    def test_no_module(self):
        """Text without a module raises InstanceTemplateError."""
        with pytest.raises(InstanceTemplateError):
            parse_module_header("wire a;")

    def test_no_port_list(self):
        """Modules must have a parenthesised port list."""
        with pytest.raises(InstanceTemplateError):
            parse_module_header("module top; endmodule")


class TestGenerateInstanceCode:
    """Test template rendering."""

    def test_template_layout(self):
        """Connections use the formatter's value columns."""
        lines = generate_instance_code(FIFO).rstrip("\n").split("\n")
        assert lines[0] == "fifo #("
        assert lines[1].startswith("    .DEPTH ")
        assert lines[1].index("(16),") == 60
        assert lines[2].index("(8)") == 60
        assert lines[3] == ") UUT_fifo ("
        assert lines[4].index("(clk),") == 60
        assert lines[7].index("(dout)") == 60
        assert lines[8] == ");"

    def test_custom_name_and_columns(self):
        """The instance name and columns can be chosen."""
        text = generate_instance_code(FIFO, AlignConfig(inst_port_value_col=30), instance_name="u_fifo")
        assert ") u_fifo (" in text
        assert text.split("\n")[4].index("(clk)") == 30

    def test_commented(self):
        """The template can be wrapped in a block comment."""
        text = generate_instance_code("module top (input a); endmodule", commented=True)
        assert text == "/*\ntop UUT_top (\n    .a" + " " * 54 + "(a)\n);\n*/\n"

    def test_module_without_ports(self):
        """An empty port list gives '();'."""
        assert generate_instance_code("module top (); endmodule") == "top UUT_top ();\n"
