"""Closed vocabulary of syntax tree node kinds.

Non-terminal names follow the Verilog-2001 grammar rules emitted by the
external parser. Anything not listed here is an unrecognized kind and is
rendered verbatim by the raw text reconstructor.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional


class NodeKind(str, Enum):
    SOURCE_TEXT = "source_text"
    DESCRIPTION = "description"

    # Module structure
    MODULE_DECLARATION = "module_declaration"
    MODULE_KEYWORD = "module_keyword"
    MODULE_IDENTIFIER = "module_identifier"
    MODULE_PARAMETER_PORT_LIST = "module_parameter_port_list"
    LIST_OF_PORTS = "list_of_ports"
    LIST_OF_PORT_DECLARATIONS = "list_of_port_declarations"
    PORT = "port"
    MODULE_ITEM = "module_item"
    NON_PORT_MODULE_ITEM = "non_port_module_item"
    MODULE_OR_GENERATE_ITEM = "module_or_generate_item"
    MODULE_OR_GENERATE_ITEM_DECLARATION = "module_or_generate_item_declaration"

    # Ports
    PORT_DECLARATION = "port_declaration"
    INPUT_DECLARATION = "input_declaration"
    OUTPUT_DECLARATION = "output_declaration"
    INOUT_DECLARATION = "inout_declaration"
    TF_INPUT_DECLARATION = "tf_input_declaration"
    TF_OUTPUT_DECLARATION = "tf_output_declaration"
    TF_INOUT_DECLARATION = "tf_inout_declaration"
    NET_TYPE = "net_type"
    OUTPUT_VARIABLE_TYPE = "output_variable_type"
    LIST_OF_PORT_IDENTIFIERS = "list_of_port_identifiers"
    LIST_OF_VARIABLE_PORT_IDENTIFIERS = "list_of_variable_port_identifiers"

    # Signals
    NET_DECLARATION = "net_declaration"
    REG_DECLARATION = "reg_declaration"
    INTEGER_DECLARATION = "integer_declaration"
    REAL_DECLARATION = "real_declaration"
    TIME_DECLARATION = "time_declaration"
    GENVAR_DECLARATION = "genvar_declaration"
    LIST_OF_NET_IDENTIFIERS = "list_of_net_identifiers"
    LIST_OF_NET_DECL_ASSIGNMENTS = "list_of_net_decl_assignments"
    LIST_OF_VARIABLE_IDENTIFIERS = "list_of_variable_identifiers"
    LIST_OF_GENVAR_IDENTIFIERS = "list_of_genvar_identifiers"
    VARIABLE_TYPE = "variable_type"
    NET_DECL_ASSIGNMENT = "net_decl_assignment"
    RANGE = "range_"
    DIMENSION = "dimension"
    BLOCK_ITEM_DECLARATION = "block_item_declaration"

    # Parameters
    PARAMETER_DECLARATION = "parameter_declaration"
    LOCAL_PARAMETER_DECLARATION = "local_parameter_declaration"
    PARAMETER_TYPE = "parameter_type"
    LIST_OF_PARAM_ASSIGNMENTS = "list_of_param_assignments"
    PARAM_ASSIGNMENT = "param_assignment"

    # Instantiation
    MODULE_INSTANTIATION = "module_instantiation"
    PARAMETER_VALUE_ASSIGNMENT = "parameter_value_assignment"
    LIST_OF_PARAMETER_ASSIGNMENTS = "list_of_parameter_assignments"
    ORDERED_PARAMETER_ASSIGNMENT = "ordered_parameter_assignment"
    NAMED_PARAMETER_ASSIGNMENT = "named_parameter_assignment"
    MODULE_INSTANCE = "module_instance"
    NAME_OF_MODULE_INSTANCE = "name_of_module_instance"
    LIST_OF_PORT_CONNECTIONS = "list_of_port_connections"
    ORDERED_PORT_CONNECTION = "ordered_port_connection"
    NAMED_PORT_CONNECTION = "named_port_connection"

    # Continuous assignment
    CONTINUOUS_ASSIGN = "continuous_assign"
    LIST_OF_NET_ASSIGNMENTS = "list_of_net_assignments"
    NET_ASSIGNMENT = "net_assignment"
    NET_LVALUE = "net_lvalue"

    # Behavioural
    ALWAYS_CONSTRUCT = "always_construct"
    INITIAL_CONSTRUCT = "initial_construct"
    STATEMENT = "statement"
    STATEMENT_OR_NULL = "statement_or_null"
    FUNCTION_STATEMENT = "function_statement"
    SEQ_BLOCK = "seq_block"
    CONDITIONAL_STATEMENT = "conditional_statement"
    CASE_STATEMENT = "case_statement"
    CASE_ITEM = "case_item"
    LOOP_STATEMENT = "loop_statement"
    PROCEDURAL_TIMING_CONTROL_STATEMENT = "procedural_timing_control_statement"
    EVENT_CONTROL = "event_control"
    DELAY_CONTROL = "delay_control"
    BLOCKING_ASSIGNMENT = "blocking_assignment"
    NONBLOCKING_ASSIGNMENT = "nonblocking_assignment"
    VARIABLE_ASSIGNMENT = "variable_assignment"
    VARIABLE_LVALUE = "variable_lvalue"

    # Generate regions and subprograms
    GENERATE_REGION = "generate_region"
    LOOP_GENERATE_CONSTRUCT = "loop_generate_construct"
    CONDITIONAL_GENERATE_CONSTRUCT = "conditional_generate_construct"
    IF_GENERATE_CONSTRUCT = "if_generate_construct"
    GENERATE_BLOCK = "generate_block"
    GENERATE_BLOCK_OR_NULL = "generate_block_or_null"
    FUNCTION_DECLARATION = "function_declaration"
    TASK_DECLARATION = "task_declaration"
    FUNCTION_ITEM_DECLARATION = "function_item_declaration"
    TASK_ITEM_DECLARATION = "task_item_declaration"

    # Expressions
    EXPRESSION = "expression"
    CONSTANT_EXPRESSION = "constant_expression"
    PRIMARY = "primary"
    UNARY_OPERATOR = "unary_operator"
    BINARY_OPERATOR = "binary_operator"
    HIERARCHICAL_IDENTIFIER = "hierarchical_identifier"
    RANGE_EXPRESSION = "range_expression"
    CONSTANT_RANGE_EXPRESSION = "constant_range_expression"
    MSB_CONSTANT_EXPRESSION = "msb_constant_expression"
    LSB_CONSTANT_EXPRESSION = "lsb_constant_expression"


_ALIASES: Dict[str, NodeKind] = {
    "range": NodeKind.RANGE,
    "generated_instantiation": NodeKind.GENERATE_REGION,
}


def node_kind(name: str) -> Optional[NodeKind]:
    """Map a node name onto the vocabulary, or ``None`` when unrecognized."""
    try:
        return NodeKind(name)
    except ValueError:
        return _ALIASES.get(name)


K = NodeKind

# Wrappers rendered as their single non-terminal child.
WRAPPER_KINDS: FrozenSet[NodeKind] = frozenset({
    K.DESCRIPTION,
    K.PORT_DECLARATION,
    K.MODULE_ITEM,
    K.NON_PORT_MODULE_ITEM,
    K.MODULE_OR_GENERATE_ITEM,
    K.MODULE_OR_GENERATE_ITEM_DECLARATION,
    K.BLOCK_ITEM_DECLARATION,
    K.FUNCTION_ITEM_DECLARATION,
    K.TASK_ITEM_DECLARATION,
    K.STATEMENT,
    K.STATEMENT_OR_NULL,
    K.FUNCTION_STATEMENT,
    K.GENERATE_BLOCK_OR_NULL,
    K.CONDITIONAL_GENERATE_CONSTRUCT,
})

# Kinds that always end with a newline once rendered.
MAJOR_KINDS: FrozenSet[NodeKind] = frozenset({
    K.MODULE_DECLARATION,
    K.MODULE_ITEM,
    K.NON_PORT_MODULE_ITEM,
    K.MODULE_OR_GENERATE_ITEM,
    K.MODULE_OR_GENERATE_ITEM_DECLARATION,
    K.PORT_DECLARATION,
    K.INPUT_DECLARATION,
    K.OUTPUT_DECLARATION,
    K.INOUT_DECLARATION,
    K.TF_INPUT_DECLARATION,
    K.TF_OUTPUT_DECLARATION,
    K.TF_INOUT_DECLARATION,
    K.NET_DECLARATION,
    K.REG_DECLARATION,
    K.INTEGER_DECLARATION,
    K.REAL_DECLARATION,
    K.TIME_DECLARATION,
    K.GENVAR_DECLARATION,
    K.BLOCK_ITEM_DECLARATION,
    K.PARAMETER_DECLARATION,
    K.LOCAL_PARAMETER_DECLARATION,
    K.MODULE_INSTANTIATION,
    K.CONTINUOUS_ASSIGN,
    K.ALWAYS_CONSTRUCT,
    K.INITIAL_CONSTRUCT,
    K.STATEMENT,
    K.STATEMENT_OR_NULL,
    K.FUNCTION_STATEMENT,
    K.SEQ_BLOCK,
    K.CONDITIONAL_STATEMENT,
    K.CASE_STATEMENT,
    K.CASE_ITEM,
    K.LOOP_STATEMENT,
    K.PROCEDURAL_TIMING_CONTROL_STATEMENT,
    K.GENERATE_REGION,
    K.LOOP_GENERATE_CONSTRUCT,
    K.CONDITIONAL_GENERATE_CONSTRUCT,
    K.IF_GENERATE_CONSTRUCT,
    K.GENERATE_BLOCK,
    K.FUNCTION_DECLARATION,
    K.TASK_DECLARATION,
})

# Kinds rendered inside a line; never given a newline by the dispatcher.
INLINE_KINDS: FrozenSet[NodeKind] = frozenset({
    K.EXPRESSION,
    K.CONSTANT_EXPRESSION,
    K.PRIMARY,
    K.HIERARCHICAL_IDENTIFIER,
    K.RANGE,
    K.DIMENSION,
    K.EVENT_CONTROL,
    K.DELAY_CONTROL,
    K.NAMED_PORT_CONNECTION,
    K.ORDERED_PORT_CONNECTION,
    K.NAMED_PARAMETER_ASSIGNMENT,
    K.ORDERED_PARAMETER_ASSIGNMENT,
    K.BLOCKING_ASSIGNMENT,
    K.NONBLOCKING_ASSIGNMENT,
    K.VARIABLE_ASSIGNMENT,
    K.NET_ASSIGNMENT,
    K.PARAM_ASSIGNMENT,
    K.NET_LVALUE,
    K.VARIABLE_LVALUE,
    K.MODULE_IDENTIFIER,
})

# Kinds that place their own first-line indentation.
SELF_INDENTED_KINDS: FrozenSet[NodeKind] = frozenset({
    K.SOURCE_TEXT,
    K.MODULE_DECLARATION,
})

# Kinds inside which ':' separates the bounds of a range.
RANGE_CONTEXT_KINDS: FrozenSet[NodeKind] = frozenset({
    K.RANGE,
    K.DIMENSION,
    K.RANGE_EXPRESSION,
    K.CONSTANT_RANGE_EXPRESSION,
})

SIMPLE_ASSIGNMENT_KINDS: FrozenSet[NodeKind] = frozenset({
    K.BLOCKING_ASSIGNMENT,
    K.NONBLOCKING_ASSIGNMENT,
})

PORT_DECLARATION_KINDS: FrozenSet[NodeKind] = frozenset({
    K.INPUT_DECLARATION,
    K.OUTPUT_DECLARATION,
    K.INOUT_DECLARATION,
    K.TF_INPUT_DECLARATION,
    K.TF_OUTPUT_DECLARATION,
    K.TF_INOUT_DECLARATION,
})

SIGNAL_DECLARATION_KINDS: FrozenSet[NodeKind] = frozenset({
    K.NET_DECLARATION,
    K.REG_DECLARATION,
    K.INTEGER_DECLARATION,
    K.REAL_DECLARATION,
    K.TIME_DECLARATION,
    K.GENVAR_DECLARATION,
})

PARAMETER_DECLARATION_KINDS: FrozenSet[NodeKind] = frozenset({
    K.PARAMETER_DECLARATION,
    K.LOCAL_PARAMETER_DECLARATION,
})

# Lexeme sets, compared case-sensitively as Verilog keywords are lower case.
NET_TYPE_KEYWORDS: FrozenSet[str] = frozenset({
    "wire", "reg", "tri", "tri0", "tri1", "triand", "trior", "trireg",
    "wand", "wor", "supply0", "supply1", "uwire", "logic",
})
VARIABLE_TYPE_KEYWORDS: FrozenSet[str] = frozenset({
    "integer", "real", "realtime", "time", "genvar",
})
SIGNING_KEYWORDS: FrozenSet[str] = frozenset({"signed", "unsigned"})


__all__ = [
    "NodeKind",
    "node_kind",
    "WRAPPER_KINDS",
    "MAJOR_KINDS",
    "INLINE_KINDS",
    "SELF_INDENTED_KINDS",
    "RANGE_CONTEXT_KINDS",
    "SIMPLE_ASSIGNMENT_KINDS",
    "PORT_DECLARATION_KINDS",
    "SIGNAL_DECLARATION_KINDS",
    "PARAMETER_DECLARATION_KINDS",
    "NET_TYPE_KEYWORDS",
    "VARIABLE_TYPE_KEYWORDS",
    "SIGNING_KEYWORDS",
]
