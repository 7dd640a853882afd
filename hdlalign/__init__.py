"""
Column-alignment formatter for Verilog.

Given the syntax tree of a Verilog source (JSON produced by an external
parser) the formatter re-renders the code with deterministic column
alignment for ports, signal declarations, parameter lists, instantiations
and continuous assignments. Every comment of the tree is written exactly
once. Without a tree, a line-by-line regex aligner applies the same column
table to the lines it recognises.

The code is organised into several modules:

* ``syntax`` – pydantic models for the syntax tree, the closed vocabulary
  of node kinds and the loaders (JSON files or an external parser).
* ``formatting`` – the column layout engine, the comment ledger, the raw
  text reconstructor, the construct renderers, the tree dispatcher and the
  regex fallback.
* ``config`` – the alignment column table and workspace configuration.
* ``instance`` – instantiation templates derived from a module header.
* ``cli`` – the ``hdlalign`` command line interface.
"""

from importlib import metadata as _metadata

try:  # pragma: no cover - metadata fallback for source trees
    __version__ = _metadata.version("hdlalign")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = "0.1.0"

__all__ = ["__version__"]
