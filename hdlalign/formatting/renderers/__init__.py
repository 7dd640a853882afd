"""Construct renderers, one mixin per family of syntax constructs."""

from .base import RendererBase, unwrap
from .declarations import DeclarationRenderers
from .instances import InstanceRenderers
from .modules import ModuleRenderers
from .statements import StatementRenderers, is_collapsible_block

__all__ = [
    "DeclarationRenderers",
    "InstanceRenderers",
    "ModuleRenderers",
    "RendererBase",
    "StatementRenderers",
    "is_collapsible_block",
    "unwrap",
]
