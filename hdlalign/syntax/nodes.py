"""
Pydantic models for the syntax tree consumed by the formatter.

The tree is produced by an external Verilog parser and handed over as JSON.
Each node is either a terminal (``value`` holds the lexeme) or a non-terminal
(``children`` holds the ordered sub-nodes). Comments are attached to the node
they were found next to, usually a token, and carry the index of the token
they were lexed with. That index identifies a comment even when the parser
attaches it to two neighbouring tokens.

Example:
    >>> from hdlalign.syntax.nodes import SyntaxNode
    >>> tree = SyntaxNode.model_validate({
    ...     "name": "IDENTIFIER",
    ...     "value": "clk",
    ...     "trailingComments": [
    ...         {"text": "// clock", "kind": "line", "originalTokenIndex": 4}
    ...     ],
    ... })
    >>> tree.is_terminal
    True

Models are frozen: the formatter reads the tree and never changes it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CommentKind(str, Enum):
    """Lexical kind of a comment."""

    LINE = "line"
    BLOCK = "block"


class CommentInfo(BaseModel):
    """A comment as lexed by the parser, including its delimiters."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    text: str
    kind: CommentKind = CommentKind.BLOCK
    original_token_index: int = Field(..., alias="originalTokenIndex")

    @model_validator(mode="before")
    @classmethod
    def _infer_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("kind"):
            text = str(data.get("text", ""))
            data = dict(data)
            data["kind"] = CommentKind.LINE if text.lstrip().startswith("//") else CommentKind.BLOCK
        return data

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_line(self) -> bool:
        return self.kind is CommentKind.LINE


class SyntaxNode(BaseModel):
    """One node of the syntax tree."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    name: str
    value: Optional[str] = None
    children: List["SyntaxNode"] = Field(default_factory=list)
    leading_comments: List[CommentInfo] = Field(default_factory=list, alias="leadingComments")
    trailing_comments: List[CommentInfo] = Field(default_factory=list, alias="trailingComments")

    @field_validator("children", "leading_comments", "trailing_comments", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_terminal(self) -> bool:
        return self.value is not None and not self.children

    @property
    def text(self) -> str:
        return self.value or ""

    def tokens(self) -> Iterator["SyntaxNode"]:
        """Yield the terminals below this node in source order."""
        if self.is_terminal:
            yield self
            return
        for child in self.children:
            yield from child.tokens()

    def first_token(self) -> Optional["SyntaxNode"]:
        return next(self.tokens(), None)

    def find_first(self, name: str) -> Optional["SyntaxNode"]:
        """Depth-first search for the first descendant named ``name``."""
        for child in self.children:
            if child.name == name:
                return child
            found = child.find_first(name)
            if found is not None:
                return found
        return None

    @classmethod
    def token(
        cls,
        name: str,
        value: str,
        leading: Iterable[CommentInfo] = (),
        trailing: Iterable[CommentInfo] = (),
    ) -> "SyntaxNode":
        return cls(
            name=name,
            value=value,
            leading_comments=list(leading),
            trailing_comments=list(trailing),
        )

    @classmethod
    def tree(cls, name: str, *children: "SyntaxNode", **comments: Iterable[CommentInfo]) -> "SyntaxNode":
        return cls(
            name=name,
            children=list(children),
            leading_comments=list(comments.get("leading", ())),
            trailing_comments=list(comments.get("trailing", ())),
        )


SyntaxNode.model_rebuild()


def comment(text: str, index: int) -> CommentInfo:
    """Build a :class:`CommentInfo`, inferring its kind from the delimiter."""
    kind = CommentKind.LINE if text.startswith("//") else CommentKind.BLOCK
    return CommentInfo(text=text, kind=kind, original_token_index=index)


__all__ = ["CommentKind", "CommentInfo", "SyntaxNode", "comment"]
