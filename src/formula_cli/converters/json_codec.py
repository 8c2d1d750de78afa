"""
JSON interchange format for formula trees.

Only the persistent part of a tree is written: the cursor is never encoded
and never recreated on decode. Incoming documents are validated with
pydantic models before any node is built, so a malformed document fails as
a whole instead of being half-decoded.

Wire shape::

    {"cursorPosition": 1,
     "children": [{"type": "Leaf", "expression": "x"},
                  {"type": "Function", "expression": "\\frac",
                   "args": ["braces", "braces"],
                   "argNodes": [{...}, {...}]}]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..core.exceptions import FormatError
from ..core.formula_model import Cursor, Element, Node, TeXArg, TeXFunction, TeXLeaf

logger = logging.getLogger(__name__)

LEAF_TAG = "Leaf"
FUNCTION_TAG = "Function"

# Argument names in older documents carry this prefix.
_LEGACY_ARG_PREFIX = "TeXArg."


class LeafPayload(BaseModel):
    """A leaf as found in an interchange document."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["Leaf", "TeXLeaf"]
    expression: str
    # Set for children written without a type tag, which is how a cursor was
    # encoded. Only these are dropped when empty.
    untagged: bool = False


class FunctionPayload(BaseModel):
    """A function as found in an interchange document."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["Function", "TeXFunction"]
    expression: str
    args: List[TeXArg] = Field(min_length=1)
    argNodes: List[NodePayload]

    @field_validator("args", mode="before")
    @classmethod
    def _strip_legacy_prefix(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [
            arg[len(_LEGACY_ARG_PREFIX):] if isinstance(arg, str) and arg.startswith(_LEGACY_ARG_PREFIX) else arg
            for arg in value
        ]

    @model_validator(mode="after")
    def _check_arg_nodes(self) -> FunctionPayload:
        if len(self.args) != len(self.argNodes):
            raise ValueError(
                f"args has {len(self.args)} entries but argNodes has {len(self.argNodes)}"
            )
        return self


ElementPayload = Annotated[Union[LeafPayload, FunctionPayload], Field(discriminator="type")]


class NodePayload(BaseModel):
    """A node as found in an interchange document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    cursor_position: int = Field(validation_alias=AliasChoices("cursorPosition", "courserPosition"))
    children: List[ElementPayload]

    @model_validator(mode="before")
    @classmethod
    def _default_leaf_type(cls, data: Any) -> Any:
        # Untagged children were written for plain TeX and the cursor; both
        # decode as leaves and are marked so empty ones can be dropped.
        if isinstance(data, dict) and isinstance(data.get("children"), list):
            children = []
            for child in data["children"]:
                if isinstance(child, dict) and "type" not in child:
                    child = {**child, "type": LEAF_TAG, "untagged": True}
                children.append(child)
            data = {**data, "children": children}
        return data

    @model_validator(mode="after")
    def _check_cursor_position(self) -> NodePayload:
        if not 0 <= self.cursor_position <= len(self.children):
            raise ValueError(
                f"cursorPosition {self.cursor_position} is outside [0, {len(self.children)}]"
            )
        return self


FunctionPayload.model_rebuild()
NodePayload.model_rebuild()


class FormulaJSONConverter:
    """
    Converts formula trees to and from the JSON interchange format.

    Encoding skips the cursor. Decoding drops untagged empty entries, which is
    how older encoders wrote a cursor, and never builds a cursor.
    """

    def __init__(self, indent: Union[int, None] = 2):
        self.indent = indent

    def to_dict(self, node: Node) -> Dict[str, Any]:
        """Encode ``node`` and everything it owns."""
        return {
            "cursorPosition": node.cursor_position,
            "children": [
                self._element_to_dict(child)
                for child in node.children
                if not isinstance(child, Cursor)
            ],
        }

    def _element_to_dict(self, element: Element) -> Dict[str, Any]:
        if isinstance(element, TeXLeaf):
            return {"type": LEAF_TAG, "expression": element.expression}
        if isinstance(element, TeXFunction):
            return {
                "type": FUNCTION_TAG,
                "expression": element.expression,
                "args": [arg.value for arg in element.args],
                "argNodes": [self.to_dict(arg_node) for arg_node in element.arg_nodes],
            }
        raise TypeError(f"Cannot encode TeX element: {element!r}")

    def from_dict(self, data: Dict[str, Any]) -> Node:
        """Decode a root node; raises ``FormatError`` for invalid documents."""
        try:
            payload = NodePayload.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid formula document: {e.error_count()} validation error(s)")
            raise FormatError(f"Invalid formula document: {e}", detail=e.errors()) from e
        return self._build_node(payload)

    def _build_node(self, payload: NodePayload) -> Node:
        node = Node()
        position = payload.cursor_position
        for index, child in enumerate(payload.children):
            if isinstance(child, FunctionPayload):
                arg_nodes = [self._build_node(arg_node) for arg_node in child.argNodes]
                for arg, arg_node in zip(child.args, arg_nodes):
                    if arg is TeXArg.POWER and arg_node.children:
                        logger.warning(
                            f"Power slot of {child.expression!r} holds content that is never rendered"
                        )
                node.children.append(TeXFunction(child.expression, node, child.args, arg_nodes))
            elif child.expression or not child.untagged:
                node.children.append(TeXLeaf(child.expression))
            else:
                logger.debug(f"Dropping encoded cursor at index {index}")
                if index < payload.cursor_position:
                    position -= 1
        node.cursor_position = max(0, min(position, len(node.children)))
        return node

    def dumps(self, node: Node) -> str:
        return json.dumps(self.to_dict(node), indent=self.indent, ensure_ascii=False)

    def loads(self, text: str) -> Node:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Formula document is not valid JSON: {e}")
            raise FormatError(f"Formula document is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise FormatError("Formula document must be a JSON object")
        return self.from_dict(data)

    def save(self, node: Node, path: Path) -> None:
        """Write ``node`` to ``path`` as JSON."""
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.dumps(node))
            f.write("\n")

    def load(self, path: Path) -> Node:
        """Read a formula document from ``path``."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            logger.error(f"Formula document {path} is not UTF-8: {e}")
            raise FormatError(f"Formula document {path} is not valid UTF-8 text") from e
        return self.loads(text)
