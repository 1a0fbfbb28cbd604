#!/usr/bin/env python3
"""
YAMLVALID CORE MODELS
---------------------
Defines the fundamental data structures used across the yamlvalid engine.
A parsed manifest is held as a tree of tagged Nodes, and every problem
found while walking that tree is reported as a Diagnostic.

Author: yamlvalid Team
Date: 2026-10-19
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple, Union

Number = Union[int, float]


class NodeKind(Enum):
    """The runtime shape of a node. Values double as the names used in messages."""
    MAPPING = "object"
    SEQUENCE = "array"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Node:
    """
    A single value of the document tree.

    Mappings hold a Dict[str, Node], sequences a List[Node], and scalars
    their plain Python value. Accessors never raise: a missing key or a
    shape mismatch is signalled by returning None.
    """
    kind: NodeKind
    value: Any = None
    line: Optional[int] = None   # 1-based line of the key or item in the source

    @property
    def is_mapping(self) -> bool:
        return self.kind is NodeKind.MAPPING

    @property
    def is_sequence(self) -> bool:
        return self.kind is NodeKind.SEQUENCE

    def get(self, key: str) -> Optional["Node"]:
        if not self.is_mapping:
            return None
        return self.value.get(key)

    def entries(self) -> Iterator[Tuple[str, "Node"]]:
        """Mapping entries in stored order (empty for non-mappings)."""
        if self.is_mapping:
            yield from self.value.items()

    def items(self) -> List["Node"]:
        return list(self.value) if self.is_sequence else []

    def as_string(self) -> Optional[str]:
        return self.value if self.kind is NodeKind.STRING else None

    def as_integer(self) -> Optional[Number]:
        """
        The one place where integer leniency lives.

        Parsers may hand numeric literals over as floats, so both integer
        and finite float nodes count as integers. Strings and booleans never
        do, however numeric they look.
        """
        if self.kind is NodeKind.INTEGER:
            return self.value
        if self.kind is NodeKind.FLOAT and math.isfinite(self.value):
            return self.value
        return None

    def describe(self) -> str:
        """Short text form of a scalar for use inside messages."""
        if self.is_mapping or self.is_sequence:
            return self.kind.value
        if self.kind is NodeKind.NULL:
            return "null"
        if self.kind is NodeKind.BOOLEAN:
            return "true" if self.value else "false"
        return str(self.value)


class Violation(Enum):
    """Classification of a reported problem."""
    PARSE_ERROR = "parse_error"
    REQUIRED = "required"
    WRONG_TYPE = "wrong_type"
    OUT_OF_RANGE = "out_of_range"
    BAD_FORMAT = "bad_format"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Diagnostic:
    """
    One validation violation.

    Rules produce Diagnostics without knowing where the document came from;
    the source name is only attached when the Diagnostic is rendered.
    """
    path: str                     # e.g. 'spec.containers[0].ports[1].protocol'
    violation: Violation
    message: str                  # e.g. 'must be integer'
    line: Optional[int] = None

    def render(self, source: str) -> str:
        locator = f"{source}:{self.line}" if self.line is not None else f"{source}:"
        if not self.path:
            return f"{locator} {self.message}"
        return f"{locator} {self.path} {self.message}"
