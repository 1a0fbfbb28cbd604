#!/usr/bin/env python3
"""
YAMLVALID LOADER - Raw Bytes to Node Tree
-----------------------------------------
Decodes a manifest, parses it with ruamel.yaml's round-trip loader (which
keeps mapping order and line marks) and converts the result into the
tagged Node tree the rules walk.

Author: yamlvalid Team
Date: 2026-10-19
"""

import datetime
import logging
from typing import Any, Dict, Optional, Set

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarbool import ScalarBoolean

from yamlvalid.core.models import Node, NodeKind

logger = logging.getLogger("yamlvalid.loader")


class DocumentParseError(ValueError):
    """The input is not a single well-formed YAML document."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line


class DocumentLoader:
    """
    Turns raw manifest bytes into a Node tree.
    An empty document loads as an empty mapping.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')

    def load(self, data: bytes) -> Node:
        try:
            text = data.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            logger.debug(f"Rejected undecodable input: {e}")
            raise DocumentParseError(f"input is not valid UTF-8 ({e.reason})")

        try:
            raw = self.yaml.load(text)
        except YAMLError as e:
            logger.debug(f"Parser rejected document: {e}")
            raise DocumentParseError(self._describe(e), self._error_line(e))

        if raw is None:
            return Node(NodeKind.MAPPING, {}, 1)
        return self._convert(raw, self._own_line(raw), {}, set())

    def _convert(self, raw: Any, line: Optional[int], shared: Dict[int, Any], active: Set[int]) -> Node:
        """
        Aliases resolve to the anchored object itself, so every collection is
        converted once and its children reused for each later alias. Only the
        line of the referencing key or item differs between the copies.
        """
        if not isinstance(raw, (CommentedMap, CommentedSeq, list)):
            return self._scalar(raw, line)

        kind = NodeKind.MAPPING if isinstance(raw, CommentedMap) else NodeKind.SEQUENCE
        marker = id(raw)
        if marker in shared:
            return Node(kind, shared[marker], line)
        if marker in active:
            raise DocumentParseError("recursive alias is not supported", line)

        active.add(marker)
        if kind is NodeKind.MAPPING:
            children = {}
            for key, value in raw.items():
                children[str(key)] = self._convert(value, self._key_line(raw, key, line), shared, active)
        else:
            children = [self._convert(value, self._item_line(raw, i, line), shared, active)
                        for i, value in enumerate(raw)]
        active.discard(marker)
        shared[marker] = children
        return Node(kind, children, line)

    def _scalar(self, raw: Any, line: Optional[int]) -> Node:
        # bool before int: both bool and ScalarBoolean subclass int
        if raw is None:
            return Node(NodeKind.NULL, None, line)
        if isinstance(raw, (bool, ScalarBoolean)):
            return Node(NodeKind.BOOLEAN, bool(raw), line)
        if isinstance(raw, int):
            return Node(NodeKind.INTEGER, int(raw), line)
        if isinstance(raw, float):
            return Node(NodeKind.FLOAT, float(raw), line)
        if isinstance(raw, str):
            return Node(NodeKind.STRING, str(raw), line)
        if isinstance(raw, (datetime.date, datetime.datetime)):
            return Node(NodeKind.STRING, raw.isoformat(), line)
        return Node(NodeKind.STRING, str(raw), line)

    # --- Line marks (ruamel reports 0-based positions) ---

    def _own_line(self, raw: Any) -> int:
        try:
            return raw.lc.line + 1
        except AttributeError:
            return 1

    def _key_line(self, raw: CommentedMap, key: Any, fallback: Optional[int]) -> Optional[int]:
        try:
            return raw.lc.key(key)[0] + 1
        except (KeyError, TypeError, AttributeError):
            # merged (<<) keys carry no mark of their own
            return fallback

    def _item_line(self, raw: Any, index: int, fallback: Optional[int]) -> Optional[int]:
        try:
            return raw.lc.item(index)[0] + 1
        except (KeyError, TypeError, AttributeError):
            return fallback

    def _error_line(self, error: YAMLError) -> Optional[int]:
        mark = getattr(error, 'problem_mark', None) or getattr(error, 'context_mark', None)
        if mark is None:
            return None
        return mark.line + 1

    def _describe(self, error: YAMLError) -> str:
        problem = getattr(error, 'problem', None)
        context = getattr(error, 'context', None)
        if problem and context:
            return f"{context}, {problem}"
        if problem:
            return str(problem)
        text = str(error).strip()
        return text.splitlines()[0] if text else type(error).__name__
