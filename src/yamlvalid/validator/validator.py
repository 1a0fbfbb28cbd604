#!/usr/bin/env python3
"""
YAMLVALID VALIDATOR - The Judge
-------------------------------
Entry point of the validation engine. The PodValidator loads raw manifest
bytes, walks the resulting tree through the Pod rules and renders every
violation as a single-line diagnostic.

A syntactically broken document yields exactly one diagnostic and no rule
is run. Everything else is reported as diagnostics; the validator does not
raise for a document that parses.

Author: yamlvalid Team
Date: 2026-10-19
"""

import itertools
import logging
from typing import Iterator, List, Optional

from yamlvalid.core.config import ValidatorConfig
from yamlvalid.core.models import Diagnostic, Node, NodeKind, Violation
from yamlvalid.parsing.loader import DocumentLoader, DocumentParseError
from yamlvalid.rules.pod_rules import (
    check_api_version,
    check_kind,
    check_metadata_section,
    check_spec_section,
    wrong_type,
)

logger = logging.getLogger("yamlvalid.validator")


class PodValidator:
    """
    Validates Pod manifests in collect-all or fail-fast mode.
    Holds no per-document state, so one instance can serve any number of
    documents.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()
        self.loader = DocumentLoader()

        # Top-level sections, in reporting order
        self.active_rules = [
            check_api_version,
            check_kind,
            check_metadata_section,
            check_spec_section,
        ]

    def validate(self, data: bytes, display_name: str) -> List[str]:
        """
        Returns the rendered diagnostics for one document; empty means valid.
        In fail-fast mode the list holds at most one entry.
        """
        found = self.diagnose(data)
        if self.config.stop_on_first_error:
            found = itertools.islice(found, 1)
        messages = [diagnostic.render(display_name) for diagnostic in found]
        logger.debug(f"{display_name}: {len(messages)} diagnostic(s)")
        return messages

    def first_error(self, data: bytes, display_name: str) -> Optional[str]:
        """The first diagnostic in traversal order, or None if the document is valid."""
        first = next(self.diagnose(data), None)
        return first.render(display_name) if first else None

    def diagnose(self, data: bytes) -> Iterator[Diagnostic]:
        """Lazily yields Diagnostics in traversal order."""
        try:
            document = self.loader.load(data)
        except DocumentParseError as e:
            yield Diagnostic("", Violation.PARSE_ERROR, f"invalid YAML format: {e.message}", e.line)
            return
        yield from self.check_tree(document)

    def check_tree(self, document: Node) -> Iterator[Diagnostic]:
        if not document.is_mapping:
            yield wrong_type(document, "document", NodeKind.MAPPING)
            return
        for rule in self.active_rules:
            yield from rule(document)


def validate(data: bytes, display_name: str, stop_on_first_error: bool = False) -> List[str]:
    """Validates one document with a throwaway PodValidator."""
    validator = PodValidator(ValidatorConfig(stop_on_first_error=stop_on_first_error))
    return validator.validate(data, display_name)
