#!/usr/bin/env python3
"""
YAMLVALID CONFIGURATION
-----------------------
Operating-mode switches shared by the validator, the engine and the CLI.

Author: yamlvalid Team
Date: 2026-10-19
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidatorConfig:
    """
    stop_on_first_error selects fail-fast mode: the walk ends at the first
    violation and at most one diagnostic is returned. The default is
    collect-all mode.
    """
    stop_on_first_error: bool = False
