#!/usr/bin/env python3
"""
YAMLVALID ENGINE - The Orchestrator
-----------------------------------
The ValidationEngine feeds manifests from disk to the PodValidator and
turns the outcome into per-file reports. It owns all file I/O, directory
discovery with recursion safety gates, and the run summary.

Author: yamlvalid Team
Date: 2026-10-19
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from yamlvalid.core.config import ValidatorConfig
from yamlvalid.validator.validator import PodValidator

logger = logging.getLogger("yamlvalid.engine")

YAML_SUFFIXES = (".yaml", ".yml")


class ValidationEngine:
    """
    Coordinates validation of single files, directories and mixed path lists.
    Errors reading one file never abort a batch.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None,
                 extension: str = ".yaml", max_depth: int = 10):
        self.config = config or ValidatorConfig()
        self.validator = PodValidator(self.config)
        self.extension = extension
        try:
            self.max_depth = int(max_depth)
        except (ValueError, TypeError):
            logger.warning(f"Invalid max_depth '{max_depth}'. Falling back to default: 10")
            self.max_depth = 10

    def validate_file(self, path: str) -> Dict[str, Any]:
        """Reads and validates one manifest."""
        file_path = Path(path)
        name = str(path)

        try:
            data = file_path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading {name}: {e}")
            return self._file_error(name, str(e))

        diagnostics = self.validator.validate(data, name)
        logger.debug(f"Validated {name}: {len(diagnostics)} diagnostic(s)")
        return {
            "file_path": name,
            "status": "INVALID" if diagnostics else "VALID",
            "success": not diagnostics,
            "diagnostics": diagnostics,
            "timestamp": time.time(),
        }

    def discover(self, root: Path) -> List[Path]:
        """
        Recursively collects manifests under root.
        Symlinks are skipped to avoid loops; files nested deeper than
        max_depth are ignored.
        """
        suffixes = {self.extension.lower(), *YAML_SUFFIXES} if self.extension else set(YAML_SUFFIXES)
        found = []
        for candidate in sorted(root.rglob("*")):
            if candidate.is_symlink() or not candidate.is_file():
                continue
            if candidate.suffix.lower() not in suffixes:
                continue
            if len(candidate.relative_to(root).parts) > self.max_depth:
                logger.debug(f"Skipping {candidate}: deeper than max_depth={self.max_depth}")
                continue
            found.append(candidate)
        return found

    def scan_paths(self, paths: Iterable[str],
                   progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """
        Validates every file named in paths, expanding directories.
        Paths that do not exist produce READ_ERROR reports.
        """
        targets = []
        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                targets.extend(str(f) for f in self.discover(path))
            else:
                targets.append(str(raw))

        reports = []
        total = len(targets)
        for processed, target in enumerate(targets, 1):
            reports.append(self.validate_file(target))
            if progress_callback:
                progress_callback(processed, total)
        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not reports:
            return {"total_files": 0, "valid": 0, "invalid": 0, "read_errors": 0, "diagnostics": 0}

        return {
            "total_files": len(reports),
            "valid": sum(1 for r in reports if r.get("status") == "VALID"),
            "invalid": sum(1 for r in reports if r.get("status") == "INVALID"),
            "read_errors": sum(1 for r in reports if r.get("status") == "READ_ERROR"),
            "diagnostics": sum(len(r.get("diagnostics", [])) for r in reports),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _file_error(self, path: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": "READ_ERROR", "error": error,
            "success": False, "diagnostics": [], "timestamp": time.time(),
        }
