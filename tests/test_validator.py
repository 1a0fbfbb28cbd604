#!/usr/bin/env python3
"""
YAMLVALID VALIDATOR SUITE - End-to-End Verification
---------------------------------------------------
Feeds complete manifests through the PodValidator and checks the rendered
diagnostics, their order and both operating modes.

Author: yamlvalid Team
Date: 2026-10-19
"""

import copy
import json

import pytest

from yamlvalid.core.config import ValidatorConfig
from yamlvalid.validator.validator import PodValidator, validate

MINIMAL_POD = {
    "apiVersion": "v1",
    "kind": "Pod",
    "metadata": {"name": "web"},
    "spec": {
        "containers": [
            {"name": "web_app", "image": "registry.bigbrother.io/app:v1", "resources": {}}
        ]
    },
}

THREE_VIOLATIONS = b"""\
apiVersion: v2
kind: Pod
metadata:
  name: web
spec:
  containers:
    - name: WebApp
      image: registry.bigbrother.io/app:v1
      ports:
        - containerPort: 70000
      resources: {}
"""

FULL_POD = b"""\
apiVersion: v1
kind: Pod
metadata:
  name: web
  namespace: production
  labels:
    app: web
    release: 2024-01-01
spec:
  os:
    name: linux
  containers:
    - name: web_app
      image: registry.bigbrother.io/web:1.4.2
      ports:
        - containerPort: 8080
          protocol: TCP
        - containerPort: 9090.0
          protocol: UDP
      resources:
        requests:
          cpu: 1
          memory: 256Mi
        limits:
          cpu: 2
          memory: 1Gi
      readinessProbe:
        httpGet:
          path: /ready
          port: 8080
      livenessProbe:
        httpGet:
          path: /healthz
          port: 8080
"""


def as_bytes(doc) -> bytes:
    # JSON is valid YAML and keeps insertion order
    return json.dumps(doc).encode("utf-8")


def without(doc, dotted: str):
    doc = copy.deepcopy(doc)
    *parents, last = dotted.split(".")
    target = doc
    for key in parents:
        target = target[key]
    del target[last]
    return doc


def test_minimal_pod_is_valid():
    assert validate(as_bytes(MINIMAL_POD), "pod.yaml") == []


def test_full_pod_is_valid():
    assert validate(FULL_POD, "pod.yaml") == []


def test_wrong_kind_reports_single_diagnostic():
    doc = dict(MINIMAL_POD, kind="Deployment")
    diagnostics = validate(as_bytes(doc), "pod.yaml")
    assert diagnostics == ["pod.yaml:1 kind must be 'Pod'"]


@pytest.mark.parametrize("field", [
    "apiVersion", "kind", "metadata", "spec", "metadata.name", "spec.containers",
])
def test_missing_required_field_is_named(field):
    diagnostics = validate(as_bytes(without(MINIMAL_POD, field)), "pod.yaml")
    assert diagnostics, f"removing {field} went unnoticed"
    assert any(f" {field} is required" in d for d in diagnostics)


def test_collect_all_reports_every_violation_in_order():
    diagnostics = validate(THREE_VIOLATIONS, "pod.yaml")
    assert diagnostics == [
        "pod.yaml:1 apiVersion must be 'v1'",
        "pod.yaml:7 spec.containers[0].name must be in snake_case format",
        "pod.yaml:10 spec.containers[0].ports[0].containerPort value out of range",
    ]


def test_fail_fast_reports_only_first_violation():
    diagnostics = validate(THREE_VIOLATIONS, "pod.yaml", stop_on_first_error=True)
    assert diagnostics == ["pod.yaml:1 apiVersion must be 'v1'"]


def test_first_error_matches_head_of_collect_all():
    validator = PodValidator()
    assert validator.first_error(THREE_VIOLATIONS, "pod.yaml") == "pod.yaml:1 apiVersion must be 'v1'"
    assert validator.first_error(as_bytes(MINIMAL_POD), "pod.yaml") is None


def test_fail_fast_on_valid_document_is_empty():
    validator = PodValidator(ValidatorConfig(stop_on_first_error=True))
    assert validator.validate(FULL_POD, "pod.yaml") == []


def test_display_name_is_used_verbatim():
    doc = dict(MINIMAL_POD, apiVersion="v2")
    assert validate(as_bytes(doc), "manifests/web/pod.yaml") == [
        "manifests/web/pod.yaml:1 apiVersion must be 'v1'"
    ]


def test_parse_failure_short_circuits():
    broken = b"apiVersion: v1\nkind: [Pod\nmetadata: {}\n"
    diagnostics = validate(broken, "pod.yaml")
    assert len(diagnostics) == 1
    assert diagnostics[0].startswith("pod.yaml:")
    assert "invalid YAML format" in diagnostics[0]


def test_duplicate_keys_are_a_parse_failure():
    diagnostics = validate(b"apiVersion: v1\napiVersion: v1\n", "pod.yaml")
    assert len(diagnostics) == 1
    assert "invalid YAML format" in diagnostics[0]


def test_undecodable_bytes_are_a_parse_failure():
    diagnostics = validate(b"\xff\xfe\x00garbage", "pod.yaml")
    assert diagnostics == ["pod.yaml: invalid YAML format: input is not valid UTF-8 (invalid start byte)"]


def test_multiple_documents_are_a_parse_failure():
    diagnostics = validate(b"kind: Pod\n---\nkind: Pod\n", "pod.yaml")
    assert len(diagnostics) == 1
    assert "invalid YAML format" in diagnostics[0]


def test_non_mapping_root_is_one_diagnostic():
    assert validate(b"- apiVersion: v1\n", "pod.yaml") == ["pod.yaml:1 document must be an object"]


def test_empty_document_reports_all_top_level_fields():
    assert validate(b"", "pod.yaml") == [
        "pod.yaml:1 apiVersion is required",
        "pod.yaml:1 kind is required",
        "pod.yaml:1 metadata is required",
        "pod.yaml:1 spec is required",
    ]


def test_wrong_types_are_not_also_reported_as_missing():
    doc = {"apiVersion": 1, "kind": None, "metadata": "web", "spec": []}
    assert validate(as_bytes(doc), "pod.yaml") == [
        "pod.yaml:1 apiVersion must be string",
        "pod.yaml:1 kind must be string",
        "pod.yaml:1 metadata must be an object",
        "pod.yaml:1 spec must be an object",
    ]


def test_containers_are_checked_in_sequence_order():
    doc = copy.deepcopy(MINIMAL_POD)
    doc["spec"]["containers"] = [
        {"name": "first", "image": "docker.io/first:v1", "resources": {}},
        "not-a-container",
        {"name": "third", "image": "registry.bigbrother.io/third", "resources": {"limits": {"gpu": 1}}},
    ]
    assert validate(as_bytes(doc), "pod.yaml") == [
        "pod.yaml:1 spec.containers[0].image must be in domain registry.bigbrother.io",
        "pod.yaml:1 spec.containers[1] must be an object",
        "pod.yaml:1 spec.containers[2].image must have a version tag",
        "pod.yaml:1 spec.containers[2].resources.limits.gpu unknown resource type",
    ]


def test_missing_field_points_at_parent_line():
    manifest = b"""\
apiVersion: v1
kind: Pod
metadata:
  name: web
spec:
  containers:
    - name: web_app
      image: registry.bigbrother.io/app:v1
"""
    assert validate(manifest, "pod.yaml") == ["pod.yaml:7 spec.containers[0].resources is required"]


def test_aliased_container_is_checked_at_each_reference():
    manifest = b"""\
apiVersion: v1
kind: Pod
metadata:
  name: web
spec:
  containers:
    - &base
      name: WebApp
      image: registry.bigbrother.io/app:v1
      resources: {}
    - *base
"""
    assert validate(manifest, "pod.yaml") == [
        "pod.yaml:8 spec.containers[0].name must be in snake_case format",
        "pod.yaml:8 spec.containers[1].name must be in snake_case format",
    ]


def test_recursive_alias_is_a_parse_failure():
    diagnostics = validate(b"apiVersion: v1\nkind: Pod\nmetadata: &m\n  self: *m\n", "pod.yaml")
    assert len(diagnostics) == 1
    assert "invalid YAML format: recursive alias is not supported" in diagnostics[0]
