#!/usr/bin/env python3
"""
YAMLVALID POD RULES - Schema Enforcement
----------------------------------------
Field checkers for the Pod manifest schema. The checkers mirror the shape
of the schema: every section has a function that yields the Diagnostics it
finds and delegates nested sections to their own checkers.

Each field is checked in a fixed sequence (presence, type, domain) and the
first failing check ends the inspection of that field only. Siblings are
always visited, in document order, so consuming the generator partially
(fail-fast) or fully (collect-all) walks the same path.

Author: yamlvalid Team
Date: 2026-10-19
"""

import re
from typing import Iterator, Optional

from yamlvalid.core.models import Diagnostic, Node, NodeKind, Violation

Diagnostics = Iterator[Diagnostic]

API_VERSION = "v1"
KIND = "Pod"
SUPPORTED_OS = ("linux", "windows")
IMAGE_REGISTRY = "registry.bigbrother.io/"
PROTOCOLS = ("TCP", "UDP")
MEMORY_SUFFIXES = ("Gi", "Mi", "Ki")
PORT_RANGE = (1, 65535)

SNAKE_CASE = re.compile(r'[a-z]+(_[a-z]+)*')


# --- Path & diagnostic helpers ---

def child(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def index(path: str, i: int) -> str:
    return f"{path}[{i}]"


def required(parent: Node, path: str) -> Diagnostic:
    return Diagnostic(path, Violation.REQUIRED, "is required", parent.line)


def wrong_type(node: Node, path: str, expected: NodeKind) -> Diagnostic:
    article = "an " if expected in (NodeKind.MAPPING, NodeKind.SEQUENCE) else ""
    return Diagnostic(path, Violation.WRONG_TYPE, f"must be {article}{expected.value}", node.line)


def bad_format(node: Node, path: str, message: str) -> Diagnostic:
    return Diagnostic(path, Violation.BAD_FORMAT, message, node.line)


def out_of_range(node: Node, path: str, message: str = "value out of range") -> Diagnostic:
    return Diagnostic(path, Violation.OUT_OF_RANGE, message, node.line)


def _string_field(parent: Node, key: str, path: str, optional: bool = False):
    """
    Presence and type gate shared by every string field.
    Returns (value, diagnostic); at most one of them is set.
    """
    node = parent.get(key)
    field_path = child(path, key)
    if node is None:
        return None, (None if optional else required(parent, field_path))
    value = node.as_string()
    if value is None:
        return None, wrong_type(node, field_path, NodeKind.STRING)
    return value, None


def _port_field(parent: Node, key: str, path: str) -> Optional[Diagnostic]:
    node = parent.get(key)
    field_path = child(path, key)
    if node is None:
        return required(parent, field_path)
    port = node.as_integer()
    if port is None:
        return wrong_type(node, field_path, NodeKind.INTEGER)
    low, high = PORT_RANGE
    if not low <= port <= high:
        return out_of_range(node, field_path)
    return None


# --- Top level ---

def check_api_version(document: Node) -> Diagnostics:
    value, problem = _string_field(document, "apiVersion", "")
    if problem:
        yield problem
    elif value != API_VERSION:
        yield bad_format(document.get("apiVersion"), "apiVersion", f"must be '{API_VERSION}'")


def check_kind(document: Node) -> Diagnostics:
    value, problem = _string_field(document, "kind", "")
    if problem:
        yield problem
    elif value != KIND:
        yield bad_format(document.get("kind"), "kind", f"must be '{KIND}'")


def check_metadata_section(document: Node) -> Diagnostics:
    metadata = document.get("metadata")
    if metadata is None:
        yield required(document, "metadata")
    elif not metadata.is_mapping:
        yield wrong_type(metadata, "metadata", NodeKind.MAPPING)
    else:
        yield from check_metadata(metadata, "metadata")


def check_spec_section(document: Node) -> Diagnostics:
    spec = document.get("spec")
    if spec is None:
        yield required(document, "spec")
    elif not spec.is_mapping:
        yield wrong_type(spec, "spec", NodeKind.MAPPING)
    else:
        yield from check_spec(spec, "spec")


# --- Metadata ---

def check_metadata(metadata: Node, path: str) -> Diagnostics:
    name, problem = _string_field(metadata, "name", path)
    if problem:
        yield problem
    elif name == "":
        # an empty name counts as a missing one
        yield required(metadata.get("name"), child(path, "name"))

    _, problem = _string_field(metadata, "namespace", path, optional=True)
    if problem:
        yield problem

    labels = metadata.get("labels")
    if labels is None:
        return
    labels_path = child(path, "labels")
    if not labels.is_mapping:
        yield wrong_type(labels, labels_path, NodeKind.MAPPING)
        return
    for key, value in labels.entries():
        if value.as_string() is None:
            yield wrong_type(value, child(labels_path, key), NodeKind.STRING)


# --- Spec ---

def check_spec(spec: Node, path: str) -> Diagnostics:
    os_node = spec.get("os")
    if os_node is not None:
        yield from check_os(os_node, child(path, "os"))

    containers = spec.get("containers")
    containers_path = child(path, "containers")
    if containers is None:
        yield required(spec, containers_path)
        return
    if not containers.is_sequence:
        yield wrong_type(containers, containers_path, NodeKind.SEQUENCE)
        return
    if not containers.items():
        yield Diagnostic(containers_path, Violation.REQUIRED,
                         "must contain at least one container", containers.line)
    for i, container in enumerate(containers.items()):
        container_path = index(containers_path, i)
        if container.is_mapping:
            yield from check_container(container, container_path)
        else:
            yield wrong_type(container, container_path, NodeKind.MAPPING)


def check_os(os_node: Node, path: str) -> Diagnostics:
    if not os_node.is_mapping:
        # a bare value such as 'os: linux' is reported as an unsupported os
        yield bad_format(os_node, path, f"has unsupported value '{os_node.describe()}'")
        return
    name, problem = _string_field(os_node, "name", path)
    if problem:
        yield problem
    elif name not in SUPPORTED_OS:
        yield bad_format(os_node.get("name"), child(path, "name"), f"has unsupported value '{name}'")


# --- Containers ---

def check_container(container: Node, path: str) -> Diagnostics:
    name, problem = _string_field(container, "name", path)
    if problem:
        yield problem
    elif not SNAKE_CASE.fullmatch(name):
        yield bad_format(container.get("name"), child(path, "name"), "must be in snake_case format")

    yield from check_image(container, path)

    ports = container.get("ports")
    if ports is not None:
        ports_path = child(path, "ports")
        if not ports.is_sequence:
            yield wrong_type(ports, ports_path, NodeKind.SEQUENCE)
        else:
            for i, port in enumerate(ports.items()):
                port_path = index(ports_path, i)
                if port.is_mapping:
                    yield from check_container_port(port, port_path)
                else:
                    yield wrong_type(port, port_path, NodeKind.MAPPING)

    resources = container.get("resources")
    resources_path = child(path, "resources")
    if resources is None:
        yield required(container, resources_path)
    elif not resources.is_mapping:
        yield wrong_type(resources, resources_path, NodeKind.MAPPING)
    else:
        yield from check_resources(resources, resources_path)

    for probe_key in ("readinessProbe", "livenessProbe"):
        probe = container.get(probe_key)
        if probe is None:
            continue
        probe_path = child(path, probe_key)
        if probe.is_mapping:
            yield from check_probe(probe, probe_path)
        else:
            yield wrong_type(probe, probe_path, NodeKind.MAPPING)


def check_image(container: Node, path: str) -> Diagnostics:
    image, problem = _string_field(container, "image", path)
    if problem:
        yield problem
        return
    node = container.get("image")
    image_path = child(path, "image")
    # registry and tag are independent: both may be reported
    if not image.startswith(IMAGE_REGISTRY):
        yield bad_format(node, image_path, f"must be in domain {IMAGE_REGISTRY.rstrip('/')}")
    if ":" not in image:
        yield bad_format(node, image_path, "must have a version tag")


def check_container_port(port: Node, path: str) -> Diagnostics:
    problem = _port_field(port, "containerPort", path)
    if problem:
        yield problem

    protocol, problem = _string_field(port, "protocol", path, optional=True)
    if problem:
        yield problem
    elif protocol is not None and protocol not in PROTOCOLS:
        yield bad_format(port.get("protocol"), child(path, "protocol"), "must be 'TCP' or 'UDP'")


# --- Resources ---

def check_resources(resources: Node, path: str) -> Diagnostics:
    for section in ("requests", "limits"):
        requirements = resources.get(section)
        if requirements is None:
            continue
        section_path = child(path, section)
        if requirements.is_mapping:
            yield from check_resource_requirements(requirements, section_path)
        else:
            yield wrong_type(requirements, section_path, NodeKind.MAPPING)


def check_resource_requirements(requirements: Node, path: str) -> Diagnostics:
    for name, value in requirements.entries():
        entry_path = child(path, name)
        if name == "cpu":
            cpu = value.as_integer()
            if cpu is None:
                yield wrong_type(value, entry_path, NodeKind.INTEGER)
            elif cpu <= 0:
                yield out_of_range(value, entry_path, "must be positive")
        elif name == "memory":
            memory = value.as_string()
            if memory is None:
                yield wrong_type(value, entry_path, NodeKind.STRING)
            elif not memory.endswith(MEMORY_SUFFIXES):
                yield bad_format(value, entry_path, "must end with Gi, Mi, or Ki")
        else:
            yield Diagnostic(entry_path, Violation.UNKNOWN, "unknown resource type", value.line)


# --- Probes ---

def check_probe(probe: Node, path: str) -> Diagnostics:
    http_get = probe.get("httpGet")
    http_path = child(path, "httpGet")
    if http_get is None:
        yield required(probe, http_path)
        return
    if not http_get.is_mapping:
        yield wrong_type(http_get, http_path, NodeKind.MAPPING)
        return

    route, problem = _string_field(http_get, "path", http_path)
    if problem:
        yield problem
    elif not route.startswith("/"):
        yield bad_format(http_get.get("path"), child(http_path, "path"), "must be absolute")

    problem = _port_field(http_get, "port", http_path)
    if problem:
        yield problem
