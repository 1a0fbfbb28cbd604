import pytest

from yamlvalid.cli.main import YamlValidCLI

VALID = """\
apiVersion: v1
kind: Pod
metadata:
  name: web
spec:
  containers:
    - name: web_app
      image: registry.bigbrother.io/app:v1
      resources: {}
"""

INVALID = """\
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


@pytest.fixture
def manifests(tmp_path):
    (tmp_path / "valid.yaml").write_text(VALID)
    (tmp_path / "invalid.yaml").write_text(INVALID)
    return tmp_path


def run(argv, capsys):
    code = YamlValidCLI().run(argv)
    return code, capsys.readouterr().out.splitlines()


def test_valid_file_exits_zero(manifests, capsys):
    code, lines = run([str(manifests / "valid.yaml")], capsys)
    assert code == 0
    assert lines == ["YAML is valid!"]


def test_invalid_file_prints_each_diagnostic(manifests, capsys):
    target = str(manifests / "invalid.yaml")
    code, lines = run([target], capsys)
    assert code == 1
    assert lines == [
        f"{target}:1 apiVersion must be 'v1'",
        f"{target}:7 spec.containers[0].name must be in snake_case format",
        f"{target}:10 spec.containers[0].ports[0].containerPort value out of range",
    ]


def test_fail_fast_flag(manifests, capsys):
    target = str(manifests / "invalid.yaml")
    code, lines = run(["--fail-fast", target], capsys)
    assert code == 1
    assert lines == [f"{target}:1 apiVersion must be 'v1'"]


def test_no_arguments_prints_usage(capsys):
    code, lines = run([], capsys)
    assert code == 1
    assert lines[0].startswith("usage: yamlvalid")


def test_unreadable_file(tmp_path, capsys):
    code, lines = run([str(tmp_path / "absent.yaml")], capsys)
    assert code == 1
    assert lines[0].startswith("Error reading file:")


def test_directory_with_one_bad_file_fails(manifests, capsys):
    code, lines = run([str(manifests)], capsys)
    assert code == 1
    assert len(lines) == 3
    assert "YAML is valid!" not in lines


def test_report_renders_summary(manifests, capsys):
    code, lines = run(["--report", str(manifests / "valid.yaml")], capsys)
    output = "\n".join(lines)
    assert code == 0
    assert "Summary Report" in output
    assert "YAML is valid!" in output


def test_empty_directory(tmp_path, capsys):
    code, lines = run([str(tmp_path)], capsys)
    assert code == 1
    assert "No valid YAML files found" in "\n".join(lines)
