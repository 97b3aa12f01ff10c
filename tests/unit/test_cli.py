"""Unit tests for the kube-stack CLI."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from kube_stack.cli import app

runner = CliRunner()

STACK_TEMPLATE = '{\n  "Cluster": "{{ cluster_name }}",\n  "Worker": "{{ user_data_worker }}"\n}\n'


@pytest.fixture
def cluster_file(tmp_path, cluster_document, assets_dir):
    """A cluster file with TLS assets and templates next to it."""
    path = tmp_path / "cluster.yaml"
    path.write_text(yaml.safe_dump(cluster_document))

    userdata = tmp_path / "userdata"
    userdata.mkdir()
    (userdata / "cloud-config-controller").write_text("#cloud-config\n")
    (userdata / "cloud-config-worker").write_text("#cloud-config\n")
    (tmp_path / "stack-template.json").write_text(STACK_TEMPLATE)
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "kube-stack version 0.1.0" in result.stdout


def test_validate_help():
    result = runner.invoke(app, ["validate", "--help"])

    assert result.exit_code == 0
    assert "Validate a cluster description" in result.stdout


def test_validate_valid_cluster(cluster_file):
    result = runner.invoke(app, ["validate", str(cluster_file)])

    assert result.exit_code == 0
    assert "Cluster is valid" in result.stdout


def test_validate_invalid_cluster(tmp_path, cluster_document):
    cluster_document["serviceCIDR"] = "10.2.0.0/24"
    path = tmp_path / "cluster.yaml"
    path.write_text(yaml.safe_dump(cluster_document))

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "PodServiceRangeOverlap" in result.stdout


def test_validate_missing_file(tmp_path):
    result = runner.invoke(app, ["validate", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_render_to_stdout(cluster_file):
    result = runner.invoke(app, ["render", str(cluster_file)])

    assert result.exit_code == 0
    document = json.loads(result.stdout)
    assert document["Cluster"] == "test-cluster"
    assert document["Worker"]


def test_render_to_file(cluster_file, tmp_path):
    output = tmp_path / "out" / "stack.json"

    result = runner.invoke(app, ["render", str(cluster_file), "--output", str(output)])

    assert result.exit_code == 0
    assert json.loads(output.read_bytes())["Cluster"] == "test-cluster"


def test_render_with_missing_assets(cluster_file, tmp_path):
    result = runner.invoke(
        app, ["render", str(cluster_file), "--assets-dir", str(tmp_path / "nowhere")]
    )

    assert result.exit_code == 1
    assert "TLS asset not found" in result.stdout
