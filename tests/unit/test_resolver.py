"""Unit tests for configuration resolution."""

from unittest.mock import patch

import pytest

from kube_stack.exceptions import CompactionError
from kube_stack.models.assets import ASSET_FILES
from kube_stack.resolver import ConfigResolver, ResolvedConfig, resolve


def test_endpoints(valid_cluster, assets):
    config = resolve(valid_cluster, assets)

    assert config.etcd_endpoints == "http://10.0.0.50:2379"
    assert config.api_servers == "http://10.0.0.50:8080"
    assert config.secure_api_servers == "https://10.0.0.50:443"
    assert config.api_server_endpoint == "https://kube.example.com"


def test_cluster_is_copied(valid_cluster, assets):
    config = ConfigResolver.resolve(valid_cluster, assets)

    assert config.cluster == valid_cluster
    assert config.cluster is not valid_cluster


def test_resolved_config_is_immutable(valid_cluster, assets):
    config = resolve(valid_cluster, assets)

    with pytest.raises(Exception):
        config.etcd_endpoints = "http://elsewhere:2379"


def test_template_context_keys(valid_cluster, assets):
    context = resolve(valid_cluster, assets).template_context()

    for name in valid_cluster.model_dump():
        assert name in context
    for name in ("etcd_endpoints", "api_servers", "secure_api_servers", "api_server_endpoint"):
        assert name in context
    assert set(context["tls_config"]) == set(ASSET_FILES)
    assert "cluster" not in context


def test_compaction_failure_aborts_resolution(valid_cluster, assets):
    with patch("kube_stack.resolver.compact", side_effect=CompactionError("boom")):
        with pytest.raises(CompactionError):
            resolve(valid_cluster, assets)


def test_resolved_config_type(valid_cluster, assets):
    assert isinstance(resolve(valid_cluster, assets), ResolvedConfig)
