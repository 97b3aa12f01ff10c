"""Pytest configuration and shared fixtures."""

import pytest
from hypothesis import Verbosity, settings

from kube_stack.models.assets import ASSET_FILES, SecurityAssetBundle
from kube_stack.models.cluster import default_cluster, overlay

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")

VALID_CLUSTER_DOCUMENT = {
    "clusterName": "test-cluster",
    "externalDNSName": "kube.example.com",
    "keyName": "test-key",
    "region": "us-west-1",
    "availabilityZone": "us-west-1c",
    "vpcCIDR": "10.0.0.0/16",
    "instanceCIDR": "10.0.0.0/24",
    "controllerIP": "10.0.0.50",
    "podCIDR": "10.2.0.0/16",
    "serviceCIDR": "10.3.0.0/24",
    "kubernetesServiceIP": "10.3.0.1",
    "dnsServiceIP": "10.3.0.10",
}


def make_assets() -> SecurityAssetBundle:
    """Build a bundle of fake PEM contents, one per logical asset."""
    return SecurityAssetBundle(
        **{
            name: f"-----BEGIN TEST-----\n{name}\n-----END TEST-----\n".encode()
            for name in ASSET_FILES
        }
    )


@pytest.fixture
def cluster_document():
    """A valid cluster description document."""
    return dict(VALID_CLUSTER_DOCUMENT)


@pytest.fixture
def valid_cluster():
    """A valid cluster description."""
    return overlay(default_cluster(), VALID_CLUSTER_DOCUMENT)


@pytest.fixture
def assets():
    """A bundle of fake TLS assets."""
    return make_assets()


@pytest.fixture
def assets_dir(tmp_path):
    """A directory holding one file per TLS asset."""
    directory = tmp_path / "credentials"
    directory.mkdir()
    for name, data in make_assets().items():
        (directory / ASSET_FILES[name]).write_bytes(data)
    return directory
