"""Data models for cluster descriptions and TLS assets."""

from kube_stack.models.assets import ASSET_FILES, CompactAssetBundle, SecurityAssetBundle
from kube_stack.models.cluster import ClusterDescription, default_cluster, overlay

__all__ = [
    "ASSET_FILES",
    "ClusterDescription",
    "CompactAssetBundle",
    "SecurityAssetBundle",
    "default_cluster",
    "overlay",
]
