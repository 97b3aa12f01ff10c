"""Resolution of a validated cluster description into template data."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from kube_stack.assets import compact
from kube_stack.logging_config import get_logger
from kube_stack.models.assets import CompactAssetBundle, SecurityAssetBundle
from kube_stack.models.cluster import ClusterDescription

logger = get_logger(__name__)


def etcd_endpoint(controller_ip: str) -> str:
    return f"http://{controller_ip}:2379"


def api_server_url(controller_ip: str) -> str:
    return f"http://{controller_ip}:8080"


def secure_api_server_url(controller_ip: str) -> str:
    return f"https://{controller_ip}:443"


def external_api_endpoint(external_dns_name: str) -> str:
    return f"https://{external_dns_name}"


class ResolvedConfig(BaseModel):
    """Cluster description plus the values derived from it for rendering."""

    model_config = ConfigDict(frozen=True)

    cluster: ClusterDescription
    etcd_endpoints: str
    api_servers: str
    secure_api_servers: str
    api_server_endpoint: str
    tls_config: CompactAssetBundle

    def template_context(self) -> dict[str, Any]:
        """Flatten into the data object handed to templates.

        Keys are the cluster attribute names, the endpoint names and
        ``tls_config``. Renaming any of them breaks existing templates.
        """
        context = self.cluster.model_dump()
        context.update(self.model_dump(exclude={"cluster"}))
        return context


class ConfigResolver:
    """Derives a ResolvedConfig from a validated description and its TLS assets."""

    @staticmethod
    def resolve(description: ClusterDescription, assets: SecurityAssetBundle) -> ResolvedConfig:
        """Resolve endpoints and compact TLS assets.

        Args:
            description: A cluster description that already passed validation
            assets: Raw TLS assets to embed

        Returns:
            The resolved configuration

        Raises:
            CompactionError: If the assets cannot be compacted
        """
        cluster = description.model_copy(deep=True)
        tls_config = compact(assets)

        config = ResolvedConfig(
            cluster=cluster,
            etcd_endpoints=etcd_endpoint(cluster.controller_ip),
            api_servers=api_server_url(cluster.controller_ip),
            secure_api_servers=secure_api_server_url(cluster.controller_ip),
            api_server_endpoint=external_api_endpoint(cluster.external_dns_name),
            tls_config=tls_config,
        )
        logger.debug(f"Resolved configuration for cluster '{cluster.cluster_name}'")
        return config


def resolve(description: ClusterDescription, assets: SecurityAssetBundle) -> ResolvedConfig:
    """Resolve a description with the default resolver.

    Raises:
        CompactionError: If the assets cannot be compacted
    """
    return ConfigResolver.resolve(description, assets)
