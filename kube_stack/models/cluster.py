"""Data model for the cluster description document."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kube_stack.logging_config import get_logger

logger = get_logger(__name__)


class ClusterDescription(BaseModel):
    """User-facing cluster declaration.

    Field aliases are the keys used in the cluster description document.
    Instances are immutable; use :func:`overlay` to derive a modified copy.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    # Identity
    cluster_name: str = Field("kubernetes", alias="clusterName")
    external_dns_name: str = Field("", alias="externalDNSName")
    key_name: str = Field("", alias="keyName")
    region: str = Field("", alias="region")
    availability_zone: str = Field("", alias="availabilityZone")
    release_channel: str = Field("alpha", alias="releaseChannel")

    # Compute
    controller_instance_type: str = Field("m3.medium", alias="controllerInstanceType")
    controller_root_volume_size: int = Field(30, alias="controllerRootVolumeSize")
    worker_count: int = Field(1, alias="workerCount")
    worker_instance_type: str = Field("m3.medium", alias="workerInstanceType")
    worker_root_volume_size: int = Field(30, alias="workerRootVolumeSize")
    worker_spot_price: str = Field("", alias="workerSpotPrice")

    # Addressing
    vpc_cidr: str = Field("10.0.0.0/16", alias="vpcCIDR")
    instance_cidr: str = Field("10.0.0.0/24", alias="instanceCIDR")
    controller_ip: str = Field("10.0.0.50", alias="controllerIP")
    pod_cidr: str = Field("10.2.0.0/16", alias="podCIDR")
    service_cidr: str = Field("10.3.0.0/24", alias="serviceCIDR")
    kubernetes_service_ip: str = Field("10.3.0.1", alias="kubernetesServiceIP")
    dns_service_ip: str = Field("10.3.0.10", alias="dnsServiceIP")
    kubernetes_version: str = Field("v1.1.4", alias="kubernetesVersion")

    def to_document(self) -> dict[str, Any]:
        """Convert to the cluster description document format."""
        return self.model_dump(by_alias=True)

    @classmethod
    def document_key(cls, name: str) -> str:
        """Return the document key for an attribute name."""
        return cls.model_fields[name].alias


def _known_keys() -> dict[str, str]:
    """Map both attribute names and document keys to document keys."""
    keys = {}
    for name, info in ClusterDescription.model_fields.items():
        keys[name] = info.alias
        keys[info.alias] = info.alias
    return keys


def default_cluster() -> ClusterDescription:
    """Return the default cluster description."""
    return ClusterDescription()


def overlay(base: ClusterDescription, overrides: Mapping[str, Any]) -> ClusterDescription:
    """Apply field-level overrides on top of a base description.

    Overrides may use document keys or attribute names. Unknown keys are
    ignored and ``None`` values leave the base value in place.

    Args:
        base: Description providing values for keys not overridden
        overrides: Mapping of keys to replacement values

    Returns:
        A new ClusterDescription

    Raises:
        pydantic.ValidationError: If an override has the wrong type
    """
    known = _known_keys()
    merged = base.to_document()

    for key, value in overrides.items():
        document_key = known.get(key)
        if document_key is None:
            logger.debug(f"Ignoring unknown cluster key: {key}")
            continue
        if value is None:
            continue
        merged[document_key] = value

    return ClusterDescription.model_validate(merged)
