"""Address plan validation for cluster descriptions.

This module checks that the VPC, instance, pod and service ranges of a cluster
description form one consistent containment hierarchy. Validation is a
pre-flight gate: a bad address plan otherwise fails only after cloud resources
have been created.

Range overlap is detected by testing whether one range contains the other's
address. The VPC is only tested for containing the pod and service ranges, so a
pod or service range that encloses the whole VPC is not detected.
"""

import ipaddress

from kube_stack.exceptions import InvalidPlanError, PlanViolation
from kube_stack.logging_config import get_logger
from kube_stack.models.cluster import ClusterDescription

logger = get_logger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network

# Checked in this order, before any address rule
REQUIRED_FIELDS = [
    "external_dns_name",
    "key_name",
    "region",
    "availability_zone",
    "cluster_name",
]


def _key(name: str) -> str:
    return ClusterDescription.document_key(name)


def parse_cidr(name: str, value: str) -> tuple[IPAddress, IPNetwork]:
    """Parse a CIDR range into its written address and its network.

    Host bits are allowed; the returned address is the one written before the
    prefix separator. The prefix must be a decimal length, netmask suffixes
    such as ``/255.255.0.0`` are rejected.

    Args:
        name: Attribute name of the field being parsed (for error messages)
        value: CIDR string such as ``10.0.0.0/16``

    Returns:
        Tuple of (address, network)

    Raises:
        InvalidPlanError: If the value is not a CIDR range
    """
    key = _key(name)
    if not value.partition("/")[2].isdigit():
        raise InvalidPlanError(
            PlanViolation.MALFORMED_CIDR,
            f"invalid {key}: '{value}' is not an address/prefix-length range",
            {key: value},
            "Use address/prefix notation, e.g. 10.0.0.0/16",
        )
    try:
        interface = ipaddress.ip_interface(value)
    except ValueError as e:
        raise InvalidPlanError(
            PlanViolation.MALFORMED_CIDR,
            f"invalid {key}: {e}",
            {key: value},
            "Use address/prefix notation, e.g. 10.0.0.0/16",
        ) from e
    return interface.ip, interface.network


def parse_address(
    name: str, value: str, violation: PlanViolation = PlanViolation.MALFORMED_ADDRESS
) -> IPAddress:
    """Parse a single IP address.

    Args:
        name: Attribute name of the field being parsed (for error messages)
        value: Address string
        violation: Rule reported when the value does not parse

    Returns:
        The parsed address

    Raises:
        InvalidPlanError: If the value is not an IP address
    """
    key = _key(name)
    try:
        return ipaddress.ip_address(value)
    except ValueError as e:
        raise InvalidPlanError(violation, f"invalid {key}: '{value}'", {key: value}) from e


class AddressPlanValidator:
    """Validates the required fields and address plan of a cluster description."""

    def validate(self, description: ClusterDescription) -> None:
        """Validate a cluster description.

        Rules are evaluated in a fixed order and the first failure is raised.

        Args:
            description: The cluster description to check

        Raises:
            InvalidPlanError: If any rule is violated
        """
        try:
            self._check_required_fields(description)
            self._check_address_plan(description)
        except InvalidPlanError as e:
            logger.warning(f"Address plan rejected ({e.kind.value}): {e.message}")
            raise

        logger.debug(f"Address plan for cluster '{description.cluster_name}' is valid")

    def _check_required_fields(self, description: ClusterDescription) -> None:
        for name in REQUIRED_FIELDS:
            if not getattr(description, name):
                key = _key(name)
                raise InvalidPlanError(
                    PlanViolation.MISSING_FIELD,
                    f"{key} must be set",
                    {key: ""},
                    f"Add '{key}' to the cluster description",
                )

    def _check_address_plan(self, d: ClusterDescription) -> None:
        _, vpc_net = parse_cidr("vpc_cidr", d.vpc_cidr)

        instance_ip, instance_net = parse_cidr("instance_cidr", d.instance_cidr)
        if instance_ip not in vpc_net:
            raise InvalidPlanError(
                PlanViolation.INSTANCE_RANGE_OUTSIDE_VPC,
                f"vpcCIDR ({d.vpc_cidr}) does not contain instanceCIDR ({d.instance_cidr})",
                {"vpcCIDR": d.vpc_cidr, "instanceCIDR": d.instance_cidr},
            )

        controller_ip = parse_address("controller_ip", d.controller_ip)
        if controller_ip not in instance_net:
            raise InvalidPlanError(
                PlanViolation.CONTROLLER_OUTSIDE_INSTANCE_RANGE,
                f"instanceCIDR ({d.instance_cidr}) does not contain controllerIP ({d.controller_ip})",
                {"instanceCIDR": d.instance_cidr, "controllerIP": d.controller_ip},
            )

        pod_ip, pod_net = parse_cidr("pod_cidr", d.pod_cidr)
        if pod_ip in vpc_net:
            raise InvalidPlanError(
                PlanViolation.POD_RANGE_OVERLAPS_VPC,
                f"vpcCIDR ({d.vpc_cidr}) overlaps with podCIDR ({d.pod_cidr})",
                {"vpcCIDR": d.vpc_cidr, "podCIDR": d.pod_cidr},
            )

        service_ip, service_net = parse_cidr("service_cidr", d.service_cidr)
        if service_ip in vpc_net:
            raise InvalidPlanError(
                PlanViolation.SERVICE_RANGE_OVERLAPS_VPC,
                f"vpcCIDR ({d.vpc_cidr}) overlaps with serviceCIDR ({d.service_cidr})",
                {"vpcCIDR": d.vpc_cidr, "serviceCIDR": d.service_cidr},
            )
        if service_ip in pod_net or pod_ip in service_net:
            raise InvalidPlanError(
                PlanViolation.POD_SERVICE_RANGE_OVERLAP,
                f"serviceCIDR ({d.service_cidr}) overlaps with podCIDR ({d.pod_cidr})",
                {"serviceCIDR": d.service_cidr, "podCIDR": d.pod_cidr},
            )

        for name in ("kubernetes_service_ip", "dns_service_ip"):
            self._check_service_address(name, getattr(d, name), d.service_cidr, service_net)

    def _check_service_address(
        self, name: str, value: str, service_cidr: str, service_net: IPNetwork
    ) -> None:
        key = _key(name)
        address = parse_address(name, value, PlanViolation.SERVICE_ADDRESS_OUTSIDE_RANGE)
        if address not in service_net:
            raise InvalidPlanError(
                PlanViolation.SERVICE_ADDRESS_OUTSIDE_RANGE,
                f"serviceCIDR ({service_cidr}) does not contain {key} ({value})",
                {"serviceCIDR": service_cidr, key: value},
            )


def validate(description: ClusterDescription) -> None:
    """Validate a cluster description with the default validator.

    Raises:
        InvalidPlanError: If any rule is violated
    """
    AddressPlanValidator().validate(description)
