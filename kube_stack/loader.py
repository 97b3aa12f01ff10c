"""Cluster description loading.

This module parses the YAML cluster description document and overlays it on
the default cluster description. Unquoted dates and timestamps are kept as the
text they were written as, since every cluster setting of that shape is a
string field.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from kube_stack.exceptions import InvalidPlanError, LoadError
from kube_stack.logging_config import get_logger
from kube_stack.models.cluster import ClusterDescription, default_cluster, overlay
from kube_stack.validation import validate

logger = get_logger(__name__)


class ClusterDocumentLoader(yaml.SafeLoader):
    """Safe YAML loader that reads timestamp scalars as plain strings."""


ClusterDocumentLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_yaml_str
)


def load_cluster(data: bytes | str, source: str = "cluster description") -> ClusterDescription:
    """Parse a cluster description document.

    Keys missing from the document keep their default values and unknown keys
    are ignored. The result is not validated.

    Args:
        data: YAML document
        source: Name of the document for error messages

    Returns:
        The default cluster description with the document's values applied

    Raises:
        LoadError: If the document is not valid YAML or has wrongly typed values
    """
    try:
        document = yaml.load(data, Loader=ClusterDocumentLoader)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse {source}: {e}")
        raise LoadError(
            f"Failed to parse {source}: {e}",
            "The file may have invalid YAML syntax",
        ) from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise LoadError(
            f"Failed to parse {source}: expected a mapping of cluster settings, "
            f"got {type(document).__name__}"
        )

    try:
        return overlay(default_cluster(), document)
    except ValidationError as e:
        logger.error(f"Invalid value in {source}: {e}")
        raise LoadError(f"Failed to parse {source}: {e}") from e


def cluster_from_file(path: str | Path) -> ClusterDescription:
    """Load and validate a cluster description file.

    Args:
        path: Path to the YAML cluster description

    Returns:
        The validated cluster description

    Raises:
        LoadError: If the file cannot be read or parsed
        InvalidPlanError: If the description fails validation
    """
    path = Path(path)
    logger.debug(f"Reading cluster description: {path}")

    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.error(f"Cluster file not found: {path}")
        raise LoadError(
            f"Cluster file not found: {path}",
            f"Expected location: {path.absolute()}",
        )
    except OSError as e:
        logger.error(f"Failed to read cluster file: {e}")
        raise LoadError(f"Failed to read cluster file {path}: {e}")

    cluster = load_cluster(data, source=str(path))

    try:
        validate(cluster)
    except InvalidPlanError as e:
        raise InvalidPlanError(e.kind, f"{path} is invalid: {e.message}", e.fields, e.details) from e

    return cluster
