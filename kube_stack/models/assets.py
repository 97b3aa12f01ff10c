"""Data models for TLS assets embedded in rendered templates."""

from pydantic import BaseModel, ConfigDict

# Logical asset name -> file name inside the TLS assets directory
ASSET_FILES = {
    "ca_cert": "ca.pem",
    "apiserver_cert": "apiserver.pem",
    "apiserver_key": "apiserver-key.pem",
    "worker_cert": "worker.pem",
    "worker_key": "worker-key.pem",
    "admin_cert": "admin.pem",
    "admin_key": "admin-key.pem",
}


class SecurityAssetBundle(BaseModel):
    """Raw TLS certificates and keys, keyed by logical name."""

    model_config = ConfigDict(frozen=True)

    ca_cert: bytes
    apiserver_cert: bytes
    apiserver_key: bytes
    worker_cert: bytes
    worker_key: bytes
    admin_cert: bytes
    admin_key: bytes

    def items(self) -> list[tuple[str, bytes]]:
        """Return (logical name, contents) pairs in a fixed order."""
        return [(name, getattr(self, name)) for name in ASSET_FILES]


class CompactAssetBundle(BaseModel):
    """TLS assets gzip-compressed and base64 encoded for template embedding."""

    model_config = ConfigDict(frozen=True)

    ca_cert: str
    apiserver_cert: str
    apiserver_key: str
    worker_cert: str
    worker_key: str
    admin_cert: str
    admin_key: str

    def items(self) -> list[tuple[str, str]]:
        """Return (logical name, encoded contents) pairs in a fixed order."""
        return [(name, getattr(self, name)) for name in ASSET_FILES]

    @property
    def encoded_size(self) -> int:
        """Total length of all encoded assets."""
        return sum(len(value) for _, value in self.items())
