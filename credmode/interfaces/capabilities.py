"""Capability mode and credential data contracts"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


# Annotation on the credential secret that records the capability mode
ANNOTATION_KEY = "cloudcredential.openshift.io/mode"


class CapabilityMode(StrEnum):
    """Capability verdicts, ordered from most to least trusted

    MINT: creds can create new scoped sub-creds
    PASSTHROUGH: creds are sufficient for components to reuse as-is
    INSUFFICIENT: creds are not usable for the cluster
    """
    MINT = "mint"
    PASSTHROUGH = "passthrough"
    INSUFFICIENT = "insufficient"


class EventKind(StrEnum):
    """Watch notification kinds admitted by the event filter"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class NamespacedName:
    """Identity of a namespaced cluster object"""
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class WatchEvent:
    """A create/update/delete notification (update carries the new object's identity)"""
    kind: EventKind
    namespace: str
    name: str


@dataclass(frozen=True)
class ReconcileRequest:
    """Reference to the object to reconcile; carries no other state"""
    namespaced_name: NamespacedName


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconcile that reached a capability verdict"""
    request: ReconcileRequest
    mode: CapabilityMode


@dataclass
class CredentialObject:
    """Credential secret as read from the cluster

    Attributes:
        namespace: Secret namespace
        name: Secret name
        data: Decoded secret fields (field name -> raw bytes)
        annotations: Secret annotations
        resource_version: Version used for optimistic concurrency on update
        raw: Original API object, written back on update
    """
    namespace: str
    name: str
    data: Dict[str, bytes] = field(default_factory=dict)
    annotations: Optional[Dict[str, str]] = None
    resource_version: Optional[str] = None
    raw: Any = None

    @property
    def namespaced_name(self) -> NamespacedName:
        return NamespacedName(self.namespace, self.name)


class CredentialPair(BaseModel):
    """Access key pair extracted from the credential secret"""
    model_config = ConfigDict(frozen=True)

    access_key_id: SecretStr = Field(..., description="Cloud access key identifier")
    secret_access_key: SecretStr = Field(..., description="Cloud secret key material")

    @classmethod
    def from_bytes(cls, access_key_id: bytes, secret_access_key: bytes) -> "CredentialPair":
        """Build a pair from raw secret field values

        Raises:
            UnicodeDecodeError: If either value is not valid UTF-8
        """
        return cls(
            access_key_id=access_key_id.decode("utf-8"),
            secret_access_key=secret_access_key.decode("utf-8"),
        )
