"""Kubernetes-backed cluster client"""

from typing import Any, Dict, Optional
import base64
import logging
import os

import kopf
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException

from credmode.config import OperatorConfig
from credmode.exceptions import (
    AnnotationWriteError,
    CredentialObjectNotFoundError,
    InfrastructureNameError,
)
from credmode.interfaces.capabilities import CredentialObject, NamespacedName
from credmode.interfaces.cluster import ClusterClient

logger = logging.getLogger(__name__)

INFRASTRUCTURE_GROUP = "config.openshift.io"
INFRASTRUCTURE_VERSION = "v1"
INFRASTRUCTURE_PLURAL = "infrastructures"


def load_api_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> k8s_client.ApiClient:
    """Create a Kubernetes API client

    Uses the pod service account when running in-cluster and no kubeconfig
    was given, otherwise an isolated client from the kubeconfig file.
    """
    if kubeconfig is None and "KUBERNETES_SERVICE_HOST" in os.environ:
        k8s_config.load_incluster_config()
        return k8s_client.ApiClient()

    return k8s_config.new_client_from_config(config_file=kubeconfig, context=context)


def _decode_data(data: Optional[Dict[str, str]]) -> Dict[str, bytes]:
    return {key: base64.b64decode(value) for key, value in (data or {}).items()}


class KubeClusterClient(ClusterClient):
    """Reads and annotates the credential secret and the Infrastructure object"""

    def __init__(self, api_client: k8s_client.ApiClient, infrastructure_name: str = "cluster"):
        self.api_client = api_client
        self.core_v1 = k8s_client.CoreV1Api(api_client)
        self.custom_objects = k8s_client.CustomObjectsApi(api_client)
        self.infrastructure_name = infrastructure_name

    @classmethod
    def from_config(cls, config: OperatorConfig) -> "KubeClusterClient":
        api_client = load_api_client(config.kubeconfig, config.kube_context)
        return cls(api_client, infrastructure_name=config.infrastructure_name)

    def get_credential_object(self, ref: NamespacedName) -> CredentialObject:
        try:
            secret = self.core_v1.read_namespaced_secret(name=ref.name, namespace=ref.namespace)
        except ApiException as e:
            if e.status == 404:
                logger.debug(f"secret not found: {ref}")
                raise CredentialObjectNotFoundError(ref.namespace, ref.name) from e
            raise

        annotations = secret.metadata.annotations
        return CredentialObject(
            namespace=secret.metadata.namespace,
            name=secret.metadata.name,
            data=_decode_data(secret.data),
            annotations=dict(annotations) if annotations is not None else None,
            resource_version=secret.metadata.resource_version,
            raw=secret,
        )

    def update_credential_object(self, obj: CredentialObject) -> None:
        """Replace the secret with obj's annotations

        The write carries the resourceVersion that was read, so a concurrent
        modification fails with a conflict instead of being overwritten.
        """
        secret = obj.raw
        if secret is None:
            secret = k8s_client.V1Secret(
                metadata=k8s_client.V1ObjectMeta(name=obj.name, namespace=obj.namespace)
            )
        secret.metadata.annotations = dict(obj.annotations or {})
        secret.metadata.resource_version = obj.resource_version

        try:
            updated = self.core_v1.replace_namespaced_secret(
                name=obj.name, namespace=obj.namespace, body=secret
            )
        except ApiException as e:
            raise AnnotationWriteError(
                obj.namespace, obj.name, e.reason or str(e), conflict=e.status == 409
            ) from e

        obj.resource_version = updated.metadata.resource_version
        obj.raw = updated

    def get_infrastructure_name(self) -> str:
        """Load the infra name used to identify this cluster and tag cloud objects"""
        try:
            infra = self.custom_objects.get_cluster_custom_object(
                group=INFRASTRUCTURE_GROUP,
                version=INFRASTRUCTURE_VERSION,
                plural=INFRASTRUCTURE_PLURAL,
                name=self.infrastructure_name,
            )
        except ApiException as e:
            logger.error(f"error loading Infrastructure config '{self.infrastructure_name}': {e.reason}")
            raise InfrastructureNameError(e.reason or str(e), self.infrastructure_name) from e

        infra_name = (infra.get("status") or {}).get("infrastructureName")
        if not infra_name:
            raise InfrastructureNameError("status.infrastructureName is empty", self.infrastructure_name)

        logger.debug(f"Loaded infrastructure name: {infra_name}")
        return infra_name

    def connection_info(self, **_: Any) -> kopf.ConnectionInfo:
        """Hand this client's credentials to kopf (login handler)

        kopf talks to the API server with its own client; reusing the loaded
        configuration keeps --kubeconfig and --context authoritative.
        """
        configuration = self.api_client.configuration
        header = configuration.get_api_key_with_prefix("authorization")
        parts = header.split(" ", 1) if header else []

        scheme, token = None, None
        if len(parts) == 2:
            scheme, token = parts
        elif len(parts) == 1:
            token = parts[0]

        return kopf.ConnectionInfo(
            server=configuration.host,
            ca_path=configuration.ssl_ca_cert,
            insecure=not configuration.verify_ssl,
            username=configuration.username or None,
            password=configuration.password or None,
            scheme=scheme,
            token=token,
            certificate_path=configuration.cert_file,
            private_key_path=configuration.key_file,
        )
