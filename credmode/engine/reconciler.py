"""Capability reconciler for the cloud credential secret"""

from typing import Any, Callable
import logging

from credmode.config import OperatorConfig
from credmode.exceptions import (
    AnnotationWriteError,
    ClientBuildError,
    ProbeError,
)
from credmode.interfaces.capabilities import (
    ANNOTATION_KEY,
    CapabilityMode,
    CredentialObject,
    CredentialPair,
    ReconcileRequest,
    ReconcileResult,
)
from credmode.interfaces.cluster import ClusterClient
from credmode.providers.base import CloudProvider
from credmode.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class CapabilityReconciler:
    """Annotates the cloud cred secret with what the creds are capable of

    1) 'mint': the creds can be used to create new sub-creds
    2) 'passthrough': the creds are capable enough for other components to reuse as-is
    3) 'insufficient': the creds are not usable for the cluster

    Every call re-reads the secret and re-runs the probes; nothing is cached
    between calls and nothing is retried internally.
    """

    def __init__(
        self,
        cluster: ClusterClient,
        provider: CloudProvider,
        annotation_key: str = ANNOTATION_KEY
    ):
        self.cluster = cluster
        self.provider = provider
        self.annotation_key = annotation_key

    def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """Determine and persist the capability mode for the requested secret

        Args:
            request: Reference to the credential secret

        Returns:
            ReconcileResult carrying the persisted mode

        Raises:
            CredentialObjectNotFoundError: Secret is missing (nothing written)
            InfrastructureNameError: Infra name lookup failed (nothing written)
            ClientBuildError: Cloud client construction failed (nothing written)
            ProbeError: A probe failed ('insufficient' written first)
            AnnotationWriteError: The annotation could not be persisted
        """
        logger.info("validating cloud cred secret")

        secret = self.cluster.get_credential_object(request.namespaced_name)
        mode = self._classify(secret)
        return ReconcileResult(request=request, mode=mode)

    def _classify(self, secret: CredentialObject) -> CapabilityMode:
        access_key_field, secret_key_field = self.provider.credential_fields

        access_key = secret.data.get(access_key_field)
        if access_key is None:
            logger.error(f"Couldn't fetch key containing {access_key_field} from cloud cred secret")
            return self._annotate(secret, CapabilityMode.INSUFFICIENT)

        secret_key = secret.data.get(secret_key_field)
        if secret_key is None:
            logger.error(f"Couldn't fetch key containing {secret_key_field} from cloud cred secret")
            return self._annotate(secret, CapabilityMode.INSUFFICIENT)

        infra_name = self.cluster.get_infrastructure_name()

        try:
            credentials = CredentialPair.from_bytes(access_key, secret_key)
        except UnicodeDecodeError as e:
            # Message omits the offending byte, which is key material
            raise ClientBuildError(self.provider.name, "credential fields are not valid UTF-8") from e

        try:
            client = self.provider.build_client(credentials, infra_name)
        except Exception as e:
            raise ClientBuildError(self.provider.name, str(e)) from e

        # Can we mint new creds?
        if self._probe(secret, "mint", self.provider.can_mint, client):
            logger.info("Verified cloud creds can be used for minting new creds")
            return self._annotate(secret, CapabilityMode.MINT)

        # Else, can we just pass through the current creds?
        if self._probe(secret, "passthrough", self.provider.can_passthrough, client):
            logger.info("Verified cloud creds can be used as-is (passthrough)")
            return self._annotate(secret, CapabilityMode.PASSTHROUGH)

        logger.warning("Cloud creds unable to be used for either minting or passthrough")
        return self._annotate(secret, CapabilityMode.INSUFFICIENT)

    def _probe(
        self,
        secret: CredentialObject,
        probe: str,
        check: Callable[[Any], bool],
        client: Any
    ) -> bool:
        """Run one capability check, marking the secret 'insufficient' if it fails"""
        try:
            return bool(check(client))
        except Exception as e:
            try:
                self._annotate(secret, CapabilityMode.INSUFFICIENT)
            except AnnotationWriteError as write_error:
                logger.error(f"failed to mark cloud cred secret insufficient: {write_error.message}")
            raise ProbeError(probe, str(e)) from e

    def _annotate(self, secret: CredentialObject, mode: CapabilityMode) -> CapabilityMode:
        """Set the mode annotation and write the whole secret back"""
        annotations = secret.annotations
        if annotations is None:
            annotations = {}

        annotations[self.annotation_key] = mode.value
        secret.annotations = annotations

        self.cluster.update_credential_object(secret)
        return mode


def create_reconciler(
    config: OperatorConfig,
    cluster: ClusterClient,
    registry: ProviderRegistry = None
) -> CapabilityReconciler:
    """Build a reconciler for the configured provider

    Raises:
        UnknownProviderError: If config.provider is not registered
    """
    registry = registry or ProviderRegistry()
    provider = registry.get_provider(config.provider, {"region": config.aws_region})
    return CapabilityReconciler(cluster, provider, annotation_key=config.annotation_key)
