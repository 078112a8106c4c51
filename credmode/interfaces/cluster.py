"""Cluster collaborator contracts consumed by the reconciler"""

from abc import ABC, abstractmethod

from credmode.interfaces.capabilities import CredentialObject, NamespacedName


class CredentialSource(ABC):
    """Reads the credential secret"""

    @abstractmethod
    def get_credential_object(self, ref: NamespacedName) -> CredentialObject:
        """Fetch the credential object

        Raises:
            CredentialObjectNotFoundError: If the object does not exist
        """
        pass


class AnnotationWriter(ABC):
    """Persists a credential object whose annotations were modified

    Implementations must be idempotent: writing an unchanged annotation
    value must not fail on that account.
    """

    @abstractmethod
    def update_credential_object(self, obj: CredentialObject) -> None:
        """Write back the whole object

        Raises:
            AnnotationWriteError: On conflict or API failure
        """
        pass


class InfrastructureNameResolver(ABC):
    """Resolves the cluster infrastructure name used to tag cloud clients"""

    @abstractmethod
    def get_infrastructure_name(self) -> str:
        """Return the infrastructure name

        Raises:
            InfrastructureNameError: If the name cannot be loaded
        """
        pass


class ClusterClient(CredentialSource, AnnotationWriter, InfrastructureNameResolver):
    """All cluster operations needed by the reconciler"""
    pass
