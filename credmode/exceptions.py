"""credmode Exception Classes

Base exception hierarchy for the credential capability annotator.
All custom exceptions include help_text for actionable operator guidance.
"""

from typing import List, Optional


class CredModeError(Exception):
    """Base exception for all credmode errors

    All credmode exceptions inherit from this class so the controller and
    the CLI can handle failures uniformly.

    Attributes:
        message: Human-readable error description
        help_text: Optional actionable guidance for resolving the error
    """

    def __init__(self, message: str, help_text: str = None):
        """Initialize credmode error with message and optional help text

        Args:
            message: Error description
            help_text: Optional remediation guidance
        """
        self.message = message
        self.help_text = help_text
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with help text if available"""
        if self.help_text:
            return f"{self.message}\n\nHelp: {self.help_text}"
        return self.message


class ConfigurationError(CredModeError):
    """Raised when the operator configuration file cannot be loaded or validated"""

    def __init__(self, reason: str, config_path: Optional[str] = None):
        message = f"Invalid configuration: {reason}"
        if config_path:
            message = f"Invalid configuration in '{config_path}': {reason}"

        super().__init__(
            message,
            "Check the YAML syntax and field names against the documented defaults"
        )
        self.reason = reason
        self.config_path = config_path


class UnknownProviderError(CredModeError):
    """Raised when the configured cloud provider has no registered implementation"""

    def __init__(self, provider: str, available_providers: Optional[List[str]] = None):
        message = f"Cloud provider '{provider}' is not supported"

        help_text = "Set 'provider' in the configuration to a registered provider"
        if available_providers:
            help_text += "\n\nRegistered providers:\n"
            help_text += "\n".join(f"  - {name}" for name in available_providers)

        super().__init__(message, help_text)
        self.provider = provider
        self.available_providers = available_providers


class CredentialObjectNotFoundError(CredModeError):
    """Raised when the credential secret does not exist

    No capability mode is recorded for a missing secret; the reconcile is
    retried with backoff until the installer creates it.
    """

    def __init__(self, namespace: str, name: str):
        message = f"Credential secret '{namespace}/{name}' not found"
        help_text = (
            f"Create the secret '{name}' in namespace '{namespace}' "
            "with the cloud provider's root credentials"
        )
        super().__init__(message, help_text)
        self.namespace = namespace
        self.name = name


class ClusterEnvironmentError(CredModeError):
    """Base class for environment failures that do not yield a capability verdict"""
    pass


class InfrastructureNameError(ClusterEnvironmentError):
    """Raised when the cluster infrastructure name cannot be resolved"""

    def __init__(self, reason: str, infrastructure: str = "cluster"):
        message = f"Unable to load infrastructure name from Infrastructure '{infrastructure}': {reason}"
        help_text = (
            f"Verify the Infrastructure object '{infrastructure}' exists and "
            "status.infrastructureName is populated"
        )
        super().__init__(message, help_text)
        self.reason = reason
        self.infrastructure = infrastructure


class ClientBuildError(ClusterEnvironmentError):
    """Raised when an authenticated cloud client cannot be constructed"""

    def __init__(self, provider: str, reason: str):
        message = f"Error creating {provider} client: {reason}"
        super().__init__(message, "Check the provider endpoint configuration and network access")
        self.provider = provider
        self.reason = reason


class ProbeError(CredModeError):
    """Raised when a capability probe fails to produce an answer

    The credential has already been marked 'insufficient' by the time this
    is raised; a later successful reconcile may upgrade the mode.
    """

    def __init__(self, probe: str, reason: str):
        message = f"Failed checking {probe} cloud creds: {reason}"
        help_text = (
            "The credential was marked 'insufficient' until the check succeeds. "
            "Transient cloud API errors (throttling, network) clear on retry"
        )
        super().__init__(message, help_text)
        self.probe = probe
        self.reason = reason


class AnnotationWriteError(CredModeError):
    """Raised when the capability annotation cannot be persisted"""

    def __init__(self, namespace: str, name: str, reason: str, conflict: bool = False):
        message = f"Failed to update annotations on secret '{namespace}/{name}': {reason}"

        if conflict:
            help_text = "The secret was modified concurrently; the reconcile will re-read it and retry"
        else:
            help_text = "Verify the operator service account may update secrets in this namespace"

        super().__init__(message, help_text)
        self.namespace = namespace
        self.name = name
        self.reason = reason
        self.conflict = conflict
