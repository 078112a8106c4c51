"""AWS provider for credmode.

Probes the root credential with IAM policy simulation to decide whether it
can mint per-component users or only be passed through as-is.
"""

from credmode.providers.aws.provider import AwsProvider, AwsClient

__all__ = ["AwsProvider", "AwsClient"]
