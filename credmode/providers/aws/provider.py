"""AWS cloud provider implementation"""

from dataclasses import dataclass
from typing import Any, List
import logging

import boto3
from botocore.config import Config

from credmode import __version__
from credmode.interfaces.capabilities import CredentialPair
from credmode.providers.base import CloudProvider

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


@dataclass
class AwsClient:
    """Authenticated AWS client handle passed to the capability probes"""
    session: Any
    iam: Any
    infra_name: str


class AwsProvider(CloudProvider):
    """AWS provider probing IAM policy simulation for the root credential

    Config keys:
        region: Region for the IAM/STS endpoints (default us-east-1)
    """

    def build_client(self, credentials: CredentialPair, infra_name: str) -> AwsClient:
        """Create a boto3 session and IAM client tagged with the infra name"""
        region = self.config.get("region", DEFAULT_REGION)
        session = boto3.session.Session(
            aws_access_key_id=credentials.access_key_id.get_secret_value(),
            aws_secret_access_key=credentials.secret_access_key.get_secret_value(),
            region_name=region,
        )
        client_config = Config(user_agent_extra=f"credmode/{__version__} cluster/{infra_name}")
        iam = session.client("iam", config=client_config)
        return AwsClient(session=session, iam=iam, infra_name=infra_name)

    def can_mint(self, client: AwsClient) -> bool:
        """Check the creds can create IAM users and access keys"""
        return self.check_permissions(client, self.mint_actions)

    def can_passthrough(self, client: AwsClient) -> bool:
        """Check the creds cover every permission requested by cluster components"""
        return self.check_permissions(client, self.passthrough_actions)

    def check_permissions(self, client: AwsClient, actions: List[str]) -> bool:
        """Simulate the caller's policies against actions

        Returns:
            True only if every action evaluates to 'allowed'

        Raises:
            botocore.exceptions.ClientError: On IAM API failure
            botocore.exceptions.BotoCoreError: On transport failure
        """
        user = client.iam.get_user()
        user_arn = user["User"]["Arn"]
        logger.debug(f"Simulating {len(actions)} actions for {user_arn}")

        allowed = True
        paginator = client.iam.get_paginator("simulate_principal_policy")
        for page in paginator.paginate(PolicySourceArn=user_arn, ActionNames=actions):
            for result in page.get("EvaluationResults", []):
                if result["EvalDecision"] != "allowed":
                    logger.warning(f"Action not allowed with tested creds: {result['EvalActionName']}")
                    allowed = False

        if not allowed:
            logger.warning("Tested creds not able to perform all requested actions")
        return allowed
