"""
AWS client factory for the deployment tooling.

Clients are created lazily and reused, so repeated output lookups in one
process share a connection pool.
"""

import os
import boto3
from botocore.config import Config

AWS_REGION = os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION", "us-east-1")

_boto_config = Config(
    region_name=AWS_REGION,
    retries={"max_attempts": 3, "mode": "standard"},
    max_pool_connections=10,
)

_cloudformation_client = None


def get_cloudformation_client():
    """Get or create a shared CloudFormation client."""
    global _cloudformation_client
    if _cloudformation_client is None:
        _cloudformation_client = boto3.client("cloudformation", config=_boto_config)
    return _cloudformation_client
