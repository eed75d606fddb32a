"""
Read the deployed stack's outputs back from CloudFormation.

Usage:
    python infra/stack_outputs.py PrismaStack
    python infra/stack_outputs.py PrismaStack --json
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict

# Add infra directory to path when running as script
if __name__ == "__main__":
    sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from aws_clients import get_cloudformation_client
from errors import MissingOutputError, StackNotFoundError

# stdout carries the outputs themselves, so logs go to stderr
logger = Logger(service="prisma-outputs", logger_handler=logging.StreamHandler(sys.stderr))

OUTPUT_KEYS = ("ApiEndpoint", "DbEndpoint", "DbPort")


def get_stack_outputs(stack_name: str) -> Dict[str, str]:
    """
    Fetch the declared outputs of a deployed stack.

    Returns:
        dict with ApiEndpoint, DbEndpoint and DbPort

    Raises:
        StackNotFoundError: no stack with that name
        MissingOutputError: the stack lacks one of the declared outputs
    """
    client = get_cloudformation_client()
    try:
        response = client.describe_stacks(StackName=stack_name)
    except ClientError as e:
        if "does not exist" in e.response.get("Error", {}).get("Message", ""):
            raise StackNotFoundError(stack_name) from e
        raise

    stacks = response.get("Stacks", [])
    if not stacks:
        raise StackNotFoundError(stack_name)

    outputs = {o["OutputKey"]: o["OutputValue"] for o in stacks[0].get("Outputs", [])}
    for key in OUTPUT_KEYS:
        if key not in outputs:
            raise MissingOutputError(stack_name, key)

    logger.info("Loaded stack outputs", stack=stack_name)
    return {key: outputs[key] for key in OUTPUT_KEYS}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Show the outputs of a deployed Prisma stack")
    parser.add_argument("stack_name", help="CloudFormation stack name")
    parser.add_argument("--json", action="store_true", help="Print outputs as JSON")
    args = parser.parse_args(argv)

    outputs = get_stack_outputs(args.stack_name)
    if args.json:
        print(json.dumps(outputs, indent=2))
    else:
        for key, value in outputs.items():
            print(f"{key}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
