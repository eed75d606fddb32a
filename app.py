#!/usr/bin/env python3
"""CDK App entry point for the Prisma stack."""

import os
import sys

import aws_cdk as cdk

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "infra"))

from config import load_settings  # noqa: E402
from prisma_stack import PrismaStack  # noqa: E402

app = cdk.App()

settings = load_settings(app)

PrismaStack(
    app,
    os.getenv("STACK_NAME", "PrismaStack"),
    settings=settings,
    env=cdk.Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=os.environ.get("CDK_DEFAULT_REGION", "us-east-1"),
    ),
)

app.synth()
