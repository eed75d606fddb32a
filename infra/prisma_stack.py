"""
PrismaStack — Postgres on RDS behind a one-route HTTP API.

Deployed mode stages the Prisma client into a shared layer that every
function in the stack receives. Local mode skips the layer and points
the functions at the developer's own DATABASE_URL.
"""

from typing import List

from aws_cdk import Aws, CfnOutput, Stack
from aws_cdk import aws_apigatewayv2 as apigwv2
from aws_cdk import aws_lambda as lambda_
from aws_cdk.aws_apigatewayv2_integrations import HttpLambdaIntegration
from aws_lambda_powertools import Logger
from constructs import Construct

from config import StackSettings
from database import create_database
from layer_builder import build_layer, plan_layer

logger = Logger(service="prisma-stack")


class PrismaStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, settings: StackSettings, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.settings = settings
        self.default_function_layers: List[lambda_.ILayerVersion] = [self._powertools_layer()]
        self.prisma_layer = None

        logger.info("Synthesizing stack", stack=construct_id, mode=settings.mode.value)

        if not settings.mode.is_local:
            self.prisma_layer = self.create_prisma_layer()

        database = create_database(self, settings)
        database_url = settings.local_database_url if settings.mode.is_local else database.url

        self.api = self.create_api(database_url)

        CfnOutput(self, "ApiEndpoint", value=self.api.api_endpoint)
        CfnOutput(self, "DbEndpoint", value=database.instance.db_instance_endpoint_address)
        CfnOutput(self, "DbPort", value=database.instance.db_instance_endpoint_port)

    def _powertools_layer(self) -> lambda_.ILayerVersion:
        """AWS-managed Powertools layer used by the API function."""
        arn = (
            f"arn:aws:lambda:{Aws.REGION}:017000801446:layer:"
            f"AWSLambdaPowertoolsPythonV3-python312-x86_64:{self.settings.powertools_layer_version}"
        )
        return lambda_.LayerVersion.from_layer_version_arn(self, "PowertoolsLayer", arn)

    def create_prisma_layer(self) -> lambda_.LayerVersion:
        """Stage the Prisma client on disk and add it to every function's layers."""
        layer_path = build_layer(plan_layer(self.settings.layer))

        prisma_layer = lambda_.LayerVersion(
            self,
            "PrismaLayer",
            code=lambda_.Code.from_asset(str(layer_path.resolve())),
            description="Prisma client and query engine for Lambda",
        )
        self.default_function_layers.append(prisma_layer)
        return prisma_layer

    def create_function(self, construct_id: str, handler: str, database_url: str) -> lambda_.Function:
        return lambda_.Function(
            self,
            construct_id,
            # The Prisma layer ships Node artifacts under nodejs/; a Python runtime
            # receives it only as a stack-wide default and does not load it
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler=handler,
            code=lambda_.Code.from_asset(str(self.settings.handler_asset)),
            environment={
                "DATABASE_URL": database_url,
                "POWERTOOLS_SERVICE_NAME": "prisma-api",
            },
            layers=list(self.default_function_layers),
        )

    def create_api(self, database_url: str) -> apigwv2.HttpApi:
        api = apigwv2.HttpApi(self, "Api")
        root_function = self.create_function("RootFunction", self.settings.handler, database_url)
        api.add_routes(
            path="/",
            methods=[apigwv2.HttpMethod.GET],
            integration=HttpLambdaIntegration("RootIntegration", root_function),
        )
        return api
