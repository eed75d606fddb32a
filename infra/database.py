"""
Database provisioning: VPC, Postgres instance and its connection string.

The password never appears in the template; it is a Secrets Manager
reference resolved by CloudFormation at deploy time.
"""

from dataclasses import dataclass

from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_rds as rds
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from config import StackSettings


@dataclass
class DatabaseResources:
    vpc: ec2.Vpc
    instance: rds.DatabaseInstance
    url: str


def build_database_url(user: str, password: str, host: str, database_name: str) -> str:
    """Prisma-style Postgres URL pinned to the public schema."""
    return f"postgres://{user}:{password}@{host}/{database_name}?schema=public"


def create_database(scope: Construct, settings: StackSettings) -> DatabaseResources:
    vpc = ec2.Vpc(scope, "PrismaTestVPC")

    database_password = secretsmanager.Secret.from_secret_name_v2(
        scope, "DatabasePassword", settings.database_password_secret
    )

    instance = rds.DatabaseInstance(
        scope,
        "PrismaTestDB",
        vpc=vpc,
        vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
        database_name=settings.database_name,
        engine=rds.DatabaseInstanceEngine.postgres(
            version=rds.PostgresEngineVersion.VER_13_4,
        ),
        instance_type=ec2.InstanceType.of(ec2.InstanceClass.T3, ec2.InstanceSize.MICRO),
        credentials=rds.Credentials.from_password(
            settings.database_user, database_password.secret_value
        ),
        allocated_storage=10,
        publicly_accessible=True,
    )

    # Lambdas run outside the VPC, so the instance must accept public traffic
    instance.connections.allow_default_port_from_any_ipv4()

    url = build_database_url(
        settings.database_user,
        database_password.secret_value.unsafe_unwrap(),
        instance.db_instance_endpoint_address,
        settings.database_name,
    )
    return DatabaseResources(vpc=vpc, instance=instance, url=url)
