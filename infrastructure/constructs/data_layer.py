"""
Data layer construct: VPC + RDS PostgreSQL holding agents, tickets, ratings
and OTP codes.
"""

from aws_cdk import (
    RemovalPolicy,
    Duration,
    aws_ec2 as ec2,
    aws_rds as rds,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct


class DataLayerConstruct(Construct):
    """Provision the network and database."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        db_instance_class: str,
        db_allocated_storage: int = 20,
    ) -> None:
        super().__init__(scope, construct_id)

        # One NAT so the Lambda can reach SES; the database stays isolated.
        self.vpc = ec2.Vpc(
            self,
            "Vpc",
            max_azs=2,
            nat_gateways=1,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="Public", subnet_type=ec2.SubnetType.PUBLIC, cidr_mask=24
                ),
                ec2.SubnetConfiguration(
                    name="App", subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS, cidr_mask=24
                ),
                ec2.SubnetConfiguration(
                    name="Data", subnet_type=ec2.SubnetType.PRIVATE_ISOLATED, cidr_mask=24
                ),
            ],
        )

        # Secret for DB credentials (username auto-generated).
        self.db_secret = secretsmanager.Secret(
            self,
            "DbCredentials",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                secret_string_template='{"username": "app_user"}',
                generate_string_key="password",
                exclude_punctuation=True,
            ),
        )

        self.db_security_group = ec2.SecurityGroup(
            self, "DbSecurityGroup", vpc=self.vpc, allow_all_outbound=False
        )

        # RDS instance (single-AZ outside prod to keep cost down).
        self.db_instance = rds.DatabaseInstance(
            self,
            "Postgres",
            engine=rds.DatabaseInstanceEngine.postgres(
                version=rds.PostgresEngineVersion.VER_16_3
            ),
            vpc=self.vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            security_groups=[self.db_security_group],
            instance_type=ec2.InstanceType(db_instance_class),
            credentials=rds.Credentials.from_secret(self.db_secret),
            allocated_storage=db_allocated_storage,
            storage_encrypted=True,
            backup_retention=Duration.days(7 if environment == "prod" else 0),
            multi_az=environment == "prod",
            publicly_accessible=False,
            deletion_protection=environment == "prod",
            removal_policy=RemovalPolicy.RETAIN if environment == "prod" else RemovalPolicy.DESTROY,
        )
