"""
Main CDK Stack for the support assignment and OTP verification service.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    aws_ec2 as ec2,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class SupportServiceStack(Stack):
    """Main stack wiring the data and API constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "support-assignment")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("CostCenter", "digital-banking")
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Network + database.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
            db_instance_class=settings.db_instance_class,
            db_allocated_storage=settings.db_allocated_storage,
        )

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            vpc=data_construct.vpc,
            db_secret_arn=data_construct.db_secret.secret_arn,
            runtime_env=settings.lambda_environment(),
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
            jwt_issuer=settings.auth_jwt_issuer,
            jwt_audience=settings.auth_jwt_audience,
        )

        # Permissions for the API Lambda.
        data_construct.db_secret.grant_read(api_construct.main_lambda)
        data_construct.db_security_group.add_ingress_rule(
            api_construct.security_group,
            ec2.Port.tcp(5432),
            "API Lambda to Postgres",
        )

        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "DbSecretArn", value=data_construct.db_secret.secret_arn)
