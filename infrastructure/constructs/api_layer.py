"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps the database pool warm across routes.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from typing import Optional, Sequence

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_ec2 as ec2,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_authorizers as authorizers,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


class ApiLayerConstruct(Construct):
    """Expose assignment and OTP endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        vpc: ec2.IVpc,
        db_secret_arn: str,
        runtime_env: dict,
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 15,
        jwt_issuer: Optional[str] = None,
        jwt_audience: Sequence[str] = (),
    ) -> None:
        super().__init__(scope, construct_id)

        # Installs sqlalchemy, psycopg2-binary and python-json-logger next to the code
        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.security_group = ec2.SecurityGroup(self, "LambdaSecurityGroup", vpc=vpc)

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS),
            security_groups=[self.security_group],
            environment={**runtime_env, "DB_SECRET_ARN": db_secret_arn},
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.main_lambda.add_to_role_policy(
            iam.PolicyStatement(actions=["ses:SendEmail"], resources=["*"])
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"support-assignment-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        # OTP routes act on the caller's own codes, so they carry a JWT.
        # Without an issuer the handlers see no claims and answer 401.
        otp_authorizer = None
        if jwt_issuer:
            otp_authorizer = authorizers.HttpJwtAuthorizer(
                "OtpJwtAuthorizer",
                jwt_issuer,
                jwt_audience=list(jwt_audience),
            )

        route_defs = [
            (apigw.HttpMethod.ANY, "/tickets/assign", None),
            (apigw.HttpMethod.POST, "/otp/issue", otp_authorizer),
            (apigw.HttpMethod.POST, "/otp/verify", otp_authorizer),
            (apigw.HttpMethod.POST, "/otp/email", otp_authorizer),
            (apigw.HttpMethod.GET, "/health", None),
        ]

        for method, path, authorizer in route_defs:
            self.api.add_routes(
                path=path, methods=[method], integration=integration, authorizer=authorizer
            )
