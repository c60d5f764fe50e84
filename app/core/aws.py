from __future__ import annotations

import boto3

from .settings import S

_session = boto3.session.Session(region_name=S.aws_region or "us-east-1")


def dynamodb_resource():
    # DYNAMODB_ENDPOINT_URL points at dynamodb-local during development.
    if S.dynamodb_endpoint_url:
        return _session.resource("dynamodb", endpoint_url=S.dynamodb_endpoint_url)
    return _session.resource("dynamodb")


def s3_client():
    return _session.client("s3")
