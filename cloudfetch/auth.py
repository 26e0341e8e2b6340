from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import boto3

from .access import Security

logger = logging.getLogger(__name__)


@dataclass
class CallerIdentity:
    account: str
    arn: str
    resolved_region: Optional[str]
    partition: str


def resolve_session(profile: Optional[str] = None, region: Optional[str] = None) -> Tuple[boto3.Session, CallerIdentity]:
    """Create a boto3 session and fetch caller identity.

    Raises:
        RemoteCallError: If STS cannot confirm who the caller is
    """
    session = boto3.Session(profile_name=profile, region_name=region)
    identity = Security(session.client("sts")).caller_identity()
    arn: str = identity["Arn"]
    partition = arn.split(":")[1] if ":" in arn else "aws"
    logger.debug("Resolved caller %s (region %s)", arn, session.region_name)
    return session, CallerIdentity(
        account=identity["Account"],
        arn=arn,
        resolved_region=session.region_name,
        partition=partition,
    )
