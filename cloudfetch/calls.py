"""Helpers wrapping boto3 calls so failures surface as RemoteCallError."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from .errors import RemoteCallError

logger = logging.getLogger(__name__)


def call(client: Any, method: str, **kwargs: Any) -> Dict[str, Any]:
    """Invoke ``client.<method>(**kwargs)``.

    Raises:
        RemoteCallError: On any botocore client or transport error
    """
    logger.debug("Calling %s %s", method, kwargs or "")
    try:
        return getattr(client, method)(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise RemoteCallError.from_exception(method, exc) from exc


def paginate(client: Any, method: str, results_key: str, **kwargs: Any) -> List[Dict[str, Any]]:
    """Collect ``results_key`` from every page of a paginated call.

    Unlike a best-effort collector this never swallows errors: a failing
    page fails the whole listing.

    Raises:
        RemoteCallError: On any botocore client or transport error
    """
    logger.debug("Paginating %s %s", method, kwargs or "")
    results: List[Dict[str, Any]] = []
    try:
        paginator = client.get_paginator(method)
        for page in paginator.paginate(**kwargs):
            results.extend(page.get(results_key) or [])
    except (ClientError, BotoCoreError) as exc:
        raise RemoteCallError.from_exception(method, exc) from exc
    return results
