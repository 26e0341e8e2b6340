"""IAM fetchers and STS caller lookups."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .calls import call, paginate
from .graph import Graph, RawItem, ResourceKind
from .normalize import normalize
from .parallel import run_parallel

logger = logging.getLogger(__name__)


class Access:
    """IAM fetchers. IAM is global, so no region filtering applies."""

    def __init__(self, client: Any, max_workers: Optional[int] = None):
        self.client = client
        self.max_workers = max_workers

    def fetch_users(self) -> Tuple[Graph, List[Dict[str, Any]]]:
        """Users from the authorization details report and from ListUsers.

        Both listings run concurrently and feed the same graph, so a user
        normally appears twice. The returned raw items are the
        authorization details entries.
        """
        graph = Graph()
        details: List[Dict[str, Any]] = []

        def from_authorization_details() -> None:
            entries = paginate(
                self.client,
                "get_account_authorization_details",
                "UserDetailList",
                Filter=["User"],
            )
            for entry in entries:
                details.append(entry)
                graph.add_node(normalize(RawItem(ResourceKind.USER, entry)))

        def from_list_users() -> None:
            for user in paginate(self.client, "list_users", "Users"):
                graph.add_node(normalize(RawItem(ResourceKind.USER, user)))

        listings: List[Callable[[], None]] = [from_authorization_details, from_list_users]
        run_parallel(listings, lambda listing: listing(), max_workers=self.max_workers, name="iam-users")
        logger.info("Fetched %d user node(s)", len(graph))
        return graph, details

    def fetch_groups(self) -> Tuple[Graph, List[Dict[str, Any]]]:
        return self._fetch_flat(ResourceKind.GROUP, "list_groups", "Groups")

    def fetch_roles(self) -> Tuple[Graph, List[Dict[str, Any]]]:
        return self._fetch_flat(ResourceKind.ROLE, "list_roles", "Roles")

    def fetch_policies(self) -> Tuple[Graph, List[Dict[str, Any]]]:
        """Customer managed policies only; AWS managed ones are skipped."""
        return self._fetch_flat(ResourceKind.POLICY, "list_policies", "Policies", Scope="Local")

    def _fetch_flat(
        self, kind: ResourceKind, method: str, results_key: str, **kwargs: Any
    ) -> Tuple[Graph, List[Dict[str, Any]]]:
        graph = Graph()
        items = paginate(self.client, method, results_key, **kwargs)
        run_parallel(
            items,
            lambda item: graph.add_node(normalize(RawItem(kind, item))),
            max_workers=self.max_workers,
            name=f"iam-{kind.value}",
        )
        logger.info("Fetched %d %s node(s)", len(graph), kind.value)
        return graph, items


class Security:
    """Identity of the caller behind a session."""

    def __init__(self, client: Any):
        self.client = client

    def caller_identity(self) -> Dict[str, Any]:
        """Raw GetCallerIdentity response."""
        return call(self.client, "get_caller_identity")

    def get_user_id(self) -> str:
        """ARN of the calling principal."""
        return self.caller_identity()["Arn"]

    def get_account_id(self) -> str:
        return self.caller_identity()["Account"]
