"""S3 fetchers: buckets of the active region and the objects they contain."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .calls import call, paginate
from .constants import DEFAULT_REGION
from .graph import Graph, RawItem, ResourceKind
from .normalize import normalize
from .parallel import run_parallel
from .regions import RegionFilter
from .singleflight import SharedFetch

logger = logging.getLogger(__name__)

Bucket = Dict[str, Any]


class Storage:
    """S3 fetchers bound to one region.

    The region-filtered bucket list is computed once per instance and
    shared by every fetch method, concurrent or not. Build a new instance
    to see bucket changes.

    Example:
        storage = Storage(session.client("s3"), region="eu-west-1")
        graph, buckets = storage.fetch_buckets()
        graph, objects = storage.fetch_objects()  # reuses the bucket list
    """

    def __init__(
        self,
        client: Any,
        region: str,
        default_region: str = DEFAULT_REGION,
        max_workers: Optional[int] = None,
    ):
        self.client = client
        self.region = region
        self.max_workers = max_workers
        self.region_filter = RegionFilter(region=region, default_region=default_region)
        self._buckets: SharedFetch[List[Bucket]] = SharedFetch(
            self._list_buckets_in_region, name=f"s3-buckets-{region}"
        )

    def buckets(self) -> List[Bucket]:
        """Buckets located in the active region.

        Raises:
            SharedFetchError: If listing or any location lookup failed
        """
        return self._buckets.get()

    def foreach_bucket(self, fn: Callable[[Bucket], None]) -> None:
        """Run ``fn`` once per in-region bucket, concurrently."""
        run_parallel(self.buckets(), fn, max_workers=self.max_workers, name="s3-bucket")

    def fetch_buckets(self) -> Tuple[Graph, List[Bucket]]:
        graph = Graph()
        buckets: List[Bucket] = []
        lock = threading.Lock()

        def add_bucket(bucket: Bucket) -> None:
            with lock:
                buckets.append(bucket)
            graph.add_node(normalize(RawItem(ResourceKind.BUCKET, bucket)))

        self.foreach_bucket(add_bucket)
        logger.info("Fetched %d bucket(s) in %s", len(graph), self.region)
        return graph, buckets

    def fetch_objects(self) -> Tuple[Graph, List[Dict[str, Any]]]:
        graph = Graph()
        objects: List[Dict[str, Any]] = []
        lock = threading.Lock()

        def add_objects(bucket: Bucket) -> None:
            contents = self._fetch_objects_for_bucket(bucket, graph)
            with lock:
                objects.extend(contents)

        self.foreach_bucket(add_objects)
        logger.info("Fetched %d object(s) in %s", len(graph), self.region)
        return graph, objects

    def _fetch_objects_for_bucket(self, bucket: Bucket, graph: Graph) -> List[Dict[str, Any]]:
        parent = normalize(RawItem(ResourceKind.BUCKET, bucket))
        contents = paginate(self.client, "list_objects_v2", "Contents", Bucket=parent.id)
        for obj in contents:
            child = normalize(RawItem(ResourceKind.STORAGE_OBJECT, obj)).with_properties(
                bucket_name=parent.id
            )
            graph.add_node(child)
            graph.add_relation(parent, child)
        return contents

    def _list_buckets_in_region(self) -> List[Bucket]:
        listed = call(self.client, "list_buckets").get("Buckets") or []
        kept: List[Bucket] = []
        lock = threading.Lock()

        def check_location(bucket: Bucket) -> None:
            resp = call(self.client, "get_bucket_location", Bucket=bucket["Name"])
            if self.region_filter.includes(resp.get("LocationConstraint")):
                with lock:
                    kept.append(bucket)

        run_parallel(listed, check_location, max_workers=self.max_workers, name="s3-location")
        logger.debug("%d of %d bucket(s) located in %s", len(kept), len(listed), self.region)
        return kept
