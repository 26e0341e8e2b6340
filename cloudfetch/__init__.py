"""cloudfetch - concurrent AWS resource fetching into a graph.

Queries IAM and S3 listing APIs in parallel, normalizes every item into a
common node shape, and links parents to children:
- IAM users, groups, roles and customer managed policies
- S3 buckets of the active region and the objects they contain
"""

__version__ = "0.1.0"

from cloudfetch.access import Access, Security
from cloudfetch.errors import FetchError, NormalizationError, RemoteCallError, SharedFetchError
from cloudfetch.graph import Graph, Node, RawItem, Relation, ResourceKind
from cloudfetch.normalize import normalize
from cloudfetch.parallel import run_parallel
from cloudfetch.regions import RegionFilter
from cloudfetch.singleflight import SharedFetch
from cloudfetch.storage import Storage

__all__ = [
    "__version__",
    # Graph model
    "Graph",
    "Node",
    "RawItem",
    "Relation",
    "ResourceKind",
    "normalize",
    # Concurrency
    "run_parallel",
    "SharedFetch",
    # Fetchers
    "Access",
    "Security",
    "Storage",
    "RegionFilter",
    # Errors
    "FetchError",
    "NormalizationError",
    "RemoteCallError",
    "SharedFetchError",
]
