from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from . import __version__, auth
from .access import Access
from .bundle import write_graph
from .config import get_settings
from .constants import DEFAULT_OUTPUT_DIR
from .errors import FetchError
from .graph import Graph
from .regions import all_regions, is_valid_region
from .storage import Storage

logger = logging.getLogger(__name__)

IAM_RESOURCES = ["users", "groups", "roles", "policies"]
S3_RESOURCES = ["buckets", "objects"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Fetch AWS resources into a graph")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("resource", choices=IAM_RESOURCES + S3_RESOURCES + ["regions"], help="what to fetch")
    parser.add_argument("--output", "-o", default=DEFAULT_OUTPUT_DIR, help="directory for nodes/relations JSONL")
    parser.add_argument("--profile", default=settings.profile, help="AWS profile name")
    parser.add_argument("--region", default=settings.region, help="AWS region override")
    parser.add_argument(
        "--max-workers",
        type=int,
        default=settings.max_workers,
        help="concurrency cap per fan-out (default: one worker per item)",
    )
    return parser.parse_args(argv)


def run_fetch(args: argparse.Namespace) -> Dict[str, object]:
    settings = get_settings()
    if args.region and not is_valid_region(args.region):
        raise SystemExit(f"Invalid region: {args.region}")

    session, caller = auth.resolve_session(profile=args.profile, region=args.region)
    region = caller.resolved_region or settings.default_region
    logger.info("Fetching %s as %s in %s", args.resource, caller.arn, region)

    fetchers: Dict[str, Callable[[], Tuple[Graph, list]]]
    if args.resource in IAM_RESOURCES:
        access = Access(session.client("iam"), max_workers=args.max_workers)
        fetchers = {
            "users": access.fetch_users,
            "groups": access.fetch_groups,
            "roles": access.fetch_roles,
            "policies": access.fetch_policies,
        }
    else:
        storage = Storage(
            session.client("s3", region_name=region),
            region=region,
            default_region=settings.default_region,
            max_workers=args.max_workers,
        )
        fetchers = {"buckets": storage.fetch_buckets, "objects": storage.fetch_objects}

    graph, raw_items = fetchers[args.resource]()
    paths = write_graph(graph, Path(args.output))
    return {
        "resource": args.resource,
        "region": region,
        "nodes": len(graph),
        "relations": len(graph.relations),
        "raw_items": len(raw_items),
        "files": {k: str(v) for k, v in paths.items()},
    }


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.resource == "regions":
        print(json.dumps({"regions": all_regions()}, indent=2))
        return
    try:
        summary = run_fetch(args)
    except FetchError as exc:
        logger.error("Fetch failed: %s", exc)
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        raise SystemExit(1) from exc
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
