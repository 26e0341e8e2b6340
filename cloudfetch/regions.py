"""Region table and the residency rule used to scope regional listings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import boto3

from .constants import CHINA_REGION_PATTERN, DEFAULT_REGION, REGION_PATTERN, US_GOV_REGION_PATTERN

logger = logging.getLogger(__name__)

_REGION_RE = re.compile(REGION_PATTERN)
_CHINA_REGION_RE = re.compile(CHINA_REGION_PATTERN)
_US_GOV_REGION_RE = re.compile(US_GOV_REGION_PATTERN)


def all_regions(service: str = "ec2") -> List[str]:
    """Sorted region names botocore knows about, across every partition."""
    session = boto3.session.Session()
    regions = set()
    for partition in session.get_available_partitions():
        regions.update(session.get_available_regions(service, partition_name=partition))
    return sorted(regions)


def is_valid_region(name: str) -> bool:
    return bool(
        _REGION_RE.match(name) or _CHINA_REGION_RE.match(name) or _US_GOV_REGION_RE.match(name)
    )


@dataclass(frozen=True)
class RegionFilter:
    """Decide whether a resource belongs to the active region.

    A resource reporting no location (``None`` or ``""``) is assumed to live
    in ``default_region``, so it is kept only when that is the active region.
    A resource with a location is kept only on an exact match.
    """

    region: str
    default_region: str = DEFAULT_REGION

    def includes(self, location: Optional[str]) -> bool:
        if not location:
            return self.region == self.default_region
        return location == self.region
