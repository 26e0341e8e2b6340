"""Convert raw AWS listing items into graph nodes.

Each :class:`ResourceKind` has exactly one mapping rule registered with
:func:`rule`. Supporting a new kind means adding an enum member and a rule;
existing rules are left alone. Rules are pure functions of the raw item.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import NormalizationError
from .graph import Node, RawItem, ResourceKind

RuleFn = Callable[[Mapping[str, Any]], Node]

RULES: Dict[ResourceKind, RuleFn] = {}


def rule(kind: ResourceKind) -> Callable[[RuleFn], RuleFn]:
    """Register ``fn`` as the mapping rule for ``kind``."""

    def register(fn: RuleFn) -> RuleFn:
        RULES[kind] = fn
        return fn

    return register


def normalize(raw: RawItem) -> Node:
    """Map one raw item to a :class:`Node`.

    Raises:
        NormalizationError: If the kind has no rule or the item lacks its identifier
    """
    try:
        kind = ResourceKind(raw.kind)
    except ValueError:
        raise NormalizationError(str(raw.kind)) from None
    fn = RULES.get(kind)
    if fn is None:
        raise NormalizationError(kind.value)
    return fn(raw.data)


def _iso(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _require(data: Mapping[str, Any], key: str, kind: ResourceKind) -> str:
    value = data.get(key)
    if not value:
        raise NormalizationError(kind.value, f"missing {key}")
    return value


def _names(entries: Any, key: str) -> str:
    """Flatten a list of dicts into a comma-separated list of ``key`` values."""
    return ",".join(e[key] for e in entries or [] if e.get(key))


@rule(ResourceKind.USER)
def _user(data: Mapping[str, Any]) -> Node:
    # ListUsers and GetAccountAuthorizationDetails both land here; the latter
    # carries attachments, the former the password timestamp.
    kind = ResourceKind.USER
    props: Dict[str, Any] = {
        "name": data.get("UserName"),
        "arn": data.get("Arn"),
        "path": data.get("Path"),
        "created": _iso(data.get("CreateDate")),
    }
    if "PasswordLastUsed" in data:
        props["password_last_used"] = _iso(data["PasswordLastUsed"])
    if "AttachedManagedPolicies" in data:
        props["attached_policies"] = _names(data["AttachedManagedPolicies"], "PolicyName")
    if "UserPolicyList" in data:
        props["inline_policies"] = _names(data["UserPolicyList"], "PolicyName")
    if "GroupList" in data:
        props["groups"] = ",".join(data["GroupList"] or [])
    return Node(kind=kind, id=_require(data, "UserId", kind), properties=props)


@rule(ResourceKind.GROUP)
def _group(data: Mapping[str, Any]) -> Node:
    kind = ResourceKind.GROUP
    return Node(
        kind=kind,
        id=_require(data, "GroupId", kind),
        properties={
            "name": data.get("GroupName"),
            "arn": data.get("Arn"),
            "path": data.get("Path"),
            "created": _iso(data.get("CreateDate")),
        },
    )


@rule(ResourceKind.ROLE)
def _role(data: Mapping[str, Any]) -> Node:
    kind = ResourceKind.ROLE
    return Node(
        kind=kind,
        id=_require(data, "RoleId", kind),
        properties={
            "name": data.get("RoleName"),
            "arn": data.get("Arn"),
            "path": data.get("Path"),
            "created": _iso(data.get("CreateDate")),
            "max_session_duration": data.get("MaxSessionDuration"),
        },
    )


@rule(ResourceKind.POLICY)
def _policy(data: Mapping[str, Any]) -> Node:
    kind = ResourceKind.POLICY
    return Node(
        kind=kind,
        id=_require(data, "PolicyId", kind),
        properties={
            "name": data.get("PolicyName"),
            "arn": data.get("Arn"),
            "path": data.get("Path"),
            "default_version": data.get("DefaultVersionId"),
            "attachment_count": data.get("AttachmentCount"),
            "attachable": data.get("IsAttachable"),
            "created": _iso(data.get("CreateDate")),
            "updated": _iso(data.get("UpdateDate")),
        },
    )


@rule(ResourceKind.BUCKET)
def _bucket(data: Mapping[str, Any]) -> Node:
    kind = ResourceKind.BUCKET
    name = _require(data, "Name", kind)
    return Node(
        kind=kind,
        id=name,
        properties={"name": name, "created": _iso(data.get("CreationDate"))},
    )


@rule(ResourceKind.STORAGE_OBJECT)
def _storage_object(data: Mapping[str, Any]) -> Node:
    kind = ResourceKind.STORAGE_OBJECT
    key = _require(data, "Key", kind)
    owner = data.get("Owner") or {}
    return Node(
        kind=kind,
        id=key,
        properties={
            "key": key,
            "size": data.get("Size"),
            "modified": _iso(data.get("LastModified")),
            "storage_class": data.get("StorageClass"),
            "etag": (data.get("ETag") or "").strip('"') or None,
            "owner": owner.get("ID"),
        },
    )
