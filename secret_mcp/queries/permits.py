"""
SNIP-24 permit parsing and validation.

Raw permits arrive from a wallet signing flow and frequently carry extra
top-level fields (account_number, sequence, memo, ...). Everything that
narrows an untrusted permit into the canonical shape lives in this module;
nothing outside it should read a raw permit directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from secret_mcp.queries.errors import PermitValidationError

logger = logging.getLogger(__name__)

DEFAULT_CHAIN_ID = "secret-4"
PERMIT_FIELDS = ("params", "signature")

NFT_PERMIT_PERMISSIONS: Tuple[str, ...] = (
    "balance",
    "history",
    "metadata",
    "owner",
    "private_metadata",
    "royalty_info",
    "tokens",
    "token_approvals",
    "inventory_approvals",
)


@dataclass(frozen=True, slots=True)
class PubKey:
    type: str
    value: str


@dataclass(frozen=True, slots=True)
class PermitSignature:
    pub_key: PubKey
    signature: str


@dataclass(frozen=True, slots=True)
class PermitParams:
    permit_name: str
    allowed_tokens: Tuple[str, ...]
    permissions: Tuple[str, ...]
    chain_id: str


@dataclass(frozen=True, slots=True)
class Permit:
    """Canonical, validated permit. Instances are immutable."""

    params: PermitParams
    signature: PermitSignature

    def to_dict(self) -> Dict[str, Any]:
        """Return a fresh JSON-serializable mapping in the SNIP-24 shape."""
        return {
            "params": {
                "permit_name": self.params.permit_name,
                "allowed_tokens": list(self.params.allowed_tokens),
                "permissions": list(self.params.permissions),
                "chain_id": self.params.chain_id,
            },
            "signature": {
                "pub_key": {
                    "type": self.signature.pub_key.type,
                    "value": self.signature.pub_key.value,
                },
                "signature": self.signature.signature,
            },
        }


PermitLike = Union[Permit, Mapping[str, Any]]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _string_tuple(values: Iterable[Any], field_name: str) -> Tuple[str, ...]:
    items = tuple(values)
    for item in items:
        if not isinstance(item, str):
            raise PermitValidationError(f"Invalid permit: {field_name} must contain only strings")
    return items


def discarded_fields(raw: Mapping[str, Any]) -> List[str]:
    """List top-level fields of a raw permit that cleaning drops."""
    return [key for key in raw if key not in PERMIT_FIELDS]


def validate_and_clean(raw: Any) -> Permit:
    """
    Validate an untrusted raw permit and normalize it to a canonical Permit.

    chain_id is taken from params, then from the legacy top-level placement,
    then defaults to ``secret-4``. Token and permission lists are copied so the
    caller's objects never alias the returned permit.

    Raises:
        PermitValidationError: the raw permit is missing or mistyping a field.
    """
    if not isinstance(raw, Mapping):
        raise PermitValidationError("Invalid permit: permit must be an object")

    params = raw.get("params")
    if not isinstance(params, Mapping):
        raise PermitValidationError("Invalid permit: missing params object")

    signature = raw.get("signature")
    if not isinstance(signature, Mapping):
        raise PermitValidationError("Invalid permit: missing signature object")

    pub_key = signature.get("pub_key")
    if not pub_key:
        raise PermitValidationError("Invalid permit: missing signature.pub_key")
    if not isinstance(pub_key, Mapping):
        raise PermitValidationError("Invalid permit: signature.pub_key must be an object")

    if not _is_non_empty_str(signature.get("signature")):
        raise PermitValidationError("Invalid permit: missing signature.signature")

    if not _is_non_empty_str(params.get("permit_name")):
        raise PermitValidationError("Invalid permit: missing permit_name")

    allowed_tokens = params.get("allowed_tokens")
    if not _is_sequence(allowed_tokens):
        raise PermitValidationError("Invalid permit: missing or invalid allowed_tokens array")

    permissions = params.get("permissions")
    if not _is_sequence(permissions):
        raise PermitValidationError("Invalid permit: missing or invalid permissions array")
    if len(permissions) == 0:
        raise PermitValidationError("Invalid permit: permissions array cannot be empty")

    if not _is_non_empty_str(pub_key.get("type")) or not _is_non_empty_str(pub_key.get("value")):
        raise PermitValidationError("Invalid permit: incomplete pub_key structure")

    chain_id = params.get("chain_id") or raw.get("chain_id") or DEFAULT_CHAIN_ID
    if not isinstance(chain_id, str):
        raise PermitValidationError("Invalid permit: chain_id must be a string")

    permit = Permit(
        params=PermitParams(
            permit_name=params["permit_name"],
            allowed_tokens=_string_tuple(allowed_tokens, "allowed_tokens"),
            permissions=_string_tuple(permissions, "permissions"),
            chain_id=chain_id,
        ),
        signature=PermitSignature(
            pub_key=PubKey(type=pub_key["type"], value=pub_key["value"]),
            signature=signature["signature"],
        ),
    )

    logger.debug(
        "permit validated name=%s chain_id=%s tokens=%d permissions=%d discarded=%s",
        permit.params.permit_name,
        permit.params.chain_id,
        len(permit.params.allowed_tokens),
        len(permit.params.permissions),
        discarded_fields(raw),
        extra={"auth": "permit"},
    )
    return permit


def validate_permit(permit: Any) -> bool:
    """
    Strictly validate a permit that is expected to already be canonical.

    Unlike validate_and_clean, nothing is defaulted: chain_id must be present
    inside params.
    """
    if not isinstance(permit, Mapping):
        raise PermitValidationError("Permit must be an object")

    params = permit.get("params")
    if not isinstance(params, Mapping):
        raise PermitValidationError("Permit params must be an object")
    if not _is_non_empty_str(params.get("permit_name")):
        raise PermitValidationError("permit_name is required and must be a string")
    if not _is_non_empty_str(params.get("chain_id")):
        raise PermitValidationError("chain_id is required and must be a string")
    if not _is_sequence(params.get("allowed_tokens")):
        raise PermitValidationError("allowed_tokens must be an array")
    if not _is_sequence(params.get("permissions")):
        raise PermitValidationError("permissions must be an array")
    if len(params["permissions"]) == 0:
        raise PermitValidationError("permissions array cannot be empty")

    signature = permit.get("signature")
    if not isinstance(signature, Mapping):
        raise PermitValidationError("Permit signature must be an object")
    pub_key = signature.get("pub_key")
    if not isinstance(pub_key, Mapping):
        raise PermitValidationError("pub_key is required and must be an object")
    if not _is_non_empty_str(pub_key.get("type")):
        raise PermitValidationError("pub_key.type is required and must be a string")
    if not _is_non_empty_str(pub_key.get("value")):
        raise PermitValidationError("pub_key.value is required and must be a string")
    if not _is_non_empty_str(signature.get("signature")):
        raise PermitValidationError("signature is required and must be a string")

    return True


def as_permit(permit: PermitLike) -> Permit:
    """Accept a Permit or a canonical permit mapping and return a Permit."""
    if isinstance(permit, Permit):
        return permit
    validate_permit(permit)
    return validate_and_clean(permit)


def validate_nft_permissions(permissions: Iterable[str]) -> bool:
    """Check every permission belongs to the SNIP-721 permit vocabulary."""
    invalid = [permission for permission in permissions if permission not in NFT_PERMIT_PERMISSIONS]
    if invalid:
        raise PermitValidationError(
            f"Invalid NFT permission: {', '.join(invalid)}. "
            f"Valid permissions: {', '.join(NFT_PERMIT_PERMISSIONS)}"
        )
    return True


def has_permission(permit: Permit, permission: str) -> bool:
    return permission in permit.params.permissions


def is_token_allowed(permit: Permit, token_id: str) -> bool:
    """An empty allowed_tokens list leaves the permit unrestricted."""
    allowed = permit.params.allowed_tokens
    return len(allowed) == 0 or token_id in allowed
