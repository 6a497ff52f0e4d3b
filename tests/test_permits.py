import pytest

from secret_mcp.queries import (
    NFT_PERMIT_PERMISSIONS,
    Permit,
    PermitAuth,
    PermitValidationError,
    discarded_fields,
    has_permission,
    is_token_allowed,
    validate_and_clean,
    validate_nft_permissions,
    validate_permit,
)


def test_chain_id_from_params(raw_permit):
    raw_permit["params"]["chain_id"] = "pulsar-3"
    raw_permit["chain_id"] = "secret-4"
    assert validate_and_clean(raw_permit).params.chain_id == "pulsar-3"


def test_chain_id_from_top_level(raw_permit):
    del raw_permit["params"]["chain_id"]
    raw_permit["chain_id"] = "pulsar-3"
    assert validate_and_clean(raw_permit).params.chain_id == "pulsar-3"


def test_chain_id_default(raw_permit):
    del raw_permit["params"]["chain_id"]
    assert validate_and_clean(raw_permit).params.chain_id == "secret-4"


def test_token_list_is_copied(raw_permit):
    raw_permit["params"]["allowed_tokens"] = ["secret1token"]
    auth = PermitAuth(raw_permit)
    raw_permit["params"]["allowed_tokens"].append("secret1other")
    raw_permit["params"]["permissions"].append("owner")

    assert auth.permit.params.allowed_tokens == ("secret1token",)
    assert auth.permit.params.permissions == ("balance",)


def test_to_dict_returns_fresh_lists(raw_permit):
    permit = validate_and_clean(raw_permit)
    first = permit.to_dict()
    first["params"]["permissions"].append("owner")
    assert permit.to_dict()["params"]["permissions"] == ["balance"]


def test_empty_permissions_rejected(raw_permit):
    raw_permit["params"]["permissions"] = []
    with pytest.raises(PermitValidationError, match="permissions array cannot be empty"):
        PermitAuth(raw_permit)


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda p: p.pop("params"), "missing params"),
        (lambda p: p.pop("signature"), "missing signature object"),
        (lambda p: p["signature"].pop("pub_key"), "missing signature.pub_key"),
        (lambda p: p["signature"].update(signature=123), "missing signature.signature"),
        (lambda p: p["params"].update(permit_name=""), "missing permit_name"),
        (lambda p: p["params"].update(allowed_tokens="secret1token"), "allowed_tokens"),
        (lambda p: p["params"].pop("permissions"), "permissions array"),
        (lambda p: p["signature"]["pub_key"].pop("value"), "incomplete pub_key"),
    ],
)
def test_structural_failures(raw_permit, mutate, message):
    mutate(raw_permit)
    with pytest.raises(PermitValidationError, match=message):
        validate_and_clean(raw_permit)


def test_non_mapping_permit_rejected():
    with pytest.raises(PermitValidationError):
        validate_and_clean("not a permit")


def test_non_string_token_rejected(raw_permit):
    raw_permit["params"]["allowed_tokens"] = ["ok", 5]
    with pytest.raises(PermitValidationError, match="only strings"):
        validate_and_clean(raw_permit)


def test_discarded_fields_are_stripped(raw_permit):
    raw_permit.update(account_number="0", sequence="0", memo="", chain_id="secret-4")
    assert discarded_fields(raw_permit) == ["account_number", "sequence", "memo", "chain_id"]
    cleaned = validate_and_clean(raw_permit).to_dict()
    assert set(cleaned) == {"params", "signature"}


def test_validate_nft_permissions_lists_invalid_and_valid():
    assert validate_nft_permissions(["owner", "tokens"]) is True
    with pytest.raises(PermitValidationError) as excinfo:
        validate_nft_permissions(["owner", "transfer", "mint"])
    message = str(excinfo.value)
    assert "transfer, mint" in message
    for permission in NFT_PERMIT_PERMISSIONS:
        assert permission in message


def test_scope_predicates(raw_permit):
    permit = validate_and_clean(raw_permit)
    assert has_permission(permit, "balance")
    assert not has_permission(permit, "owner")
    assert is_token_allowed(permit, "anyTokenAddr")


def test_token_scope_restricted(raw_permit):
    raw_permit["params"]["allowed_tokens"] = ["secret1a"]
    permit = validate_and_clean(raw_permit)
    assert is_token_allowed(permit, "secret1a")
    assert not is_token_allowed(permit, "secret1b")


def test_validate_permit_requires_chain_id(raw_permit):
    assert validate_permit(raw_permit) is True
    del raw_permit["params"]["chain_id"]
    with pytest.raises(PermitValidationError, match="chain_id"):
        validate_permit(raw_permit)


def test_permit_is_immutable(raw_permit):
    permit = validate_and_clean(raw_permit)
    assert isinstance(permit, Permit)
    with pytest.raises(AttributeError):
        permit.params = None  # type: ignore[misc]
