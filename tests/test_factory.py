import pytest

from secret_mcp.queries import (
    NoAuth,
    PermitAuth,
    PermitValidationError,
    QueryFactory,
    ViewingKeyAuth,
)


def test_token_balance_with_permit_end_to_end(raw_permit):
    built = QueryFactory.token_balance_with_permit(raw_permit).build()
    assert built == {
        "with_permit": {
            "permit": {
                "params": {
                    "permit_name": "p",
                    "allowed_tokens": [],
                    "permissions": ["balance"],
                    "chain_id": "secret-4",
                },
                "signature": {
                    "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": "AAA"},
                    "signature": "BBB",
                },
            },
            "query": {"balance": {}},
        }
    }


def test_token_balance_with_permit_strips_extra_fields(raw_permit):
    raw_permit.update(account_number="12", sequence="3", memo="hi")
    built = QueryFactory.token_balance_with_permit(raw_permit).build()
    assert set(built["with_permit"]["permit"]) == {"params", "signature"}


def test_malformed_permit_fails_before_build(raw_permit):
    raw_permit["params"]["permissions"] = []
    with pytest.raises(PermitValidationError):
        QueryFactory.token_balance_with_permit(raw_permit)


def test_token_balance_with_viewing_key():
    built = QueryFactory.token_balance_with_viewing_key("secret1abc", "key123").build()
    assert built == {"balance": {"address": "secret1abc", "key": "key123"}}


def test_token_info_is_public():
    builder = QueryFactory.token_info()
    assert isinstance(builder.auth_method, NoAuth)
    assert builder.build() == {"token_info": {}}


def test_allowance_with_permit(raw_permit):
    built = QueryFactory.allowance_with_permit("ownerX", "spenderY", raw_permit).build()
    assert built["with_permit"]["query"] == {"allowance": {"owner": "ownerX", "spender": "spenderY"}}


def test_nft_ownership_with_permit(raw_permit):
    built = QueryFactory.nft_ownership_with_permit("ownerX", raw_permit).build()
    assert built["with_permit"]["query"] == {"tokens": {"owner": "ownerX", "limit": 100}}
    assert built["with_permit"]["permit"] == raw_permit


def test_auth_for_prefers_permit(raw_permit):
    assert isinstance(QueryFactory.auth_for("secret1abc", "key", raw_permit), PermitAuth)
    assert isinstance(QueryFactory.auth_for("secret1abc", "key"), ViewingKeyAuth)
    assert isinstance(QueryFactory.auth_for("secret1abc"), NoAuth)
