import pytest

from secret_mcp.queries import (
    PermitValidationError,
    nft_balance_query,
    nft_info_query,
    nft_owner_of_query,
    nft_private_metadata_query,
    nft_tokens_query,
    validate_and_clean,
)


@pytest.fixture
def nft_permit(raw_permit):
    raw_permit["params"]["permissions"] = ["owner", "metadata", "tokens", "balance"]
    raw_permit["params"]["allowed_tokens"] = ["1", "2"]
    return raw_permit


def test_owner_of_query(nft_permit):
    built = nft_owner_of_query("1", nft_permit, include_expired=True)
    assert built == {
        "with_permit": {
            "query": {"owner_of": {"token_id": "1", "include_expired": True}},
            "permit": nft_permit,
        }
    }


def test_owner_of_omits_include_expired_by_default(nft_permit):
    built = nft_owner_of_query("1", nft_permit)
    assert built["with_permit"]["query"] == {"owner_of": {"token_id": "1"}}


def test_info_query_checks_token_scope(nft_permit):
    assert nft_info_query("2", nft_permit)["with_permit"]["query"] == {"nft_info": {"token_id": "2"}}
    with pytest.raises(PermitValidationError, match="Token 3 is not allowed"):
        nft_info_query("3", nft_permit)


def test_missing_permission_is_rejected(nft_permit):
    with pytest.raises(PermitValidationError, match="private_metadata"):
        nft_private_metadata_query("1", nft_permit)


def test_balance_and_tokens_queries(nft_permit):
    assert nft_balance_query("secret1abc", nft_permit)["with_permit"]["query"] == {
        "balance": {"owner": "secret1abc"}
    }
    assert nft_tokens_query("secret1abc", nft_permit)["with_permit"]["query"] == {
        "tokens": {"owner": "secret1abc", "limit": 30}
    }
    assert nft_tokens_query("secret1abc", nft_permit, start_after="9", limit=5)["with_permit"][
        "query"
    ] == {"tokens": {"owner": "secret1abc", "start_after": "9", "limit": 5}}


def test_accepts_canonical_permit_object(nft_permit):
    permit = validate_and_clean(nft_permit)
    assert nft_balance_query("secret1abc", permit)["with_permit"]["permit"] == nft_permit


def test_requires_canonical_chain_id(nft_permit):
    del nft_permit["params"]["chain_id"]
    with pytest.raises(PermitValidationError, match="chain_id"):
        nft_tokens_query("secret1abc", nft_permit)
