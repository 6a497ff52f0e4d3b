import pytest

from secret_mcp.queries import (
    MissingFieldError,
    NoAuth,
    PermitAuth,
    UnsupportedAuthError,
    ViewingKeyAuth,
)


def test_no_auth_is_identity():
    query = {"token_info": {}}
    auth = NoAuth()
    assert auth.wrap(query) is query
    assert auth.get_type() == "none"


@pytest.mark.parametrize(
    "query",
    [
        {"balance": {}},
        {"allowance": {"owner": "A", "spender": "B"}},
        {"tokens": {"owner": "A", "limit": 5}},
        {"anything": [1, 2, 3]},
    ],
)
def test_permit_wrapping_is_uniform(raw_permit, query):
    auth = PermitAuth(raw_permit)
    assert auth.wrap(query) == {"with_permit": {"permit": raw_permit, "query": query}}
    assert auth.get_type() == "permit"


def test_viewing_key_balance_replaces_body():
    auth = ViewingKeyAuth("secret1abc", "key123")
    assert auth.wrap({"balance": {}}) == {"balance": {"address": "secret1abc", "key": "key123"}}
    assert auth.wrap({"balance": {"address": "other"}}) == {
        "balance": {"address": "secret1abc", "key": "key123"}
    }
    assert auth.get_type() == "viewing_key"


def test_viewing_key_allowance_merges_key():
    auth = ViewingKeyAuth("secret1abc", "key123")
    query = {"allowance": {"owner": "A", "spender": "B"}}
    assert auth.wrap(query) == {"allowance": {"owner": "A", "spender": "B", "key": "key123"}}
    # input is left untouched
    assert query == {"allowance": {"owner": "A", "spender": "B"}}


@pytest.mark.parametrize("history", ["transfer_history", "transaction_history"])
def test_viewing_key_history_merges_address_and_key(history):
    auth = ViewingKeyAuth("secret1abc", "key123")
    wrapped = auth.wrap({history: {"page_size": 10}})
    assert wrapped == {history: {"page_size": 10, "address": "secret1abc", "key": "key123"}}


def test_viewing_key_generic_fallback_adds_viewer():
    auth = ViewingKeyAuth("secret1abc", "key123")
    wrapped = auth.wrap({"tokens": {"owner": "secret1abc"}})
    assert wrapped == {
        "tokens": {"owner": "secret1abc"},
        "viewer": {"address": "secret1abc", "viewing_key": "key123"},
    }


def test_viewing_key_rejects_non_object_query():
    auth = ViewingKeyAuth("secret1abc", "key123")
    with pytest.raises(UnsupportedAuthError):
        auth.wrap("balance")  # type: ignore[arg-type]
    with pytest.raises(UnsupportedAuthError):
        auth.wrap({"allowance": "owner"})


def test_viewing_key_empty_allowance_uses_viewer_form():
    auth = ViewingKeyAuth("secret1abc", "key123")
    assert auth.wrap({"allowance": None}) == {
        "allowance": None,
        "viewer": {"address": "secret1abc", "viewing_key": "key123"},
    }
    assert auth.wrap({"allowance": {}})["viewer"] == {"address": "secret1abc", "viewing_key": "key123"}


@pytest.mark.parametrize("address, key", [("", "key"), ("secret1abc", ""), (None, "key")])
def test_viewing_key_requires_both_fields(address, key):
    with pytest.raises(MissingFieldError):
        ViewingKeyAuth(address, key)


def test_metadata_never_exposes_secrets(raw_permit):
    vk_meta = ViewingKeyAuth("secret1abc", "key123").get_metadata()
    assert "key123" not in vk_meta.values()
    assert vk_meta == {"type": "viewing_key", "address": "secret1abc", "hasKey": True}

    permit_meta = PermitAuth(raw_permit).get_metadata()
    assert permit_meta["permitName"] == "p"
    assert permit_meta["permissions"] == ["balance"]
    assert "BBB" not in permit_meta.values()


def test_permit_auth_scope_helpers(raw_permit):
    raw_permit["params"]["allowed_tokens"] = ["secret1token"]
    auth = PermitAuth(raw_permit)
    assert auth.covers_token("secret1token")
    assert not auth.covers_token("secret1other")
    assert auth.has_permission("balance")
    assert not auth.has_permission("history")
