import logging

import pytest

from secret_mcp.metrics import default_metrics
from secret_mcp.queries import PermitValidationError, QueryFactory
from secret_mcp.queries import compat


def test_permit_path_matches_factory(raw_permit):
    expected = QueryFactory.token_balance_with_permit(raw_permit).build()
    assert compat.format_token_balance_query("secret1abc", None, raw_permit) == expected
    assert default_metrics.snapshot()["legacy_permit_fallbacks"] == 0


def test_permit_wins_over_viewing_key(raw_permit):
    built = compat.format_token_balance_query("secret1abc", "key123", raw_permit)
    assert "with_permit" in built


def test_viewing_key_path():
    assert compat.format_token_balance_query("secret1abc", "key123") == {
        "balance": {"address": "secret1abc", "key": "key123"}
    }


def test_no_credentials():
    assert compat.format_token_balance_query("secret1abc") == {"balance": {}}


def test_legacy_fallback_is_logged_and_counted(raw_permit, caplog):
    raw_permit["params"]["permissions"] = []
    with caplog.at_level(logging.WARNING, logger="secret_mcp.queries.compat"):
        built = compat.format_token_balance_query(
            "secret1abc", None, raw_permit, allow_legacy_fallback=True
        )

    assert built == {
        "with_permit": {
            "permit": {
                "params": {
                    "permit_name": "p",
                    "allowed_tokens": [],
                    "permissions": [],
                    "chain_id": "secret-4",
                },
                "signature": raw_permit["signature"],
            },
            "query": {"balance": {}},
        }
    }
    assert default_metrics.snapshot()["legacy_permit_fallbacks"] == 1
    assert any("legacy permit" in record.getMessage() for record in caplog.records)


def test_legacy_fallback_can_be_disabled(raw_permit):
    raw_permit["params"]["permissions"] = []
    with pytest.raises(PermitValidationError):
        compat.format_token_balance_query("secret1abc", None, raw_permit, allow_legacy_fallback=False)
    assert default_metrics.snapshot()["legacy_permit_fallbacks"] == 0


def test_legacy_fallback_follows_config(raw_permit, monkeypatch):
    raw_permit["params"]["permissions"] = []
    monkeypatch.setattr(compat.default_config, "legacy_permit_fallback", False)
    with pytest.raises(PermitValidationError):
        compat.format_token_balance_query("secret1abc", None, raw_permit)


def test_legacy_cleaning_preserves_pub_key_type_and_drops_missing(raw_permit):
    raw_permit["signature"]["pub_key"]["type"] = "/cosmos.crypto.secp256k1.PubKey"
    del raw_permit["params"]["permit_name"]
    del raw_permit["params"]["chain_id"]
    raw_permit["chain_id"] = "pulsar-3"
    raw_permit["memo"] = "dropped"

    built = compat.format_legacy_permit_query(raw_permit)
    permit = built["with_permit"]["permit"]
    assert permit["signature"]["pub_key"]["type"] == "/cosmos.crypto.secp256k1.PubKey"
    assert "permit_name" not in permit["params"]
    assert permit["params"]["chain_id"] == "pulsar-3"
    assert set(permit) == {"params", "signature"}


def test_legacy_cleaning_copies_lists(raw_permit):
    raw_permit["params"]["allowed_tokens"] = ["secret1a"]
    built = compat.format_legacy_permit_query(raw_permit)
    raw_permit["params"]["allowed_tokens"].append("secret1b")
    assert built["with_permit"]["permit"]["params"]["allowed_tokens"] == ["secret1a"]


def test_legacy_cleaning_rejects_non_object():
    with pytest.raises(PermitValidationError):
        compat.format_legacy_permit_query(["not", "a", "permit"])


def test_static_wrappers():
    assert compat.format_token_info_query() == {"token_info": {}}
    assert compat.format_token_config_query() == {"token_config": {}}
    assert compat.format_exchange_rate_query() == {"exchange_rate": {}}
    assert compat.format_minters_query() == {"minters": {}}
    assert compat.format_nft_contract_info_query() == {"contract_info": {}}
    assert compat.format_num_tokens_query() == {"num_tokens": {}}
    assert compat.format_tokens_for_sale_query(5) == {"tokens_for_sale": {"limit": 5}}


def test_allowance_wrapper():
    assert compat.format_allowance_query("A", "B") == {"allowance": {"owner": "A", "spender": "B"}}
    assert compat.format_allowance_query("A", "B", "key") == {
        "allowance": {"owner": "A", "spender": "B", "key": "key"}
    }


def test_nft_wrappers():
    assert compat.format_nft_ownership_query("secret1abc") == {
        "tokens": {"owner": "secret1abc", "limit": 30}
    }
    assert compat.format_nft_ownership_query("secret1abc", "key", limit=5) == {
        "tokens": {"owner": "secret1abc", "viewer": "secret1abc", "viewing_key": "key", "limit": 5}
    }
    assert compat.format_all_tokens_query("7", limit=2) == {"all_tokens": {"limit": 2, "start_after": "7"}}
    assert compat.format_batch_query([{"num_tokens": {}}]) == {"batch": {"queries": [{"num_tokens": {}}]}}


def test_non_query_errors_skip_legacy_fallback(raw_permit, monkeypatch):
    def explode(_permit):
        raise RuntimeError("builder bug")

    monkeypatch.setattr(compat.QueryFactory, "token_balance_with_permit", explode)
    with pytest.raises(RuntimeError, match="builder bug"):
        compat.format_token_balance_query("secret1abc", None, raw_permit, allow_legacy_fallback=True)
    assert default_metrics.snapshot()["legacy_permit_fallbacks"] == 0
