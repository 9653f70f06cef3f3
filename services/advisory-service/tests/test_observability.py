from finance_model import FinancialProfile
from shared.observability.privacy import hash_payload, mask_name, short_hash
from shared.observability.telemetry import bind_request_context, current_request_id, reset_request_context


def test_hash_is_stable_and_hides_content():
    story = "Saya punya hutang pinjol 5 juta"

    digest = hash_payload(story)

    assert digest == hash_payload(story)
    assert "pinjol" not in digest
    assert len(digest) == 64


def test_equal_profiles_hash_equally():
    assert hash_payload(FinancialProfile()) == hash_payload(FinancialProfile())
    assert hash_payload(None) == hash_payload(None)


def test_short_hash_is_prefix():
    assert short_hash({"a": 1}) == hash_payload({"a": 1})[:12]


def test_mask_name():
    assert mask_name("Budi Santoso") == "B*** S******"
    assert mask_name("  ") == ""
    assert mask_name(None) == ""


def test_request_context_binding():
    token = bind_request_context("req-42")
    try:
        assert current_request_id() == "req-42"
    finally:
        reset_request_context(token)

    assert current_request_id() is None
