"""Tests for marketplace request records."""

import pytest
from pydantic import ValidationError

from agora_gateway.gateway.schemas import (
    EscrowCreate,
    FunctionRegistration,
    FunctionSearch,
    FunctionUpdate,
    OrderCreate,
    Price,
    QoS,
)


class TestApiModel:
    """Wire naming and omission rules."""

    def test_body_uses_camel_case(self):
        escrow = EscrowCreate(function_id="ocr", provider_agent_id="p1", agreed_price_cents=250)

        assert escrow.to_body() == {
            "functionId": "ocr",
            "providerAgentId": "p1",
            "agreedPriceCents": 250,
        }

    def test_populates_from_wire_names(self):
        escrow = EscrowCreate(functionId="ocr", providerAgentId="p1")

        assert escrow.function_id == "ocr"
        assert escrow.provider_agent_id == "p1"

    def test_params_keep_none_for_query_filtering(self):
        params = FunctionSearch(q="ocr").to_params()

        assert params == {"q": "ocr", "minPrice": None, "maxPrice": None, "sort": None, "provider": None}

    def test_empty_qos_serialized_as_object(self):
        registration = FunctionRegistration(
            fid="ocr",
            name="OCR",
            description="Reads text",
            price=Price(unit="cents", amount=25),
            qos=QoS(),
        )

        body = registration.to_body()
        assert body["qos"] == {}
        assert body["price"] == {"unit": "cents", "amount": 25}
        assert "disputeTerms" not in body

    def test_qos_p95_wire_name(self):
        assert QoS(p95_ms=120, max_tokens=800).to_body() == {"p95Ms": 120, "maxTokens": 800}

    def test_order_side_validated(self):
        with pytest.raises(ValidationError):
            OrderCreate(side="HOLD", price_cents=100)

    def test_order_dry_run_on_wire(self):
        order = OrderCreate(side="BID", price_cents=100, dry_run=True)

        assert order.to_body() == {"side": "BID", "priceCents": 100, "dryRun": True}


class TestFunctionUpdate:
    """Partial update bodies."""

    def test_only_set_fields_sent(self):
        update = FunctionUpdate(is_active=False)

        assert update.to_body() == {"isActive": False}

    def test_nested_records_sent_when_set(self):
        update = FunctionUpdate(price=Price(amount=40))

        assert update.to_body() == {"price": {"amount": 40}}

    def test_empty_update(self):
        assert FunctionUpdate().to_body() == {}
