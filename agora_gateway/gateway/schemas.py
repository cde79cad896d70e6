"""Request descriptors and typed request records for the marketplace API."""

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
QueryValue = str | int | float | bool | None
Number = int | float
Window = Literal["24h", "7d", "30d"]
OrderSide = Literal["BID", "ASK"]
OrderStatus = Literal["OPEN", "FILLED", "CANCELLED", "EXPIRED"]
FunctionSort = Literal["price_asc", "price_desc", "newest", "name"]


@dataclass(frozen=True)
class RequestDescriptor:
    """A single call against the marketplace API.

    Attributes:
        path: API path below the version prefix, e.g. ``/escrows/abc``.
        method: HTTP method.
        body: JSON-serializable request body, if any.
        params: Flat query parameters. ``None`` and ``""`` values are dropped.
        timeout: Per-request timeout override in seconds.
    """

    path: str
    method: HttpMethod = "GET"
    body: Any | None = None
    params: Mapping[str, QueryValue] | None = None
    timeout: float | None = None


class ApiModel(BaseModel):
    """Base for request records: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# Identity

class IdentityLink(ApiModel):
    chain_id: Number
    token_id: str
    registry_address: str
    signature: str
    signer_address: str


# Discovery

class FunctionSearch(ApiModel):
    q: str | None = None
    min_price: Number | None = None
    max_price: Number | None = None
    sort: FunctionSort | None = None
    provider: str | None = None


class TrendingQuery(ApiModel):
    period: Window | None = None
    limit: Number | None = None


class ReputationQuery(ApiModel):
    function_id: str | None = None
    date_from: str | None = None
    date_to: str | None = None


# Buying

class EscrowCreate(ApiModel):
    function_id: str
    provider_agent_id: str
    agreed_price_cents: Number | None = None
    input: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    wait_for_execution: bool | None = None


# Selling

class Price(ApiModel):
    unit: str | None = None
    amount: Number | None = None


class QoS(ApiModel):
    p95_ms: Number | None = Field(default=None, alias="p95Ms")
    max_tokens: Number | None = None


class DisputeTerms(ApiModel):
    arbiter: str | None = None
    evidence_format: str | None = None
    resolution_hours: Number | None = None


class FunctionRegistration(ApiModel):
    fid: str
    name: str
    description: str
    price: Price
    qos: QoS | None = None
    output_schema: dict[str, Any] | None = None
    input_schema: dict[str, Any] | None = None
    execution_url: str | None = None
    category: str | None = None
    dispute_terms: DisputeTerms | None = None


class FunctionUpdate(ApiModel):
    """Partial update; only explicitly set fields are sent."""

    name: str | None = None
    description: str | None = None
    price: Price | None = None
    qos: QoS | None = None
    output_schema: dict[str, Any] | None = None
    input_schema: dict[str, Any] | None = None
    is_active: bool | None = None
    category: str | None = None
    dispute_terms: DisputeTerms | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class DeliverySubmission(ApiModel):
    escrow_id: str
    output_ref: str
    output_hash: str
    output_schema: str | None = None


# Social

class InviteCreate(ApiModel):
    provider_email: str
    function_id: str
    agreed_price_cents: Number
    metadata: dict[str, Any] | None = None


# Market data and analytics

class WindowQuery(ApiModel):
    window: Window | None = None


class ProviderAnalyticsQuery(ApiModel):
    window: Window | None = None
    function_id: str | None = None


# Exchange

class OrderCreate(ApiModel):
    side: OrderSide
    function_id: str | None = None
    category: str | None = None
    description: str | None = None
    price_cents: Number
    min_reputation: float | None = None
    max_latency_ms: Number | None = None
    expires_at: str | None = None
    metadata: dict[str, Any] | None = None
    input: dict[str, Any] | None = None
    dry_run: bool | None = None


class OrderQuery(ApiModel):
    side: OrderSide | None = None
    status: OrderStatus | None = None
    limit: Number | None = None
    offset: int | None = None


class OrderBookQuery(ApiModel):
    function_id: str | None = None
    category: str | None = None


# Trust

class DisputeCreate(ApiModel):
    escrow_id: str
    reason: str
