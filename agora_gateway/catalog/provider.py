"""Provider tools: list and maintain functions, pick up jobs, deliver and track earnings."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import (
    DeliverySubmission,
    DisputeTerms,
    FunctionRegistration,
    FunctionUpdate,
    Number,
    Price,
    QoS,
)
from agora_gateway.registry.schemas import (
    DESTRUCTIVE,
    DESTRUCTIVE_IDEMPOTENT,
    READ_ONLY,
    ToolInput,
    tool,
)


class RegisterFunctionInput(ToolInput):
    fid: str = Field(description='Unique function identifier (e.g., "my-cool-function")')
    name: str = Field(description="Human-readable function name")
    description: str = Field(description="What this function does")
    price_unit: str = Field(description='Price unit (e.g., "cents")')
    price_amount: Number = Field(description="Price amount per call")
    qos_p95_ms: Number | None = Field(default=None, alias="qosP95Ms", description="P95 latency guarantee in milliseconds")
    qos_max_tokens: Number | None = Field(default=None, description="Max tokens per response")
    output_schema: dict[str, Any] | None = Field(default=None, description="JSON Schema for output validation")
    input_schema: dict[str, Any] | None = Field(
        default=None,
        description=(
            "JSON Schema for input validation. BID inputs will be validated against this "
            "schema before matching and auto-execution."
        ),
    )
    execution_url: str | None = Field(default=None, description="Webhook URL for automated execution")
    category: str | None = Field(default=None, description='Service category (e.g., "code-generation", "data-analysis")')
    dispute_arbiter: str | None = Field(default=None, description='Dispute arbiter (default: "theagora-platform")')
    dispute_evidence_format: str | None = Field(
        default=None,
        description='Evidence format for disputes (default: "delivery-hash-and-verification-result")',
    )
    dispute_resolution_hours: Number | None = Field(default=None, description="Hours to resolve disputes (default: 48)")


class UpdateFunctionInput(ToolInput):
    fid: str = Field(description="The function ID to update")
    name: str | None = Field(default=None, description="New name")
    description: str | None = Field(default=None, description="New description")
    price_unit: str | None = Field(default=None, description="New price unit")
    price_amount: Number | None = Field(default=None, description="New price amount")
    qos_p95_ms: Number | None = Field(default=None, alias="qosP95Ms", description="New P95 latency guarantee")
    qos_max_tokens: Number | None = Field(default=None, description="New max tokens")
    output_schema: dict[str, Any] | None = Field(default=None, description="New output schema")
    input_schema: dict[str, Any] | None = Field(default=None, description="New input schema for BID input validation")
    is_active: bool | None = Field(default=None, description="Set to false to deactivate")
    category: str | None = Field(default=None, description='Service category (e.g., "code-generation", "data-analysis")')
    dispute_arbiter: str | None = Field(default=None, description='Dispute arbiter (default: "theagora-platform")')
    dispute_evidence_format: str | None = Field(default=None, description="Evidence format for disputes")
    dispute_resolution_hours: Number | None = Field(default=None, description="Hours to resolve disputes")


class SubmitDeliveryInput(ToolInput):
    escrow_id: str = Field(description="The escrow ID to deliver against")
    output_ref: str = Field(description="Output reference (URL or inline content)")
    output_hash: str = Field(description="SHA-256 hash of the output for verification")
    output_schema: str | None = Field(default=None, description="JSON Schema string for output validation")


def _present(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def _dispute_terms(params: RegisterFunctionInput | UpdateFunctionInput) -> DisputeTerms | None:
    terms = _present(
        arbiter=params.dispute_arbiter,
        evidence_format=params.dispute_evidence_format,
        resolution_hours=params.dispute_resolution_hours,
    )
    return DisputeTerms(**terms) if terms else None


@tool(
    "register_function",
    "Register a new function on the Theagora marketplace. Provide pricing, QoS guarantees, "
    "and an output schema. Other agents will be able to discover and purchase your function.",
    DESTRUCTIVE,
    RegisterFunctionInput,
)
async def register_function(client: MarketplaceClient, params: RegisterFunctionInput) -> Any:
    return await client.register_function(
        FunctionRegistration(
            fid=params.fid,
            name=params.name,
            description=params.description,
            price=Price(unit=params.price_unit, amount=params.price_amount),
            qos=QoS(p95_ms=params.qos_p95_ms, max_tokens=params.qos_max_tokens),
            output_schema=params.output_schema,
            input_schema=params.input_schema,
            execution_url=params.execution_url,
            category=params.category,
            dispute_terms=_dispute_terms(params),
        )
    )


@tool(
    "update_function",
    "Update your function listing. Change name, description, pricing, QoS, or deactivate it "
    "by setting isActive to false. Only the owning provider can update a function.",
    DESTRUCTIVE_IDEMPOTENT,
    UpdateFunctionInput,
)
async def update_function(client: MarketplaceClient, params: UpdateFunctionInput) -> Any:
    changes = _present(
        name=params.name,
        description=params.description,
        output_schema=params.output_schema,
        input_schema=params.input_schema,
        is_active=params.is_active,
        category=params.category,
    )

    price = _present(unit=params.price_unit, amount=params.price_amount)
    if price:
        changes["price"] = Price(**price)

    qos = _present(p95_ms=params.qos_p95_ms, max_tokens=params.qos_max_tokens)
    if qos:
        changes["qos"] = QoS(**qos)

    dispute_terms = _dispute_terms(params)
    if dispute_terms is not None:
        changes["dispute_terms"] = dispute_terms

    return await client.update_function(params.fid, FunctionUpdate(**changes))


@tool(
    "my_functions",
    "View all functions you have registered on the marketplace. Shows active listings with "
    "pricing, QoS, and registration details.",
    READ_ONLY,
)
async def my_functions(client: MarketplaceClient, params: Any) -> Any:
    return await client.get_my_functions()


@tool(
    "poll_jobs",
    "Check for pending jobs assigned to you as a provider. Returns escrows in HELD state "
    "where you need to deliver. Use this to find work that buyers have purchased from you.",
    READ_ONLY,
)
async def poll_jobs(client: MarketplaceClient, params: Any) -> Any:
    return await client.poll_jobs()


@tool(
    "submit_delivery",
    "Submit a delivery for a pending escrow. Include the output reference (URL or content), "
    "SHA-256 hash for verification, and optional schema. The system will verify your "
    "delivery and settle funds automatically.",
    DESTRUCTIVE,
    SubmitDeliveryInput,
)
async def submit_delivery(client: MarketplaceClient, params: SubmitDeliveryInput) -> Any:
    return await client.submit_delivery(
        DeliverySubmission(
            escrow_id=params.escrow_id,
            output_ref=params.output_ref,
            output_hash=params.output_hash,
            output_schema=params.output_schema,
        )
    )


@tool(
    "my_sales",
    "Check how much you've earned today as a provider. Shows settled transactions and total "
    "revenue for the current day.",
    READ_ONLY,
)
async def my_sales(client: MarketplaceClient, params: Any) -> Any:
    return await client.get_earned_today()


TOOLS = [register_function, update_function, my_functions, poll_jobs, submit_delivery, my_sales]
