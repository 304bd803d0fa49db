"""Sample forex trading steps used by loader, CLI and integration tests."""

from decimal import Decimal

from stepharness import StepOutcome, StepRegistry
from stepharness.comparison import compare_numeric
from stepharness.generators import ForexParameterGenerator

registry = StepRegistry()
generator = ForexParameterGenerator(seed=1234)

not_a_registry = {"login": "nope"}


@registry.step("login", "Open trading session", tags=["session"])
async def login(bag):
    account = bag.get("account", "demo")
    return StepOutcome.ok("Session opened", data={"session_id": f"session-{account}"})


@registry.step("quote", "Fetch quote", tags=["market-data"])
async def quote(bag):
    if "session_id" not in bag:
        return StepOutcome.failed("No open session")
    pair = bag.get("pair", "EUR/USD")
    price = generator.generate_parameter("forex_price", {"pair": pair, "variance": "0.0005"})
    return StepOutcome.ok(f"Quoted {pair}", data={"price": price})


@registry.step("place_order", "Place market order", tags=["orders"])
async def place_order(bag):
    amount = Decimal(str(bag.get("amount", "1.00")))
    if amount <= 0:
        return StepOutcome.failed("Order rejected: amount must be positive")
    return StepOutcome.ok(
        "Order filled",
        data={"fill_price": bag["price"], "filled_amount": amount},
    )


@registry.step("verify_fill", "Verify fill price")
async def verify_fill(bag):
    check = compare_numeric(bag["price"], bag["fill_price"], tolerance=Decimal("0.0001"))
    if not check.is_match:
        return StepOutcome.failed(check.message, data={"differences": check.differences})
    return StepOutcome.ok(check.message)


@registry.step("audit", "Write audit entry")
def audit(bag):
    return StepOutcome.failed("Audit service unavailable", abort_on_failure=False)


@registry.step("crash", "Broken step")
async def crash(bag):
    raise RuntimeError("connection reset")
