"""Run a small forex order flow with stepharness.

Each step reads what it needs from the shared parameter bag and hands new
values to later steps through its outcome ``data``. Run it directly:

    python guides/forex_sequence_example.py

or drive the same registry from the CLI:

    stepharness run guides/forex_sequence_example.py:harness login quote place_order \
        -p pair=EUR/USD -p amount=1
"""

import asyncio
from decimal import Decimal

from stepharness import StepHarness, StepOutcome, compare_numeric
from stepharness.generators import get_generator

harness = StepHarness()
generator = get_generator(forex=True)


@harness.step("login", "Open trading session")
async def login(bag):
    return StepOutcome.ok("Session opened", data={"session_id": "demo-session"})


@harness.step("quote", "Fetch quote")
async def quote(bag):
    price = generator.generate_parameter("forex_price", {"pair": bag["pair"]})
    return StepOutcome.ok(f"{bag['pair']} at {price}", data={"price": price})


@harness.step("place_order", "Place market order")
async def place_order(bag):
    # Simulated slippage against the quoted price
    fill = bag["price"] + Decimal("0.00002")
    check = compare_numeric(bag["price"], fill, tolerance=bag.get("max_slippage", "0.00005"))
    if not check.is_match:
        return StepOutcome.failed(f"Slippage too high: {check.message}")
    return StepOutcome.ok(f"Filled {bag['amount']} at {fill}", data={"fill_price": fill})


async def main():
    bags = generator.generate_parameter_sets(
        {"pair": {"type": "currency_pair"}, "amount": {"type": "trade_amount"}},
        count=3,
    )
    for bag in bags:
        result = await harness.run_sequence(["login", "quote", "place_order"], bag)
        for outcome in result:
            print(f"{'SUCCESS' if outcome.success else 'FAILED'}: {outcome.message}")

    for record in await harness.execution_history():
        print(f"{record.step_id}: {record.duration_ms:.2f}ms")


if __name__ == "__main__":
    asyncio.run(main())
