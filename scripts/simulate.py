"""
Checkout Simulation Script

Fires concurrent checkout sessions and payment intents at a running API
and verifies each one afterwards. Meant for development mode, where the
mock gateway completes payments on retrieval.

Run from project root: python scripts/simulate.py --orders 20

Author: Khalil_Bannouri
Version: 3.1.0
"""

import asyncio
import sys
import random
import time
import argparse
import uuid
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:5000"
TOTAL_ORDERS = 20

# Sample data for random orders
FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Jones", "Taylor", "Brown", "Williams", "Wilson", "Evans", "Thomas"]
RESTAURANTS = [
    {"id": "r1", "name": "Camden Diner"},
    {"id": "r2", "name": "Shoreditch Grill"},
]
MENU_ITEMS = [
    {"id": 1, "name": "Classic Burger", "price": 8.50},
    {"id": 2, "name": "Chicken Wrap", "price": 7.25},
    {"id": 3, "name": "Halloumi Fries", "price": 4.95},
    {"id": 4, "name": "Caesar Salad", "price": 6.99},
    {"id": 5, "name": "Milkshake", "price": 3.99},
    {"id": 6, "name": "Sparkling Water", "price": 1.80},
]
DELIVERY_FEE = 2.99


def generate_random_order() -> dict[str, Any]:
    """Generate a random order payload."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)

    items = []
    for menu_item in random.sample(MENU_ITEMS, random.randint(1, 4)):
        items.append({**menu_item, "quantity": random.randint(1, 3)})

    order_type = random.choice(["DELIVERY", "COLLECTION"])
    delivery_fee = DELIVERY_FEE if order_type == "DELIVERY" else 0
    tip = random.choice([0, 0, 1.00, 2.50])
    subtotal = sum(i["price"] * i["quantity"] for i in items)

    return {
        "items": items,
        "customer": {
            "name": f"{first} {last}",
            "email": f"{first.lower()}.{last.lower()}@example.com",
            "phone": f"07700 9{random.randint(10000, 99999)}",
        },
        "summary": {
            "orderType": order_type,
            "total": round(subtotal + delivery_fee + tip, 2),
            "deliveryFee": delivery_fee,
            "tip": tip,
            "location": random.choice(RESTAURANTS),
        },
        "orderId": f"sim_{uuid.uuid4().hex[:10]}",
    }


async def run_checkout(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """Create a checkout session, then verify it."""
    order = generate_random_order()
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/payments/checkout-session",
            json={"order": order},
            timeout=30.0,
        )
        if response.status_code != 200:
            return {
                "order_num": order_num,
                "success": False,
                "error": response.text[:100],
                "time": round(time.time() - start_time, 3),
                "mode": "checkout",
            }

        session_id = response.json()["sessionId"]
        verify = await client.get(
            f"{API_BASE_URL}/api/payments/checkout-session/{session_id}",
            timeout=30.0,
        )
        data = verify.json()

        return {
            "order_num": order_num,
            "success": verify.status_code == 200 and data.get("isComplete", False),
            "error": None if verify.status_code == 200 else verify.text[:100],
            "total": order["summary"]["total"],
            "time": round(time.time() - start_time, 3),
            "mode": "checkout",
        }

    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
            "mode": "checkout",
        }


async def run_payment_intent(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """Create a payment intent, then check its status."""
    order = generate_random_order()
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/payments/payment-intent",
            json=order,
            timeout=30.0,
        )
        if response.status_code != 200:
            return {
                "order_num": order_num,
                "success": False,
                "error": response.text[:100],
                "time": round(time.time() - start_time, 3),
                "mode": "intent",
            }

        intent_id = response.json()["paymentIntentId"]
        check = await client.get(
            f"{API_BASE_URL}/api/payments/payment-intent/{intent_id}",
            timeout=30.0,
        )
        data = check.json()

        return {
            "order_num": order_num,
            "success": check.status_code == 200 and data.get("isSuccess", False),
            "error": None if check.status_code == 200 else check.text[:100],
            "total": data.get("amount", 0),
            "time": round(time.time() - start_time, 3),
            "mode": "intent",
        }

    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
            "mode": "intent",
        }


async def run_simulation(mode: str = "both", num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the checkout simulation.

    Args:
        mode: "checkout", "intent", or "both"
        num_orders: Number of orders to simulate
    """
    print("=" * 70)
    print("💳 CHECKOUT SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"🔧 Mode: {mode}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        tasks = []
        for i in range(num_orders):
            if mode == "checkout" or (mode == "both" and i % 2 == 0):
                tasks.append(run_checkout(client, i + 1))
            else:
                tasks.append(run_payment_intent(client, i + 1))
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Paid: {len(successful)}/{num_orders}")
    print(f"❌ Failed: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r.get("total", 0) for r in successful)
        print(f"\n📈 Average Round Trip: {avg_time}s")
        print(f"   💰 Total Collected: £{total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']} [{f['mode']}]: {f.get('error') or 'not paid'}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    """Make sure the API is up before firing orders."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health", timeout=10.0)
        except httpx.HTTPError as e:
            print(f"❌ API unreachable: {e}")
            return False

    if response.status_code != 200:
        print(f"❌ Health check failed: {response.text}")
        return False

    data = response.json()
    print(f"✅ Status: {data.get('status')} ({data.get('payment_gateway')})")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Checkout Simulation Script")
    parser.add_argument("--checkout", action="store_true", help="Checkout sessions only")
    parser.add_argument("--intent", action="store_true", help="Payment intents only")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    args = parser.parse_args()

    if args.checkout:
        mode = "checkout"
    elif args.intent:
        mode = "intent"
    else:
        mode = "both"

    if not asyncio.run(check_health()):
        sys.exit(1)

    asyncio.run(run_simulation(mode=mode, num_orders=args.orders))
