#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json

import requests


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo orders on a running server and list what landed")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--api-key", required=True, help="Admin API key used to list the seeded orders")
    parser.add_argument("--status", default=None, help="Only list seeded orders with this status")
    args = parser.parse_args()

    seeded = requests.post(f"{args.base_url}/demo/seed", timeout=60)
    seeded.raise_for_status()
    result = seeded.json()
    print(
        json.dumps(
            {key: result.get(key) for key in ("scenario_id", "seeded_now", "created_order_ids")},
            ensure_ascii=False,
        )
    )

    headers = {"X-API-Key": args.api_key}
    if args.status:
        listing = requests.get(
            f"{args.base_url}/admin/orders/search",
            params={"status": args.status},
            headers=headers,
            timeout=30,
        )
    else:
        listing = requests.get(
            f"{args.base_url}/admin/orders",
            params={"page": 1, "limit": 100},
            headers=headers,
            timeout=30,
        )
    listing.raise_for_status()
    for order in listing.json()["orders"]:
        print(f"{order['order_id']}\t{order['status']}\t{order['payment_status']}\t{order['total_display']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
