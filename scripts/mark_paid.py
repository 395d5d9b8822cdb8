#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys

import requests


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Mark orders as paid and optionally move them to a new status"
    )
    parser.add_argument("order_ids", nargs="+")
    parser.add_argument("--status", default=None, help="Target order status, e.g. confirmed")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--api-key", required=True)
    args = parser.parse_args()

    failures = 0
    for order_id in args.order_ids:
        body = {"payment_status": "paid"}
        if args.status:
            body["status"] = args.status
        resp = requests.patch(
            f"{args.base_url}/admin/orders/{order_id}",
            json=body,
            headers={"X-API-Key": args.api_key},
            timeout=30,
        )
        data = resp.json()
        if resp.status_code != 200:
            failures += 1
            print(json.dumps({"order_id": order_id, "status_code": resp.status_code, **data}), file=sys.stderr)
            continue
        print(json.dumps({key: data[key] for key in ("order_id", "status", "payment_status", "writes")}))
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
