"""
seed_products.py: async script that fills a running catalog with products

Registers (or reuses) a seeding user, logs in for a bearer token, then creates
`--count` random products through POST /products.

Usage:
  python seed_products.py --base http://127.0.0.1:3000 --count 500 --concurrency 50 --out products_created.jsonl
"""
import argparse
import asyncio
import json
import random
import time
from datetime import datetime, timezone

import httpx

ADJECTIVES = ["Compact", "Deluxe", "Eco", "Classic", "Smart", "Rugged", "Mini"]
NOUNS = ["Widget", "Gadget", "Lamp", "Kettle", "Backpack", "Speaker", "Mug"]


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def random_product(idx: int) -> dict:
    return {
        "name": f"{random.choice(ADJECTIVES)} {random.choice(NOUNS)} {idx}",
        "price": round(random.uniform(0.5, 500), 2),
        "quantity": random.randint(0, 250),
    }


async def obtain_token(client: httpx.AsyncClient, base: str, username: str, password: str) -> str:
    """Register the seeding user (400 means it already exists) and log in."""
    creds = {"username": username, "password": password}
    r = await client.post(f"{base}/auth/register", json=creds, timeout=10)
    if r.status_code not in (201, 400):
        r.raise_for_status()
    r = await client.post(f"{base}/auth/login", json=creds, timeout=10)
    r.raise_for_status()
    return r.json()["token"]


async def _create_one(client: httpx.AsyncClient, base: str, headers: dict, out_file, idx: int) -> bool:
    payload = random_product(idx)
    try:
        r = await client.post(f"{base}/products", json=payload, headers=headers, timeout=10)
        r.raise_for_status()
    except httpx.HTTPError as exc:
        print(f"create #{idx} failed: {exc}")
        return False
    if out_file:
        out_file.write(json.dumps(r.json()) + "\n")
    return True


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:3000")
    parser.add_argument("--count", type=int, default=500)
    parser.add_argument("--concurrency", type=int, default=50)
    parser.add_argument("--username", default="seeder")
    parser.add_argument("--password", default="seeder-password")
    parser.add_argument("--out", default="products_created.jsonl")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    success = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    with open(args.out, "w", encoding="utf-8") as out_f:
        async with httpx.AsyncClient(limits=limit) as client:
            token = await obtain_token(client, args.base, args.username, args.password)
            headers = {"Authorization": f"Bearer {token}"}
            sem = asyncio.Semaphore(args.concurrency)

            async def _task(i):
                nonlocal success
                async with sem:
                    if await _create_one(client, args.base, headers, out_f, i):
                        success += 1

            await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   creates={args.count}, ok={success}, fail={args.count - success}")
    if dt > 0:
        print(f"TPS:   {success/dt:.1f} req/s")


if __name__ == "__main__":
    asyncio.run(main())
