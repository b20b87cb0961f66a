"""
read_load.py: simple async load script to hit redirects

Usage:
  python read_load.py --base http://127.0.0.1:8000 --in links_created.jsonl --count 15000 --concurrency 200

Redirects are not followed; a 302 counts as success. With --verify the script
fetches GET /links afterwards and compares the summed totalClicks with the
number of successful redirects (clicks are recorded in the background, so
give the server a moment with --settle).
"""
import argparse
import asyncio
import json
import random
import time
from datetime import datetime, timezone

import httpx


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _load_codes(path):
    codes = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                code = json.loads(line).get("code")
            except json.JSONDecodeError:
                continue
            if code:
                codes.append(code)
    return codes


async def _hit_one(client: httpx.AsyncClient, base: str, code: str):
    try:
        r = await client.get(f"{base}/{code}", follow_redirects=False, timeout=10)
    except httpx.HTTPError:
        return False
    return r.status_code == 302


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--in", dest="codes_file", default="links_created.jsonl")
    parser.add_argument("--count", type=int, default=15000)
    parser.add_argument("--concurrency", type=int, default=200)
    parser.add_argument("--verify", action="store_true", help="compare click totals afterwards")
    parser.add_argument("--settle", type=float, default=1.0, help="seconds to wait before --verify")
    args = parser.parse_args()

    codes = _load_codes(args.codes_file)
    if not codes:
        print(f"No codes found in {args.codes_file}. Run write_load.py first.")
        return

    start_iso = _now_iso()
    t0 = time.perf_counter()
    success = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limit) as client:
        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            nonlocal success
            async with sem:
                if await _hit_one(client, args.base, random.choice(codes)):
                    success += 1

        await asyncio.gather(*(_task(i) for i in range(args.count)))

        dt = time.perf_counter() - t0
        print(f"START: {start_iso}")
        print(f"END:   {_now_iso()}")
        print(f"TOTAL: {dt:.3f} s")
        print(f"OPS:   reads={args.count}, ok={success}, fail={args.count - success}")
        if dt > 0:
            print(f"RPS:   {success/dt:.1f} req/s")

        if args.verify:
            await asyncio.sleep(args.settle)
            r = await client.get(f"{args.base}/links", timeout=30)
            r.raise_for_status()
            wanted = set(codes)
            clicks = sum(link["totalClicks"] for link in r.json() if link["code"] in wanted)
            print(f"CLICKS: recorded={clicks}, redirects={success}")


if __name__ == "__main__":
    asyncio.run(main())
