"""
write_load.py: simple async load script to create short links

Usage:
  python write_load.py --base http://127.0.0.1:8000 --count 2000 --concurrency 100 --out links_created.jsonl
  python write_load.py --custom   # also send a random custom code with every request

Every created code is written to --out (one JSON object per line) for read_load.py.
Status codes are tallied so 409s (custom-code clashes) and 500s (allocation
exhaustion / storage errors) show up separately.
"""
import argparse
import asyncio
import json
import random
import string
import time
from collections import Counter
from datetime import datetime, timezone

import httpx

_ALNUM = string.ascii_letters + string.digits


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _rand_host():
    tlds = ["com", "net", "org", "io", "ai"]
    names = ["example", "sample", "demo", "test", "alpha", "beta", "gamma"]
    return f"{random.choice(names)}.{random.choice(tlds)}"


def _rand_token(n):
    return "".join(random.choice(_ALNUM) for _ in range(n))


async def _create_one(client: httpx.AsyncClient, base: str, out_file, idx: int, custom: bool):
    url = f"https://{_rand_host()}/{_rand_token(8)}?q={idx}"
    payload = {"url": url}
    if custom:
        payload["code"] = _rand_token(random.randint(6, 8))
    try:
        r = await client.post(f"{base}/links", json=payload, timeout=10)
    except httpx.HTTPError:
        return "error"
    if r.status_code == 201:
        code = r.json().get("code")
        if code and out_file:
            out_file.write(json.dumps({"code": code, "url": url}) + "\n")
    return r.status_code


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--out", default="links_created.jsonl")
    parser.add_argument("--custom", action="store_true", help="send random custom codes")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    statuses = Counter()

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    with open(args.out, "w", encoding="utf-8") as out_f:
        async with httpx.AsyncClient(limits=limit) as client:
            sem = asyncio.Semaphore(args.concurrency)

            async def _task(i):
                async with sem:
                    statuses[await _create_one(client, args.base, out_f, i, args.custom)] += 1

            await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    created = statuses[201]
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   writes={args.count}, created={created}, other={args.count - created}")
    print(f"CODES: {dict(statuses)}")
    if dt > 0:
        print(f"TPS:   {created/dt:.1f} req/s")


if __name__ == "__main__":
    asyncio.run(main())
