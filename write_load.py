"""
write_load.py: save generated urls through POST /url

Usage:
  python write_load.py --base http://127.0.0.1:8000 --count 2000 --concurrency 100 --out aliases_created.jsonl

Every request asks for a generated alias, so the run also exercises the
collision-retry path under concurrent writers. Each saved alias is appended
to the JSONL file that read_load.py replays.
"""
import argparse
import asyncio
import json
import random

import httpx

from load_common import run_load

HOSTS = ["example.com", "sample.net", "demo.org", "test.io", "alpha.ai"]


def target_url(i: int, rng: random.Random) -> str:
    return f"https://{rng.choice(HOSTS)}/r/{rng.getrandbits(40):x}?n={i}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--out", default="aliases_created.jsonl")
    parser.add_argument("--seed", type=int, default=None)
    return parser


async def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    rng = random.Random(args.seed)

    with open(args.out, "w", encoding="utf-8") as out:

        async def save(client: httpx.AsyncClient, i: int) -> bool:
            url = target_url(i, rng)
            r = await client.post(f"{args.base}/url", json={"url": url})
            body = r.json()
            if r.status_code != 200 or body.get("status") != "OK":
                return False
            out.write(json.dumps({"alias": body["alias"], "url": url}) + "\n")
            return True

        report = await run_load("writes", args.count, args.concurrency, save)

    print(report.summary())


if __name__ == "__main__":
    asyncio.run(main())
