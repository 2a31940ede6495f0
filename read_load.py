"""
read_load.py: resolve saved aliases through GET /{alias}

Usage:
  python read_load.py --base http://127.0.0.1:8000 --in aliases_created.jsonl --count 15000 --concurrency 200

A read counts as ok only when the service answers 302 with the url that
write_load.py recorded for that alias.
"""
import argparse
import asyncio
import json
import random
import sys
from typing import Dict

import httpx

from load_common import run_load


def load_aliases(path: str) -> Dict[str, str]:
    """alias -> url from a write_load.py JSONL file; unreadable lines are skipped."""
    aliases: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if obj.get("alias") and obj.get("url"):
                aliases[obj["alias"]] = obj["url"]
    return aliases


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--in", dest="aliases_file", default="aliases_created.jsonl")
    parser.add_argument("--count", type=int, default=15000)
    parser.add_argument("--concurrency", type=int, default=200)
    args = parser.parse_args(argv)

    aliases = load_aliases(args.aliases_file)
    if not aliases:
        print(f"No aliases found in {args.aliases_file}. Run write_load.py first.")
        return 1
    pool = list(aliases)

    async def resolve(client: httpx.AsyncClient, i: int) -> bool:
        alias = random.choice(pool)
        r = await client.get(f"{args.base}/{alias}", follow_redirects=False)
        return r.status_code == 302 and r.headers.get("location") == aliases[alias]

    report = await run_load("reads", args.count, args.concurrency, resolve)
    print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
