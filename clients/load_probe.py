"""Fire requests at /api/pod-guid and show which pods answered.

    python -m clients.load_probe --url http://localhost:8000 -n 200 -c 10
"""
import argparse
import asyncio
from collections import Counter

import httpx


async def probe(url: str, total: int, concurrency: int, transport=None) -> Counter:
    hits: Counter = Counter()
    sem = asyncio.Semaphore(concurrency)

    async with httpx.AsyncClient(base_url=url, timeout=5.0, transport=transport) as client:
        async def one():
            async with sem:
                try:
                    resp = await client.get("/api/pod-guid")
                    resp.raise_for_status()
                    data = resp.json()
                    hits[(data["podName"], data["podGuid"])] += 1
                except httpx.HTTPError:
                    hits[("error", "-")] += 1

        await asyncio.gather(*(one() for _ in range(total)))
    return hits


def render(hits: Counter) -> str:
    total = sum(hits.values())
    if total == 0:
        return "no responses"
    lines = ["=== Pod distribution ==="]
    for (pod, guid), count in hits.most_common():
        percent = count / total * 100
        bar = "█" * int(percent / 2)
        lines.append(f"{pod:<24} {guid[:8]:<8} | {count:4d} reqs ({percent:5.1f}%) | {bar}")
    return "\n".join(lines)


def main():
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--url", default="http://localhost:8000")
    ap.add_argument("-n", "--requests", type=int, default=100)
    ap.add_argument("-c", "--concurrency", type=int, default=10)
    args = ap.parse_args()
    hits = asyncio.run(probe(args.url, args.requests, args.concurrency))
    print(render(hits))


if __name__ == "__main__":
    main()
