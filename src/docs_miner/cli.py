from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .classify import RejectionPolicy
from .crawl import DEFAULT_ROOT_URL, DEFAULT_TITLE, CrawlConfig, mine
from .errors import FetchUnavailable, ParseFailure
from .manifest import CrawlManifest, utc_iso
from .render import write_markdown


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docs-miner",
        description=(
            "Crawl a documentation site and print the pages leading to "
            "sample code as a Markdown outline"
        ),
    )
    p.add_argument("--root-url", default=DEFAULT_ROOT_URL)
    p.add_argument("--title", default=DEFAULT_TITLE, help="Site display name")
    p.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Page cache root (default: the system temp directory)",
    )
    p.add_argument("--workers", type=int, default=8)
    p.add_argument("--timeout", type=float, default=45, help="Per-fetch seconds")
    p.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Overall crawl budget in seconds",
    )
    p.add_argument("--retries", type=int, default=0)
    p.add_argument(
        "--rejection-policy",
        choices=[policy.value for policy in RejectionPolicy],
        default=RejectionPolicy.DROP_SUBTREE.value,
    )
    p.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Directory for manifest.jsonl/manifest.json crawl logs",
    )
    p.add_argument("--out", default="-", help="Output path, or '-' for stdout")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    cfg = CrawlConfig(
        root_url=args.root_url,
        title=args.title,
        cache_dir=args.cache_dir,
        workers=int(args.workers),
        timeout_s=float(args.timeout),
        deadline_s=args.deadline,
        max_retries=int(args.retries),
        rejection_policy=RejectionPolicy(args.rejection_policy),
        progress=bool(args.verbose),
    )
    manifest = CrawlManifest(args.manifest) if args.manifest is not None else None

    started_at = utc_iso()
    try:
        tree, crawler = mine(cfg, manifest=manifest)
    except (FetchUnavailable, ParseFailure, OSError) as e:
        # No output at all, but still a normal exit.
        print(f"docs-miner: cannot load root {cfg.root_url}: {e}", file=sys.stderr)
        return 0

    if args.out == "-":
        write_markdown(tree, sys.stdout)
    else:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8", newline="\n") as f:
            write_markdown(tree, f)

    stats = crawler.stats
    if manifest is not None:
        manifest.write_summary(
            root_url=cfg.root_url,
            started_at=started_at,
            visited_urls=len(crawler.guard),
            stats=stats,
        )
    if args.verbose:
        parts = " ".join(f"{k}={v}" for k, v in sorted(stats.items()))
        print(f"docs-miner: visited={len(crawler.guard)} {parts}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
