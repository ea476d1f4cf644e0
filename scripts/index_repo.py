"""Index a directory and run a few queries against it.

Uses the in-process local store by default so no Qdrant server is needed;
pass ``--qdrant`` to use the configured Qdrant endpoint instead.  Set
``OPENAI_API_KEY`` for real embeddings; without it the deterministic
fallback is used and only near-identical text will match.

Usage:
    uv run python scripts/index_repo.py [ROOT] [-q QUERY ...] [--qdrant]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from chatfs import ChatFS, ChatFSConfig

REPO_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = REPO_ROOT / ".chatfs"


def main() -> None:
    parser = argparse.ArgumentParser(description="Index a directory and search it")
    parser.add_argument("root", nargs="?", default=str(REPO_ROOT), help="directory to index")
    parser.add_argument("-q", "--query", action="append", default=[], help="query to run")
    parser.add_argument("-k", "--top-k", type=int, default=5, help="results per query")
    parser.add_argument("--qdrant", action="store_true", help="use the Qdrant backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every file")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, str] = {}
    if not args.qdrant:
        overrides = {"store_backend": "local", "data_dir": str(DATA_DIR)}
    config = ChatFSConfig.from_env(**overrides)

    print(f"Root:        {args.root}")
    print(f"Store:       {config.store_backend} ({config.collection_name})")
    print(f"Embeddings:  {'openai' if config.openai_api_key else 'fallback'}")
    print()

    with ChatFS(config) as fs:
        result = fs.index_directory(args.root)
        print(result.message)
        if not result.success:
            raise SystemExit(1)

        info = fs.info()
        print(f"Collection now holds {info.point_count} points\n")

        for query in args.query:
            print("=" * 60)
            print(f"QUERY: {query}")
            print("=" * 60)
            response = fs.search(query, args.top_k)
            if not response.success:
                print(f"  error: {response.message}")
                continue
            if not response.results:
                print("  (no matches above threshold)")
            for hit in response.results:
                print(f"  {hit.score:.3f}  {hit.path}")
                print(f"         {hit.snippet!r}")
            print()


if __name__ == "__main__":
    main()
