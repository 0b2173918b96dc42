from __future__ import annotations

import argparse
import json
import logging
import sys

from .analysis.errors import AnalysisError, ExternalCallError, ResponseFormatError
from .llm.registry import list_clients
from .pipeline import run_pipeline


def main():
    p = argparse.ArgumentParser(prog="carbon-lens")
    p.add_argument("--list-backends", action="store_true", help="List available LLM backends")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    sub = p.add_subparsers(dest="cmd", required=False)

    analyze = sub.add_parser("analyze", help="Detect objects in a photo and estimate their footprint")
    analyze.add_argument("--image", required=True, help="Path to input image")
    analyze.add_argument("--out", default=None, help="Output directory for artifacts")
    analyze.add_argument("--llm", default="mock", help="LLM backend")
    analyze.add_argument("--max-side", type=int, default=1024)

    args = p.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_backends:
        print("Available backends:")
        for name in list_clients():
            print(f"  - {name}")
        return

    if not args.cmd:
        p.print_help()
        sys.exit(0)

    if args.cmd == "analyze":
        if args.llm not in list_clients():
            print(f"Error: Backend '{args.llm}' not found.")
            print(f"Available backends: {', '.join(list_clients())}")
            return

        try:
            summary = run_pipeline(
                image_path=args.image,
                out_dir=args.out,
                llm_backend=args.llm,
                max_side=args.max_side,
            )
        except ResponseFormatError as e:
            print(
                f"Error: the AI response could not be understood ({e}). Please try again.",
                file=sys.stderr,
            )
            sys.exit(1)
        except ExternalCallError as e:
            print(f"Error: the AI service call failed ({e}).", file=sys.stderr)
            sys.exit(1)
        except (AnalysisError, FileNotFoundError, RuntimeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
