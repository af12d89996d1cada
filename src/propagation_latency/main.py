"""CLI entrypoint for the propagation latency collector."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from propagation_latency import __version__
from propagation_latency.config import get_settings
from propagation_latency.errors import LatencyCollectorError
from propagation_latency.experiment import print_result, run_experiment


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="propagation-latency",
        description="Measure workload propagation latency across WDS, ITS and WEC clusters.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("kubeconfig", type=Path, help="Path to kubeconfig holding all three contexts")
    parser.add_argument("wds_context", help="Workload-definition plane context")
    parser.add_argument("its_context", help="Inventory/transport plane context")
    parser.add_argument("wec_context", help="Workload-execution cluster context")
    parser.add_argument("num_namespaces", type=int, help="Number of perf-test namespaces")
    parser.add_argument("output_dir", type=Path, help="Directory for record files and reports")
    parser.add_argument(
        "exp_type",
        nargs="?",
        default="s",
        choices=["s", "l"],
        help="Experiment type: s (short) or l (long-running, not implemented)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for propagation-latency CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    try:
        settings = get_settings(
            kubeconfig=args.kubeconfig,
            wds_context=args.wds_context,
            its_context=args.its_context,
            wec_context=args.wec_context,
            num_namespaces=args.num_namespaces,
            output_dir=args.output_dir,
            exp_type=args.exp_type,
        )
        result = run_experiment(settings)
        print_result(result, Console())
        return 0
    except LatencyCollectorError as e:
        logging.getLogger("propagation_latency").error("Collection failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logging.exception("Collector failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
