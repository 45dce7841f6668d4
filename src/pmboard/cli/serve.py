"""Handlers for 'pmboard serve' and 'pmboard export'."""

import logging
import sys
from pathlib import Path

from pmboard.cli._common import error, make_service, output_result
from pmboard.errors import PmboardError
from pmboard.export import export_snapshots
from pmboard.server import run_server


def serve(args) -> int:
    """Run the development ticket endpoints until interrupted."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
        level=logging.INFO,
    )
    service = make_service(args.root)
    print(f"serving tickets under {service.root} at http://{args.host}:{args.port}")
    run_server(service, host=args.host, port=args.port)
    return 0


def export(args) -> int:
    """Write ticket snapshots for every board page under the root."""
    root = Path(args.root).resolve()
    try:
        written = export_snapshots(root, Path(args.out))
    except PmboardError as e:
        error(str(e), args.json)
    names = [str(p) for p in written]
    text = "\n".join(f"wrote {n}" for n in names) if names else "no board pages found"
    output_result(names, text, args.json)
    return 0
