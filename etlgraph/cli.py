"""Command-line interface for etlgraph."""

import argparse
import json
import os
import sys
from pathlib import Path

from etlgraph.config import Settings
from etlgraph.services import Services


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="etlgraph", add_help=True)
    p.add_argument("--data-dir", default=None, help="Data directory (default: $ETLGRAPH_DATA_DIR or ./etlgraph_data)")
    p.add_argument("--log-level", default=None, help="Log level (default: $ETLGRAPH_LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Execute a saved graph file and print node outputs (JSON)")
    run.add_argument("graph", help="Path to a graph JSON file")
    run.add_argument("--node", default=None, help="Execute only this node id")

    sub.add_parser("plugins", help="List plugin definitions")

    serve = sub.add_parser("serve", help="Run the HTTP/WebSocket service (FastAPI)")
    serve.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload (dev)")
    return p


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    updates = {}
    if args.data_dir:
        updates["data_dir"] = Path(args.data_dir)
    if args.log_level:
        updates["log_level"] = args.log_level
    return settings.model_copy(update=updates)


def _run(args: argparse.Namespace, services: Services) -> int:
    path = Path(args.graph)
    if not path.exists():
        print(f"Graph file not found: {path}", file=sys.stderr)
        return 2
    try:
        graph = services.graphs.load_from_file(path)
    except (OSError, ValueError) as exc:
        print(f"Cannot read graph file {path}: {exc}", file=sys.stderr)
        return 2
    if args.node:
        outputs = graph.execute_node(args.node)
        print(json.dumps({args.node: outputs}, indent=2))
        return 1 if "error" in outputs else 0

    report = graph.execute_all()
    results = {node_id: node.outputs or {} for node_id, node in graph.nodes.items()}
    print(json.dumps({"results": results, "report": report.model_dump()}, indent=2))
    return 0 if report.completed else 1


def _plugins(services: Services) -> int:
    for plugin in services.plugins.list_definitions():
        ins = ", ".join(p.name + ("*" if p.required else "") for p in plugin.input_pins)
        outs = ", ".join(p.name for p in plugin.output_pins)
        print(f"{plugin.id}  {plugin.name} [{plugin.category}]  ({ins}) -> ({outs})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    settings = _settings(args)
    if args.command == "serve":
        from etlgraph.app import main as serve

        os.environ["ETLGRAPH_DATA_DIR"] = str(settings.data_dir)
        os.environ["ETLGRAPH_LOG_LEVEL"] = settings.log_level
        serve(host=args.host, port=args.port, reload=args.reload)
        return 0

    services = Services(settings)
    try:
        if args.command == "run":
            return _run(args, services)
        return _plugins(services)
    finally:
        services.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
