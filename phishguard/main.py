"""Command-line entry point for PhishGuard."""

import argparse
import asyncio
import json
import logging
import signal
import sys

from .config import Config, load_config, validate_config
from .pipeline.analysis import AnalysisEngine
from .pipeline.results import AnalysisResult
from .server import AnalysisServer

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def format_result(result: AnalysisResult) -> str:
    """Render a result for terminal output."""
    data = result.to_dict()
    lines = [
        f"URL: {data['submittedUrl']}",
        f"Classification: {data['classification'].upper()}",
    ]
    if data["confidence"] is not None:
        lines.append(f"Confidence: {data['confidence']:.0%}")
        lines.append(f"Threat type: {data['threatType']}")
    if data["flags"]:
        lines.append("Flags:")
        lines.extend(f"  - {flag}" for flag in data["flags"])
    if data["error"]:
        lines.append(f"Error: {data['error']}")
    lines.extend(["", data["explanation"]])
    return "\n".join(lines)


async def run_analyze(config: Config, url: str, as_json: bool) -> int:
    engine = AnalysisEngine.from_config(config)
    try:
        result = await engine.analyze(url)
    finally:
        await engine.close()

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(result))
    return 0 if result.classified else 1


async def run_server(config: Config) -> int:
    server = AnalysisServer(
        AnalysisEngine.from_config(config),
        host=config.server_host,
        port=config.server_port,
    )
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:  # pragma: no cover - Windows
            pass

    await server.start()
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down")
        await server.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phishguard",
        description="Classify URLs as safe or phishing and explain the verdict.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a single URL")
    analyze.add_argument("url")
    analyze.add_argument("--json", action="store_true", help="Print the raw result payload")
    analyze.add_argument("--seed", type=int, default=None, help="Seed for the fallback draw")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = load_config()
    if args.command == "analyze" and args.seed is not None:
        config.fallback_seed = args.seed
    if args.command == "serve":
        if args.host:
            config.server_host = args.host
        if args.port:
            config.server_port = args.port

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error("Configuration error: %s", error)
        return 2

    if args.command == "analyze":
        return asyncio.run(run_analyze(config, args.url, args.json))
    return asyncio.run(run_server(config))


if __name__ == "__main__":
    sys.exit(main())
