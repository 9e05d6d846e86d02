from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import signal
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from embench.config import DEFAULT_CORPUS_URL, BenchmarkConfig, Mode
from embench.corpus import fetch_corpus
from embench.errors import ConfigurationError, CorpusFetchError
from embench.loadgen.body import embedding_spec
from embench.loadgen.runner import LoadEngine
from embench.metrics import BenchmarkResult, ProgressSnapshot, format_csv_row, format_text
from embench.storage import ResultLog, default_result_log

logger = logging.getLogger("embench")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Embeddings endpoint benchmark")
    parser.add_argument("-c", "--concurrency", type=int, required=True, help="Number of concurrent connections")
    parser.add_argument("-b", "--batchSize", dest="batch_size", type=int, required=True, help="Size of each batch")
    parser.add_argument("-m", "--mode", choices=[m.value for m in Mode], required=True, help="Mode of operation")
    parser.add_argument("-u", "--url", help="URL to connect to (can also be set via URL_ENDPOINT env var)")
    parser.add_argument("-M", "--model", help="Model to use (can also be set via MODEL_NAME env var)")
    parser.add_argument(
        "-n", "--numRequests", dest="num_requests", type=int, default=1000, help="Number of requests to make"
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="Per-request timeout in seconds")
    parser.add_argument("--corpus-url", default=DEFAULT_CORPUS_URL, help="Page used to build request inputs")
    parser.add_argument("--output", type=Path, help="CSV result log (default: result.csv)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def build_config(args: argparse.Namespace, environ: Mapping[str, str]) -> BenchmarkConfig:
    config = BenchmarkConfig(
        url=args.url or environ.get("URL_ENDPOINT", ""),
        model=args.model or environ.get("MODEL_NAME", ""),
        mode=Mode(args.mode),
        batch_size=args.batch_size,
        concurrency=args.concurrency,
        num_requests=args.num_requests,
        timeout_sec=args.timeout,
        corpus_url=args.corpus_url,
    )
    config.validate()
    return config


async def _log_progress(snapshot: ProgressSnapshot) -> None:
    logger.info(
        "[%s] %d/%d issued, %d completed, %d failed",
        snapshot.phase.value,
        snapshot.issued,
        snapshot.total,
        snapshot.completed,
        snapshot.failed,
    )


@contextlib.contextmanager
def stop_on_interrupt(loop: asyncio.AbstractEventLoop, engine: LoadEngine) -> Iterator[None]:
    """Route SIGINT to ``engine.stop()`` for the duration of the block.

    Where the loop cannot install signal handlers (Windows), a plain handler is
    installed and the previous one restored on exit. ``stop()`` must not run
    inside the signal frame: it takes the run state lock, which the interrupted
    frame may hold.
    """
    try:
        loop.add_signal_handler(signal.SIGINT, engine.stop)
    except (NotImplementedError, RuntimeError):
        previous = signal.signal(signal.SIGINT, lambda *_: loop.call_soon_threadsafe(engine.stop))
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous)
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)


async def run_benchmark(config: BenchmarkConfig, engine: LoadEngine | None = None) -> BenchmarkResult:
    logger.info("Starting benchmark with configuration:")
    for key, value in config.to_metadata().items():
        logger.info("  %s: %s", key, value)
    corpus = await fetch_corpus(
        config.corpus_url,
        config.mode.tokens_per_fragment,
        timeout_sec=config.timeout_sec,
    )
    logger.info("Generated %d chunks for %s mode", len(corpus), config.mode.value)
    spec = embedding_spec(config, corpus)
    engine = engine or LoadEngine(progress=_log_progress)

    with stop_on_interrupt(asyncio.get_running_loop(), engine):
        return await engine.run(spec)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s [%(levelname)s] %(message)s")
    try:
        config = build_config(args, os.environ)
        result = asyncio.run(run_benchmark(config))
    except (ConfigurationError, CorpusFetchError) as exc:
        logger.error("Error: %s", exc)
        return 1

    if result.failed_requests > 0:
        logger.error(
            "Error: %d out of %d requests failed.",
            result.failed_requests,
            result.total_requests,
        )
        return 1

    print(format_text(result))
    log = ResultLog(args.output) if args.output else default_result_log()
    log.append(format_csv_row(config, result))
    logger.info("Results appended to %s", log.path.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
