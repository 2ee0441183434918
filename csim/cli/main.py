from __future__ import annotations
import argparse
import sys
from ..config import Geometry, SimConfig
from ..errors import ConfigurationError, ResourceError
from ..runtime.decoder import AddressDecoder
from ..runtime.simulator import run as run_sim
from ..trace.parser import iter_trace
from ..utils.logging import get_logger
from ..utils.reporting import generate_report, print_summary

logger = get_logger("csim")


def cmd_run(args):
    """Handles the 'run' command."""
    config = SimConfig.from_args(args)
    geometry = config.geometry()

    if not config.trace_file:
        raise ConfigurationError("A trace file is required (-t <tracefile>).")

    logger.info(f"sets: {geometry.num_sets}, lines: {geometry.lines_per_set}, "
                f"block_size: {geometry.block_size}, verbose: {int(bool(config.verbose))}")

    try:
        trace = open(config.trace_file, "r")
    except OSError as exc:
        raise ConfigurationError(f"Invalid trace file path: {config.trace_file} ({exc.strerror})") from exc

    on_record = (lambda record: print(record.format())) if config.verbose else None
    with trace:
        result, set_stats = run_sim(iter_trace(trace), config, on_record=on_record)

    print_summary(result)

    if config.report_dir or config.ascii_chart:
        generate_report(result, geometry, set_stats, config)
    return 0


def cmd_decode(args):
    """Handles the 'decode' command."""
    geometry = Geometry(args.set_index_bits, 1, args.block_offset_bits)
    decoder = AddressDecoder(geometry)

    print(f"{'address':>18} {'tag':>18} {'set':>8} {'offset':>8}")
    for text in args.addresses:
        try:
            address = int(text, 16)
        except ValueError:
            raise ConfigurationError(f"Not a hexadecimal address: {text!r}") from None
        tag, index, offset = decoder.decode(address)
        print(f"{address:>#18x} {tag:>#18x} {index:>8} {offset:>8}")
    return 0


def _add_geometry_args(parser, with_lines: bool = True, default=None):
    geo = parser.add_argument_group('Cache Geometry')
    geo.add_argument("-s", type=int, default=default, dest="set_index_bits",
                     help="Number of set index bits (S = 2^s is the number of sets)")
    if with_lines:
        geo.add_argument("-E", type=int, default=None, dest="lines_per_set",
                         help="Associativity (number of lines per set)")
    geo.add_argument("-b", type=int, default=default, dest="block_offset_bits",
                     help="Number of block bits (B = 2^b is the block size)")


def build_parser():
    p = argparse.ArgumentParser(
        prog="csim",
        description="Set-associative LRU cache simulator for valgrind memory traces",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace and report hits, misses and evictions")
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")
    _add_geometry_args(pr)
    pr.add_argument("-t", type=str, default=None, dest="trace_file",
                    help="Name of the valgrind trace to replay")
    pr.add_argument("-v", "--verbose", action="store_true", default=None,
                    help="Optional verbose flag that displays trace info")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save report.json and report.html")
    pr.add_argument("--ascii-chart", action="store_true", default=None, dest="ascii_chart",
                    help="Print an ASCII per-set activity chart to the console")
    pr.add_argument("--max-lines", type=int, default=None, dest="max_cache_lines",
                    help="Refuse to simulate caches with more lines than this")
    pr.set_defaults(func=cmd_run)

    # --- Decode Command ---
    pd_ = sub.add_parser("decode", help="Split addresses into tag, set index and block offset")
    _add_geometry_args(pd_, with_lines=False, default=0)
    pd_.add_argument("addresses", nargs="+", help="Hexadecimal addresses (no 0x prefix needed)")
    pd_.set_defaults(func=cmd_decode)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ConfigurationError as exc:
        logger.error(str(exc))
        parser.print_usage(sys.stderr)
        return 1
    except ResourceError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
