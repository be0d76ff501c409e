import argparse
import logging
import sys

import validators
from colorama import Fore, Style

from dnssec_chain import DNSSECChainWalker, DNSSECChainResult, IpFamilyMode, HopMessage


def valid_domain(value: str) -> str:
    if value.strip() == ".":
        return "."
    name = value.rstrip(".")
    # validators only accepts names with at least two labels
    if "." not in name:
        name = f"tld.{name}"
    if not validators.domain(name):
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid domain name")
    return value


def valid_address(value: str) -> str:
    if not (validators.ipv4(value) or validators.ipv6(value)):
        raise argparse.ArgumentTypeError(f"{value!r} is not an IPv4 or IPv6 address")
    return value


def family_mode(value: str) -> IpFamilyMode:
    try:
        return IpFamilyMode.from_text(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check the DS/DNSKEY chain of trust for every delegation of a domain name."
    )
    parser.add_argument("zone", type=valid_domain, help="Domain name you want to check.")
    parser.add_argument(
        "-a",
        "--root-address",
        type=valid_address,
        default=DNSSECChainWalker.ROOT_ADDRESS,
        help="Address of the server the origin is resolved at (default: %(default)s).",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DNSSECChainWalker.PORT,
        help="Port of the root address (default: %(default)s).",
    )
    parser.add_argument(
        "-o",
        "--origin",
        type=valid_domain,
        default=".",
        help="Zone the walk starts from (default: the root zone).",
    )
    parser.add_argument(
        "-f",
        "--ip-family-mode",
        type=family_mode,
        default=IpFamilyMode.ANY,
        metavar="{any,ipv4,ipv6}",
        help="Address family used to reach name servers (default: %(default)s).",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=5.0,
        help="Timeout of a single query in seconds (default: %(default)s).",
    )
    parser.add_argument(
        "-s", "--summary", action="store_true", help="Print a summary table at the end."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every step of the walk."
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Do not color the output."
    )
    return parser


def colorize(tag: str, color: str, stream, enabled: bool) -> str:
    if enabled and stream.isatty():
        return f"{color}{tag}{Style.RESET_ALL}"
    return tag


def print_hop(msg: HopMessage, color: bool):
    stream = sys.stdout if msg else sys.stderr
    tag = colorize(msg.tag, Fore.GREEN if msg else Fore.RED, stream, color)
    print(f"[{tag}] {msg.text}", file=stream)


def print_result(result: DNSSECChainResult, color: bool):
    if result.origin_error:
        tag = colorize("Error", Fore.RED, sys.stderr, color)
        print(f"[{tag}] {result.origin} - {result.origin_error}", file=sys.stderr)

    for msg in result.hops:
        print_hop(msg, color)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not 0 < args.port < 65536:
        parser.error(f"port out of range: {args.port}")
    if args.timeout <= 0:
        parser.error(f"timeout must be positive: {args.timeout}")

    logging.basicConfig(level=logging.WARNING)
    logging.getLogger("dnssec_chain").setLevel(
        logging.INFO if args.verbose else logging.WARNING
    )

    walker = DNSSECChainWalker(
        args.zone,
        origin=args.origin,
        root_address=args.root_address,
        port=args.port,
        family=args.ip_family_mode,
        timeout=args.timeout,
    )
    result = walker.run()

    print_result(result, not args.no_color)
    if args.summary:
        print(result)

    return 0 if result else 1


if __name__ == "__main__":
    sys.exit(main())
