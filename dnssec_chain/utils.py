from __future__ import annotations
from typing import List, Tuple, Union
from enum import Enum
import logging
import struct

from tabulate import tabulate
from textwrap import TextWrapper
import dns
import dns.exception
import dns.message
import dns.name
import dns.query
import dns.rdatatype

from .messages import HopMessage

log = logging.getLogger("dnssec_chain")

QUERY_TIMEOUT = 5


class ChainError(Exception):
    """Base class for failures that prevent a hop from being evaluated."""


class QueryError(ChainError):
    """The query itself failed (timeout, unreachable server, bad response)."""


class NoAddressError(ChainError):
    """None of the zone's nameservers has a usable address."""


class State(Enum):
    SECURE = 0  # every hop is anchored by a DS record
    UNTRUSTED = 1  # at least one hop has no matching DS record
    INCOMPLETE = 2  # at least one hop could not be evaluated


class DNSSECChainResult:
    def __init__(self, domain: dns.name.Name, origin: dns.name.Name):
        self.domain = domain
        self.origin = origin
        self.state = State.SECURE
        self.note: str = ""
        self.origin_error: str = ""
        self.hops: List[HopMessage] = []

    def add_hop(self, msg: HopMessage):
        self.hops.append(msg)
        if msg.is_error():
            self.change_state(State.INCOMPLETE)
        elif not msg:
            self.change_state(State.UNTRUSTED)

    def set_origin_error(self, reason: str):
        self.origin_error = reason
        self.change_state(State.INCOMPLETE)

    def change_state(self, state: State):
        # the first problem found decides the overall state
        if self.state == State.SECURE:
            self.state = state

    @property
    def logs(self) -> List[str]:
        return [str(msg) for msg in self.hops if msg]

    @property
    def errors(self) -> List[str]:
        errors = [str(msg) for msg in self.hops if not msg]
        if self.origin_error:
            errors.insert(0, f"[Error] {self.origin} - {self.origin_error}")
        return errors

    def __bool__(self):
        return self.state == State.SECURE

    def __str__(self):
        width = 80
        wrapper = TextWrapper(width=width, replace_whitespace=False)
        tmp_info = (
            [wrapper.fill(t) for t in self.logs] if self.logs else ["No trusted hop"]
        )
        tmp_err = (
            [wrapper.fill(t) for t in self.errors] if self.errors else ["All good ;)"]
        )

        logs = {expand_string("Trusted", width): tmp_info}
        errors = {expand_string("Problems", width): tmp_err}

        output = (
            f"\n{tabulate(logs, headers='keys', tablefmt='fancy_grid', showindex='always')}\n"
            f"{tabulate(errors, headers='keys', tablefmt='fancy_grid', showindex='always')}\n"
            f"\nDomain: {self.domain}, Origin: {self.origin}, DNSSEC: {self.state}"
        )
        if self.note:
            output += f", Note: {self.note}"
        return output + "\n"


def dns_query(
        domain: Union[str, dns.name.Name],
        ip: str,
        type: int,
        port: int = 53,
        timeout: float = QUERY_TIMEOUT,
) -> dns.message.Message:
    """
    Send a single UDP query. There is no retry and no TCP fallback,
    every failure surfaces as a QueryError.
    :param domain: Owner name to ask for
    :param ip: Address of the server
    :param type: One of the dns.rdatatype types
    :return: The decoded response
    """
    request = dns.message.make_query(domain, type, want_dnssec=True, payload=4096)
    log.debug(f"Query {dns.rdatatype.to_text(type)} {domain} @{ip}#{port}")
    try:
        return dns.query.udp(request, str(ip), timeout=timeout, port=port)
    except dns.exception.Timeout as e:
        log.debug(f"Query timeout @{ip}")
        raise QueryError(f"{dns.rdatatype.to_text(type)} query to {ip} timed out") from e
    except (dns.exception.DNSException, OSError, ValueError) as e:
        log.debug(f"Query to {ip} failed: {e!r}")
        raise QueryError(
            f"{dns.rdatatype.to_text(type)} query to {ip} failed ({e})"
        ) from e


def get_rrs_by_type(
        items: List[dns.rrset.RRset], rdtype: dns.rdatatype
) -> List[Tuple[dns.name.Name, dns.rrset.RRset]]:
    result = []
    for item in items:
        if item.rdtype == rdtype:
            result.append((item.name, item))
    return result


def get_rdatas_by_type(
        items: List[dns.rrset.RRset], rdtype: dns.rdatatype
) -> List[dns.rdata.Rdata]:
    result = []
    for _, rrset in get_rrs_by_type(items, rdtype):
        result.extend(rrset)
    return result


def key_tag(flags: int, protocol: int, algorithm: int, key: bytes) -> int:
    """
    Source: https://tools.ietf.org/html/rfc4034#appendix-B
    :param flags: DNSKEY flags field
    :param protocol: DNSKEY protocol field (always 3)
    :param algorithm: DNSKEY algorithm number
    :param key: Public key material
    :return: The 16 bit key tag
    """
    wire = struct.pack(">HBB", flags, protocol, algorithm) + key

    if algorithm == 1:
        # RSA/MD5 uses the most significant 16 of the least significant 24 bits
        # of the RDATA, which is never shorter than 4 bytes
        return struct.unpack(">H", wire[-3:-1])[0]

    if len(wire) % 2:
        wire += b"\0"

    ac = 0
    for pos in range(0, len(wire), 2):
        ac += struct.unpack(">H", wire[pos:pos + 2])[0]
    ac += (ac >> 16) & 0xFFFF
    return ac & 0xFFFF


def dnskey_tag(dnskey: dns.rdtypes.ANY.DNSKEY) -> int:
    return key_tag(dnskey.flags, dnskey.protocol, int(dnskey.algorithm), dnskey.key)


def expand_string(s: str, width: int) -> str:
    l = width - len(s)
    for _ in range(l):
        s += " "
    return s


def remove_duplicates(list_var: List[any]) -> List[any]:
    result = []
    for el in list_var:
        if el not in result:
            result.append(el)

    return result
