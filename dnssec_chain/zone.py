from __future__ import annotations
from typing import List, Optional, Tuple, Union
from enum import Enum
from dataclasses import dataclass
import ipaddress
import logging

import dns
import dns.name
import dns.rdatatype

from dnssec_chain import utils

log = logging.getLogger("dnssec_chain")

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class IpFamilyMode(Enum):
    ANY = "any"
    IPV4 = "ipv4"
    IPV6 = "ipv6"

    @classmethod
    def from_text(cls, text: str) -> IpFamilyMode:
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"could not parse ip family mode: {text!r}") from None

    def accepts(self, address: Address) -> bool:
        if self == IpFamilyMode.ANY:
            return True
        if self == IpFamilyMode.IPV4:
            return address.version == 4
        return address.version == 6

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Nameserver:
    name: dns.name.Name
    addresses: Tuple[Address, ...] = ()

    def __str__(self):
        addresses = ", ".join(str(a) for a in self.addresses) or "no glue"
        return f"{self.name} ({addresses})"


@dataclass(frozen=True)
class Zone:
    name: dns.name.Name
    nameservers: Tuple[Nameserver, ...] = ()

    def __str__(self):
        return f"{self.name} [{', '.join(str(ns.name) for ns in self.nameservers)}]"


def select_address(
        nameservers: Tuple[Nameserver, ...], mode: IpFamilyMode
) -> Optional[Address]:
    """
    First address, in nameserver order, that belongs to the requested
    family. The choice is deterministic so repeated runs query the same
    servers.
    """
    for ns in nameservers:
        for address in ns.addresses:
            if mode.accepts(address):
                return address
    return None


def resolve_zone(
        name: Union[str, dns.name.Name],
        address: Union[str, Address],
        port: int = 53,
        timeout: float = utils.QUERY_TIMEOUT,
) -> Zone:
    """
    Ask a server authoritative for name (or one of its ancestors) for the
    NS records of name and build the zone from the referral or answer.
    :raises QueryError: if the query fails
    """
    if isinstance(name, str):
        name = dns.name.from_text(name)

    response = utils.dns_query(name, str(address), dns.rdatatype.NS, port, timeout)

    targets = utils.remove_duplicates(
        [
            ns.target
            for ns in utils.get_rdatas_by_type(
                response.answer + response.authority, dns.rdatatype.NS
            )
        ]
    )

    nameservers = [Nameserver(target, glue_addresses(response, target)) for target in targets]
    zone = Zone(name, tuple(nameservers))

    for ns in nameservers:
        log.info(f"{name} zone: Found name server {ns}")
    return zone


def glue_addresses(response: dns.message.Message, target: dns.name.Name) -> Tuple[Address, ...]:
    # keep the order of the additional section, A and AAAA mixed
    addresses = []  # type: List[Address]
    for rrset in response.additional:
        if rrset.name == target and rrset.rdtype in (dns.rdatatype.A, dns.rdatatype.AAAA):
            addresses.extend(ipaddress.ip_address(rd.address) for rd in rrset)
    return tuple(addresses)
