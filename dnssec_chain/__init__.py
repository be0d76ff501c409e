from typing import Union
import logging

import dns
import dns.name

from dnssec_chain import utils
from dnssec_chain.utils import DNSSECChainResult, State, ChainError, QueryError, NoAddressError
from dnssec_chain.zone import Zone, Nameserver, IpFamilyMode, resolve_zone, select_address
from dnssec_chain.delegation import Delegation, iter_delegations, to_name
from dnssec_chain.validation import verify_trust
from dnssec_chain.messages import HopMessage, Trust, TrustVerdict, Msg


log = logging.getLogger("dnssec_chain")


class DNSSECChainWalker:
    ROOT_ADDRESS = "192.36.148.17"  # i.root-servers.net
    PORT = 53

    def __init__(
            self,
            zone: Union[str, dns.name.Name],
            origin: Union[str, dns.name.Name] = ".",
            root_address: str = ROOT_ADDRESS,
            port: int = PORT,
            family: IpFamilyMode = IpFamilyMode.ANY,
            timeout: float = utils.QUERY_TIMEOUT,
    ):
        """
        :param zone: Domain name whose chain of trust is checked
        :param origin: Zone the walk starts from, resolved at root_address
        :param root_address: IP address of a server authoritative for origin
        :param port: Port of root_address, every other server is asked on 53
        :param family: Address family used to pick name server addresses
        :param timeout: Timeout of each single query in seconds
        """
        self.zone = to_name(zone)
        self.origin = to_name(origin)
        self.root_address = root_address
        self.port = port
        self.family = family
        self.timeout = timeout

    def run(self) -> DNSSECChainResult:
        result = DNSSECChainResult(self.zone, self.origin)

        last_zone = self.resolve_origin(result)

        for parent, child in iter_delegations(self.zone, self.origin):
            address = select_address(last_zone.nameservers, self.family)
            if address is None:
                # the last known zone is kept, so every following hop fails the same way
                self.report(result, HopMessage.error(parent, child, Msg.NO_USABLE_ADDRESS))
                continue

            parent_zone = last_zone
            log.info(f"Entering {child} zone via {address}")
            try:
                last_zone = resolve_zone(child, address, timeout=self.timeout)
            except QueryError as e:
                last_zone = Zone(child)
                self.report(result, HopMessage.error(parent, child, str(e)))
                continue

            try:
                verdict = verify_trust(parent_zone, last_zone, self.family, self.timeout)
            except ChainError as e:
                self.report(result, HopMessage.error(parent, child, str(e)))
            else:
                self.report(result, HopMessage.from_verdict(parent, child, verdict))

        if not result.hops:
            result.note = f"No delegation between {self.origin} and {self.zone}"

        return result

    def resolve_origin(self, result: DNSSECChainResult) -> Zone:
        log.info(f"Entering {self.origin} zone via {self.root_address}#{self.port}")
        try:
            return resolve_zone(self.origin, self.root_address, self.port, self.timeout)
        except QueryError as e:
            log.debug(f"Could not resolve {self.origin}: {e}")
            result.set_origin_error(str(e))
            # an empty zone makes every hop fail with a missing address
            return Zone(self.origin)

    def report(self, result: DNSSECChainResult, msg: HopMessage):
        log.info(str(msg))
        result.add_hop(msg)
