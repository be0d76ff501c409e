from __future__ import annotations
from typing import List
import logging

import dns
import dns.name
import dns.rdatatype

from dnssec_chain import utils
from dnssec_chain.utils import NoAddressError
from dnssec_chain.zone import Zone, IpFamilyMode, select_address
from dnssec_chain.messages import TrustVerdict, Msg

log = logging.getLogger("dnssec_chain")


def verify_trust(
        parent: Zone,
        child: Zone,
        mode: IpFamilyMode,
        timeout: float = utils.QUERY_TIMEOUT,
) -> TrustVerdict:
    """
    The child is trusted as soon as one DS record of the parent matches
    one DNSKEY of the child by key tag and algorithm. The DS digest and
    the signatures are not checked.
    :raises NoAddressError: if parent or child has no usable address
    :raises QueryError: if the DS or DNSKEY query fails
    """
    ds_records = query_ds(parent, child.name, mode, timeout)
    dnskey_records = query_dnskey(child, mode, timeout)

    for ds in ds_records:
        for dnskey in dnskey_records:
            if ds.key_tag == utils.dnskey_tag(dnskey) and ds.algorithm == dnskey.algorithm:
                log.info(
                    f"{parent.name} zone: DS {ds.key_tag} {ds.algorithm} matches "
                    f"DNSKEY of {child.name}"
                )
                return TrustVerdict.trusted()

    if ds_records:
        log.info(f"{parent.name} zone: no DS for {child.name} matches any DNSKEY")
    else:
        log.info(f"{parent.name} zone: DS for {child.name} not found")
    return TrustVerdict.untrusted(Msg.MISSING_DS)


def query_ds(
        parent: Zone, child_name: dns.name.Name, mode: IpFamilyMode, timeout: float
) -> List[dns.rdtypes.ANY.DS.DS]:
    address = select_address(parent.nameservers, mode)
    if address is None:
        raise NoAddressError(Msg.NO_NS_ADDRESS)

    response = utils.dns_query(child_name, str(address), dns.rdatatype.DS, timeout=timeout)
    return utils.get_rdatas_by_type(response.answer, dns.rdatatype.DS)


def query_dnskey(
        child: Zone, mode: IpFamilyMode, timeout: float
) -> List[dns.rdtypes.ANY.DNSKEY.DNSKEY]:
    address = select_address(child.nameservers, mode)
    if address is None:
        raise NoAddressError(Msg.NO_NS_ADDRESS)

    response = utils.dns_query(child.name, str(address), dns.rdatatype.DNSKEY, timeout=timeout)
    return utils.get_rdatas_by_type(response.answer, dns.rdatatype.DNSKEY)
