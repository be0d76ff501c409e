from __future__ import annotations
from typing import Iterator, NamedTuple, Union
import logging

import dns.name

log = logging.getLogger("dnssec_chain")


class Delegation(NamedTuple):
    parent: dns.name.Name
    child: dns.name.Name


def to_name(name: Union[str, dns.name.Name]) -> dns.name.Name:
    if isinstance(name, dns.name.Name):
        if not name.is_absolute():
            name = name.concatenate(dns.name.root)
        return name
    return dns.name.from_text(name)


def label_count(name: dns.name.Name) -> int:
    """Number of labels without the empty root label, so the root has 0."""
    return len(name) - 1


def truncate(name: dns.name.Name, labels: int) -> dns.name.Name:
    """Rightmost labels of name, e.g. truncate(a.b.c., 2) == b.c."""
    return name.split(labels + 1)[1]


def iter_delegations(
        target: Union[str, dns.name.Name], origin: Union[str, dns.name.Name]
) -> Iterator[Delegation]:
    """
    Yield every (parent, child) label boundary of target below origin,
    from the top down. The last child is target itself.
    """
    target = to_name(target)
    origin = to_name(origin)

    if not target.is_subdomain(origin):
        log.warning(f"{target} is not below {origin}, walking by label count only")

    for level in range(label_count(origin), label_count(target)):
        yield Delegation(truncate(target, level), truncate(target, level + 1))
