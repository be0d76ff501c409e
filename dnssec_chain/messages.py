from __future__ import annotations
from enum import Enum

import dns.name


class Msg:
    MISSING_DS = "missing DS"
    NO_NS_ADDRESS = "no name server address found"
    NO_USABLE_ADDRESS = "no usable address found for nameserver"


class Trust(Enum):
    TRUSTED = "OK"
    UNTRUSTED = "Untrusted"
    ERROR = "Error"


class TrustVerdict:
    """
    Outcome of the DS/DNSKEY comparison for one delegation. Only
    untrusted verdicts carry a reason.
    """

    def __init__(self, trust: Trust, reason: str = ""):
        self.trust = trust
        self.reason = reason

    @classmethod
    def trusted(cls) -> TrustVerdict:
        return cls(Trust.TRUSTED)

    @classmethod
    def untrusted(cls, reason: str) -> TrustVerdict:
        return cls(Trust.UNTRUSTED, reason)

    def __eq__(self, other):
        if not isinstance(other, TrustVerdict):
            return NotImplemented
        return self.trust == other.trust and self.reason == other.reason

    def __repr__(self):
        if self.reason:
            return f"TrustVerdict({self.trust.name}, {self.reason!r})"
        return f"TrustVerdict({self.trust.name})"

    def __bool__(self):
        return self.trust == Trust.TRUSTED


class HopMessage:
    def __init__(
            self,
            parent: dns.name.Name,
            child: dns.name.Name,
            trust: Trust,
            reason: str = "",
    ):
        self.parent = parent
        self.child = child
        self.trust = trust
        self.reason = reason

    @classmethod
    def from_verdict(
            cls, parent: dns.name.Name, child: dns.name.Name, verdict: TrustVerdict
    ) -> HopMessage:
        return cls(parent, child, verdict.trust, verdict.reason)

    @classmethod
    def error(cls, parent: dns.name.Name, child: dns.name.Name, reason: str) -> HopMessage:
        return cls(parent, child, Trust.ERROR, reason)

    def is_error(self) -> bool:
        return self.trust == Trust.ERROR

    @property
    def tag(self) -> str:
        return self.trust.value

    @property
    def text(self) -> str:
        """Everything after the bracketed tag."""
        text = f"{self.parent} -> {self.child}"
        if self.trust != Trust.TRUSTED:
            text += f" - {self.reason}"
        return text

    def __str__(self):
        return f"[{self.tag}] {self.text}"

    def __bool__(self):
        return self.trust == Trust.TRUSTED
