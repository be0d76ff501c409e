import unittest
from ipaddress import ip_address

import dns.name

from dnssec_chain.utils import QueryError
from dnssec_chain.zone import IpFamilyMode, Nameserver, Zone, resolve_zone, select_address
from tests.utils.custom_test_case import CustomTestCase
from tests.utils.fake_network import make_response, referral, rrset

ROOT = "192.36.148.17"


def ns(name, *addresses):
    return Nameserver(dns.name.from_text(name), tuple(ip_address(a) for a in addresses))


class ResolveZone(CustomTestCase):
    def test_referral_with_glue(self):
        self.network.add(
            "example.",
            "NS",
            ROOT,
            referral("example.", ("ns1.example.", ["192.0.2.1"]), ("ns2.example.", ["2001:db8::1"])),
        )

        zone = resolve_zone("example.", ROOT)

        self.assertEqual(dns.name.from_text("example."), zone.name)
        self.assertEqual(
            (ns("ns1.example.", "192.0.2.1"), ns("ns2.example.", "2001:db8::1")),
            zone.nameservers,
        )
        self.assertEqual([("example.", ROOT, "NS", 53)], self.network.queries)

    def test_answer_section_before_authority(self):
        response = make_response(
            "example.",
            "NS",
            answer=[rrset("example.", "NS", "a.ns.example.")],
            authority=[rrset("example.", "NS", "b.ns.example.", "a.ns.example.")],
            additional=[
                rrset("b.ns.example.", "A", "192.0.2.2"),
                rrset("a.ns.example.", "AAAA", "2001:db8::a"),
                rrset("a.ns.example.", "A", "192.0.2.1"),
            ],
        )
        self.network.add("example.", "NS", ROOT, response)

        zone = resolve_zone(dns.name.from_text("example."), ROOT)

        self.assertEqual(
            (
                ns("a.ns.example.", "2001:db8::a", "192.0.2.1"),
                ns("b.ns.example.", "192.0.2.2"),
            ),
            zone.nameservers,
        )

    def test_glueless_delegation(self):
        self.network.add(
            "example.", "NS", ROOT, referral("example.", ("ns.other.", []))
        )

        zone = resolve_zone("example.", ROOT)

        self.assertEqual((ns("ns.other."),), zone.nameservers)
        self.assertIsNone(select_address(zone.nameservers, IpFamilyMode.ANY))

    def test_glue_of_other_names_is_ignored(self):
        response = referral("example.", ("ns.example.", []))
        response.additional.append(rrset("ns.elsewhere.", "A", "192.0.2.9"))
        self.network.add("example.", "NS", ROOT, response)

        self.assertEqual((ns("ns.example."),), resolve_zone("example.", ROOT).nameservers)

    def test_no_ns_records(self):
        response = make_response(
            "www.example.",
            "NS",
            authority=[rrset("example.", "SOA", "ns.example. admin.example. 1 3600 600 86400 300")],
        )
        self.network.add("www.example.", "NS", ROOT, response)

        self.assertEqual(Zone(dns.name.from_text("www.example.")), resolve_zone("www.example.", ROOT))

    def test_custom_port(self):
        resolve_zone(".", "127.0.0.1", 5353)
        self.assertEqual([(".", "127.0.0.1", "NS", 5353)], self.network.queries)

    def test_query_error_propagates(self):
        self.network.fail("example.", "NS", ROOT)
        with self.assertRaises(QueryError):
            resolve_zone("example.", ROOT)


class SelectAddress(unittest.TestCase):
    NAMESERVERS = (
        ns("ns1.example."),
        ns("ns2.example.", "2001:db8::2", "192.0.2.2"),
        ns("ns3.example.", "192.0.2.3", "2001:db8::3"),
    )

    def test_any_takes_first_address(self):
        self.assertEqual(
            ip_address("2001:db8::2"), select_address(self.NAMESERVERS, IpFamilyMode.ANY)
        )

    def test_family_filter(self):
        self.assertEqual(
            ip_address("192.0.2.2"), select_address(self.NAMESERVERS, IpFamilyMode.IPV4)
        )
        self.assertEqual(
            ip_address("2001:db8::2"), select_address(self.NAMESERVERS, IpFamilyMode.IPV6)
        )

    def test_deterministic(self):
        for mode in IpFamilyMode:
            first = select_address(self.NAMESERVERS, mode)
            for _ in range(20):
                self.assertEqual(first, select_address(self.NAMESERVERS, mode))

    def test_no_matching_family(self):
        only_v6 = (ns("ns.example.", "2001:db8::1", "2001:db8::2"),)
        self.assertIsNone(select_address(only_v6, IpFamilyMode.IPV4))
        only_v4 = (ns("ns.example.", "192.0.2.1"),)
        self.assertIsNone(select_address(only_v4, IpFamilyMode.IPV6))

    def test_empty(self):
        self.assertIsNone(select_address((), IpFamilyMode.ANY))


class FamilyMode(unittest.TestCase):
    def test_from_text(self):
        self.assertEqual(IpFamilyMode.ANY, IpFamilyMode.from_text("any"))
        self.assertEqual(IpFamilyMode.IPV4, IpFamilyMode.from_text("ipv4"))
        self.assertEqual(IpFamilyMode.IPV6, IpFamilyMode.from_text("ipv6"))
        self.assertEqual("ipv6", str(IpFamilyMode.IPV6))

    def test_invalid(self):
        for text in ("", "IPv4", "inet", "both"):
            with self.assertRaises(ValueError):
                IpFamilyMode.from_text(text)


if __name__ == "__main__":
    unittest.main()
