import unittest
from unittest import mock

from tests.utils.fake_network import FakeNetwork


class CustomTestCase(unittest.TestCase):
    """Test case with the DNS replaced by a FakeNetwork."""

    def setUp(self):
        self.network = FakeNetwork()
        patcher = mock.patch("dnssec_chain.utils.dns_query", side_effect=self.network)
        self.dns_query = patcher.start()
        self.addCleanup(patcher.stop)

    def assert_hops(self, expected, result):
        self.assertEqual(expected, [str(msg) for msg in result.hops])

    def queried(self, rdtype):
        return [(qname, ip) for qname, ip, t, _ in self.network.queries if t == rdtype]
