import unittest

import dns.name

from dnssec_chain.delegation import Delegation, iter_delegations, label_count, truncate


def names(pairs):
    return [(str(parent), str(child)) for parent, child in pairs]


class DelegationPath(unittest.TestCase):
    TARGETS = [
        "com.",
        "example.com.",
        "www.example.com.",
        "a.b.c.d.e.example.org.",
    ]

    def test_root_to_target(self):
        self.assertEqual(
            [(".", "com."), ("com.", "example.com."), ("example.com.", "www.example.com.")],
            names(iter_delegations("www.example.com.", ".")),
        )

    def test_length_and_shape(self):
        for target in self.TARGETS:
            target = dns.name.from_text(target)
            for depth in range(label_count(target) + 1):
                origin = truncate(target, depth)
                pairs = list(iter_delegations(target, origin))

                self.assertEqual(label_count(target) - label_count(origin), len(pairs))
                for parent, child in pairs:
                    self.assertEqual(label_count(parent) + 1, label_count(child))
                    self.assertTrue(target.is_subdomain(child))
                    self.assertEqual(child.parent(), parent)
                if pairs:
                    self.assertEqual(origin, pairs[0].parent)
                    self.assertEqual(target, pairs[-1].child)

    def test_target_equals_origin(self):
        self.assertEqual([], list(iter_delegations("example.com.", "example.com.")))
        self.assertEqual([], list(iter_delegations(".", ".")))

    def test_origin_below_target(self):
        self.assertEqual([], list(iter_delegations("example.com.", "www.example.com.")))

    def test_origin_inside_the_tree(self):
        self.assertEqual(
            [("example.com.", "www.example.com.")],
            names(iter_delegations("www.example.com", "example.com")),
        )

    def test_relative_names_are_absolute(self):
        pairs = list(iter_delegations(dns.name.from_text("example", None), dns.name.root))
        self.assertEqual([Delegation(dns.name.root, dns.name.from_text("example."))], pairs)

    def test_consumed_once(self):
        pairs = iter_delegations("www.example.com.", ".")
        self.assertEqual(3, len(list(pairs)))
        self.assertEqual([], list(pairs))

    def test_unrelated_origin_walks_by_label_count(self):
        with self.assertLogs("dnssec_chain", level="WARNING"):
            pairs = names(iter_delegations("www.example.com.", "org."))
        self.assertEqual(
            [("com.", "example.com."), ("example.com.", "www.example.com.")], pairs
        )


if __name__ == "__main__":
    unittest.main()
