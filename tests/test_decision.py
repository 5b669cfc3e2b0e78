from __future__ import annotations

import unittest

from launchgate.common.types import NativeApp, WebSession
from launchgate.gate.decision import parse_decision, split_token_link


TOKEN = "GJDFHDFHFDJGSDAGKGHK"


class DecisionParserTests(unittest.TestCase):
    def test_matching_token_with_url_opens_web_session(self) -> None:
        decision = parse_decision(f"{TOKEN}#https://example.com/x", TOKEN)
        self.assertEqual(decision, WebSession(destination_url="https://example.com/x"))

    def test_wrong_token_is_native(self) -> None:
        self.assertEqual(parse_decision("WRONG#https://example.com/x", TOKEN), NativeApp())

    def test_token_prefix_is_not_a_match(self) -> None:
        self.assertEqual(parse_decision(f"{TOKEN[:-1]}#https://example.com/x", TOKEN), NativeApp())

    def test_malformed_url_is_native(self) -> None:
        for link in ("not a url", "example.com/x", "https://", "/relative/path", "https://exa mple.com"):
            with self.subTest(link=link):
                self.assertEqual(parse_decision(f"{TOKEN}#{link}", TOKEN), NativeApp())

    def test_missing_separator_is_inconclusive(self) -> None:
        for raw in ("noseparatorhere", "", "https://example.com/x", TOKEN):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_decision(raw, TOKEN))

    def test_empty_side_is_inconclusive(self) -> None:
        self.assertIsNone(parse_decision("#https://example.com/x", TOKEN))
        self.assertIsNone(parse_decision(f"{TOKEN}#", TOKEN))
        self.assertIsNone(parse_decision("#", TOKEN))

    def test_fragment_stays_in_destination(self) -> None:
        decision = parse_decision(f"{TOKEN}#https://example.com/app#section", TOKEN)
        self.assertEqual(decision, WebSession(destination_url="https://example.com/app#section"))

    def test_split_uses_first_separator(self) -> None:
        self.assertEqual(split_token_link("a#b#c"), ("a", "b#c"))


if __name__ == "__main__":
    unittest.main()
