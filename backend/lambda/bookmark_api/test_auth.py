"""test_auth.py — Unit tests for principal extraction from authorizer claims.

Run: python3 -m pytest test_auth.py -v
"""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(__file__))

from auth import (  # noqa: E402
    Principal,
    Unauthenticated,
    get_claims,
    get_email,
    get_groups,
    get_principal,
    get_user_id,
)


def _event(claims=None, rest_api=False):
    if claims is None:
        return {"requestContext": {}}
    if rest_api:
        return {"requestContext": {"authorizer": {"claims": claims}}}
    return {"requestContext": {"authorizer": {"jwt": {"claims": claims}}}}


class ClaimsTests(unittest.TestCase):
    def test_http_api_claims(self):
        self.assertEqual(get_claims(_event({"sub": "u1"})), {"sub": "u1"})

    def test_rest_api_claims(self):
        self.assertEqual(get_claims(_event({"sub": "u1"}, rest_api=True)), {"sub": "u1"})

    def test_no_authorizer(self):
        self.assertEqual(get_claims({}), {})


class UserIdTests(unittest.TestCase):
    def test_user_id(self):
        self.assertEqual(get_user_id(_event({"sub": "u1"})), "u1")

    def test_missing_sub_raises(self):
        for event in (_event(), _event({}), _event({"sub": ""}), _event({"sub": 7})):
            with self.subTest(event=event):
                with self.assertRaises(Unauthenticated):
                    get_user_id(event)

    def test_header_identity_is_ignored(self):
        event = _event()
        event["headers"] = {"x-user-id": "spoofed"}
        with self.assertRaises(Unauthenticated):
            get_user_id(event)


class OptionalClaimTests(unittest.TestCase):
    def test_email_present_and_absent(self):
        self.assertEqual(get_email(_event({"sub": "u1", "email": "a@b.test"})), "a@b.test")
        self.assertIsNone(get_email(_event({"sub": "u1"})))

    def test_groups_absent(self):
        self.assertEqual(get_groups(_event({"sub": "u1"})), [])

    def test_groups_single_string(self):
        self.assertEqual(get_groups(_event({"cognito:groups": "admin"})), ["admin"])

    def test_groups_stringified_list(self):
        self.assertEqual(
            get_groups(_event({"cognito:groups": "[admin editors]"})),
            ["admin", "editors"],
        )

    def test_groups_comma_separated(self):
        self.assertEqual(get_groups(_event({"cognito:groups": "a,b"})), ["a", "b"])
        self.assertEqual(get_groups(_event({"cognito:groups": "a, b ,c"})), ["a", "b", "c"])

    def test_groups_list(self):
        self.assertEqual(
            get_groups(_event({"cognito:groups": ["admin", 3, "ops"]})),
            ["admin", "ops"],
        )


class PrincipalTests(unittest.TestCase):
    def test_principal(self):
        principal = get_principal(
            _event({"sub": "u1", "email": "a@b.test", "cognito:groups": ["g"]})
        )
        self.assertEqual(principal, Principal(user_id="u1", email="a@b.test", groups=["g"]))


if __name__ == "__main__":
    unittest.main()
