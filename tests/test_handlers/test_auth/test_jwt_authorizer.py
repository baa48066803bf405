import importlib
import os
import unittest
from unittest.mock import patch
import jwt

class JwtAuthorizerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"JWT_SECRET": "testsecret", "JWT_ALGORITHM": "HS256"}, clear=False)
        cls.env.start()
        import handlers.auth.jwt_authorizer as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.env.stop()

    def setUp(self):
        self.p_decode = patch("handlers.auth.jwt_authorizer.jwt.decode")
        self.mock_decode = self.p_decode.start()

    def tearDown(self):
        self.p_decode.stop()

    def _event(self, token=None, method_arn="arn:aws:execute-api:123/test/GET/resource", headers=None):
        event = {"methodArn": method_arn}
        if token:
            event["authorizationToken"] = token
        if headers:
            event["headers"] = headers
        return event

    def test_missing_token_denies(self):
        resp = self.mod.lambda_handler(self._event(), None)
        self.assertEqual("Deny", resp["policyDocument"]["Statement"][0]["Effect"])
        self.assertEqual("unauthorized", resp["principalId"])
        self.mock_decode.assert_not_called()

    def test_token_in_authorizationToken(self):
        self.mock_decode.return_value = {"user_id": "u2", "email": "x@test.com", "role": "ADMIN"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Allow", resp["policyDocument"]["Statement"][0]["Effect"])
        self.assertEqual("u2", resp["principalId"])
        self.assertEqual("ADMIN", resp["context"]["role"])
        self.assertEqual("arn:aws:execute-api:123/test/*/*", resp["policyDocument"]["Statement"][0]["Resource"])
        args, _ = self.mock_decode.call_args
        self.assertEqual("testtoken", args[0])

    def test_token_in_headers(self):
        self.mock_decode.return_value = {"user_id": "u3", "role": "agent"}
        resp = self.mod.lambda_handler(self._event(headers={"authorization": "Bearer abc"}), None)
        self.assertEqual("Allow", resp["policyDocument"]["Statement"][0]["Effect"])
        self.assertEqual("AGENT", resp["context"]["role"])
        self.assertEqual("", resp["context"]["email"])

    def test_unknown_role_falls_back_to_customer(self):
        self.mock_decode.return_value = {"user_id": "u4", "role": "superuser"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("CUSTOMER", resp["context"]["role"])

    def test_token_missing_user_id_denies(self):
        self.mock_decode.return_value = {"email": "e@test.com", "role": "OWNER"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", resp["policyDocument"]["Statement"][0]["Effect"])
        self.assertEqual("unauthorized", resp["principalId"])

    def test_expired_signature_denies(self):
        self.mock_decode.side_effect = jwt.ExpiredSignatureError()
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", resp["policyDocument"]["Statement"][0]["Effect"])

    def test_invalid_token_denies(self):
        self.mock_decode.side_effect = jwt.InvalidTokenError()
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", resp["policyDocument"]["Statement"][0]["Effect"])

    def test_generic_exception_denies(self):
        self.mock_decode.side_effect = Exception("fail")
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", resp["policyDocument"]["Statement"][0]["Effect"])
        self.assertEqual("unauthorized", resp["principalId"])

if __name__ == "__main__":
    unittest.main()
