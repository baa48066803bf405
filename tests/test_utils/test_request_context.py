import unittest
from common.models.users import UserRole
from common.utils.request_context import get_actor, get_path_parameter


class TestRequestContext(unittest.TestCase):
    def _event(self, authorizer):
        return {"requestContext": {"authorizer": authorizer}}

    def test_get_actor(self):
        actor = get_actor(self._event({"user_id": "u1", "role": "owner", "email": "o@test.com"}))
        self.assertEqual(actor.user_id, "u1")
        self.assertEqual(actor.role, UserRole.OWNER)
        self.assertEqual(actor.email, "o@test.com")

    def test_get_actor_unknown_role_is_customer(self):
        actor = get_actor(self._event({"user_id": "u1", "role": "user"}))
        self.assertEqual(actor.role, UserRole.CUSTOMER)

    def test_get_actor_missing_user(self):
        with self.assertRaises(KeyError):
            get_actor(self._event({}))
        with self.assertRaises(KeyError):
            get_actor(self._event({"user_id": ""}))
        with self.assertRaises(KeyError):
            get_actor({})

    def test_get_path_parameter(self):
        self.assertEqual(get_path_parameter({"pathParameters": {"booking_id": "b1"}}, "booking_id"), "b1")
        self.assertIsNone(get_path_parameter({"pathParameters": None}, "booking_id"))
        self.assertIsNone(get_path_parameter({}, "booking_id"))


if __name__ == "__main__":
    unittest.main()
