import unittest

from smart_sales.crud.user import (
    register_user,
    create_admin,
    authenticate,
    route_for_role,
    list_users,
)
from smart_sales.exceptions import EmailAlreadyRegistered, InvalidCredentials, UnknownRole
from smart_sales.models import RoleEnum
from tests.support import DatabaseTestCase


class TestUsers(DatabaseTestCase):

    async def test_register_stores_hash_and_buyer_role(self):
        user = await register_user(self.db, " Ann@Example.com ", "secret1")
        self.assertEqual(user.email, "ann@example.com")
        self.assertEqual(user.role, RoleEnum.buyer)
        self.assertNotEqual(user.password_hash, "secret1")
        self.assertTrue(user.check_password("secret1"))

    async def test_duplicate_email(self):
        await register_user(self.db, "ann@example.com", "secret1")
        with self.assertRaises(EmailAlreadyRegistered):
            await register_user(self.db, "ANN@example.com", "other12")
        self.assertEqual(len(await list_users(self.db)), 1)

    async def test_authenticate(self):
        await create_admin(self.db, "boss@example.com", "secret1")
        user = await authenticate(self.db, "boss@example.com", "secret1")
        self.assertEqual(user.role, RoleEnum.admin)

        with self.assertRaises(InvalidCredentials):
            await authenticate(self.db, "boss@example.com", "wrong")
        with self.assertRaises(InvalidCredentials):
            await authenticate(self.db, "nobody@example.com", "secret1")


class TestRoleRoutes(unittest.TestCase):

    def test_routes(self):
        self.assertEqual(route_for_role(RoleEnum.admin), "/summary")
        self.assertEqual(route_for_role("buyer"), "/buyer")

    def test_unknown_role(self):
        with self.assertRaises(UnknownRole):
            route_for_role("manager")


if __name__ == '__main__':
    unittest.main()
