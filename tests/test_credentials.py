"""Tests for app.services.credentials: lockout counting, refusal order, and reset on success."""

import unittest
from unittest.mock import MagicMock, patch

from app.models import User
from app.schemas.auth import UserIdentity
from app.services.credentials import (
    FAILED_ATTEMPTS_THRESHOLD,
    LoginFailure,
    validate_credentials,
)
from tests.support import DEFAULT_PASSWORD, DatabaseTestCase


class TestIncompleteCredentials(unittest.TestCase):
    """Empty username or password fails before the database is touched."""

    def test_empty_password_does_not_query(self) -> None:
        session = MagicMock()
        result = validate_credentials(session, "tech1", "")
        self.assertIs(result, LoginFailure.INCOMPLETE_CREDENTIALS)
        session.query.assert_not_called()
        session.execute.assert_not_called()

    def test_empty_username_does_not_query(self) -> None:
        session = MagicMock()
        result = validate_credentials(session, "", "secret")
        self.assertIs(result, LoginFailure.INCOMPLETE_CREDENTIALS)
        session.query.assert_not_called()

    def test_failure_messages(self) -> None:
        self.assertEqual(LoginFailure.INCOMPLETE_CREDENTIALS.message, "Credenciales incompletas")
        self.assertEqual(LoginFailure.INVALID_CREDENTIALS.message, "Credenciales inválidas")
        self.assertEqual(LoginFailure.ACCOUNT_DISABLED.message, "Cuenta deshabilitada")
        self.assertEqual(LoginFailure.ACCOUNT_BLOCKED.message, "Cuenta bloqueada temporalmente")


class TestUnknownUser(DatabaseTestCase):
    """A missing username costs a dummy hash check and reports invalid credentials."""

    def test_unknown_user_runs_dummy_check(self) -> None:
        with patch("app.services.credentials.verify_dummy_password") as dummy:
            result = validate_credentials(self.db, "ghost", "whatever")
        self.assertIs(result, LoginFailure.INVALID_CREDENTIALS)
        dummy.assert_called_once_with("whatever")

    def test_username_match_is_exact(self) -> None:
        self.add_user("tech1")
        result = validate_credentials(self.db, "tech1 ", DEFAULT_PASSWORD)
        self.assertIs(result, LoginFailure.INVALID_CREDENTIALS)


class TestDisabledAndBlocked(DatabaseTestCase):
    """Disabled and blocked accounts are refused regardless of the password."""

    def test_disabled_with_correct_password(self) -> None:
        user = self.add_user(is_disabled=True)
        result = validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        self.assertIs(result, LoginFailure.ACCOUNT_DISABLED)
        self.assertEqual(self.reload(user).failed_login_attempts, 0)

    def test_disabled_with_wrong_password_does_not_count(self) -> None:
        user = self.add_user(is_disabled=True, failed_login_attempts=2)
        result = validate_credentials(self.db, "tech1", "wrong-password")
        self.assertIs(result, LoginFailure.ACCOUNT_DISABLED)
        self.assertEqual(self.reload(user).failed_login_attempts, 2)

    def test_disabled_checked_before_blocked(self) -> None:
        self.add_user(is_disabled=True, is_blocked=True)
        result = validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        self.assertIs(result, LoginFailure.ACCOUNT_DISABLED)

    def test_blocked_with_correct_password_never_checks_it(self) -> None:
        user = self.add_user(is_blocked=True, failed_login_attempts=5)
        with patch("app.services.credentials.verify_password") as verify:
            result = validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        self.assertIs(result, LoginFailure.ACCOUNT_BLOCKED)
        verify.assert_not_called()
        user = self.reload(user)
        self.assertTrue(user.is_blocked)
        self.assertEqual(user.failed_login_attempts, 5)

    def test_blocked_with_wrong_password(self) -> None:
        self.add_user(is_blocked=True, failed_login_attempts=5)
        result = validate_credentials(self.db, "tech1", "wrong-password")
        self.assertIs(result, LoginFailure.ACCOUNT_BLOCKED)


class TestFailedAttempts(DatabaseTestCase):
    """Wrong passwords increment the counter and block at the threshold."""

    def test_wrong_password_increments_counter(self) -> None:
        user = self.add_user()
        result = validate_credentials(self.db, "tech1", "wrong-password")
        self.assertIs(result, LoginFailure.INVALID_CREDENTIALS)
        user = self.reload(user)
        self.assertEqual(user.failed_login_attempts, 1)
        self.assertFalse(user.is_blocked)

    def test_attempt_at_threshold_minus_one_blocks(self) -> None:
        user = self.add_user(failed_login_attempts=FAILED_ATTEMPTS_THRESHOLD - 1)
        result = validate_credentials(self.db, "tech1", "wrong-password")
        self.assertIs(result, LoginFailure.ACCOUNT_BLOCKED)
        user = self.reload(user)
        self.assertEqual(user.failed_login_attempts, FAILED_ATTEMPTS_THRESHOLD)
        self.assertTrue(user.is_blocked)

    def test_consecutive_failures_block_on_the_fifth(self) -> None:
        user = self.add_user()
        results = [
            validate_credentials(self.db, "tech1", "wrong-password")
            for _ in range(FAILED_ATTEMPTS_THRESHOLD)
        ]
        self.assertEqual(
            results,
            [LoginFailure.INVALID_CREDENTIALS] * (FAILED_ATTEMPTS_THRESHOLD - 1)
            + [LoginFailure.ACCOUNT_BLOCKED],
        )
        self.assertTrue(self.reload(user).is_blocked)

    def test_increment_is_computed_by_the_database(self) -> None:
        user = self.add_user(failed_login_attempts=FAILED_ATTEMPTS_THRESHOLD - 2)
        stale = self.SessionTesting()
        try:
            stale_user = stale.query(User).filter(User.username == "tech1").one()
            self.assertEqual(stale_user.failed_login_attempts, FAILED_ATTEMPTS_THRESHOLD - 2)

            first = validate_credentials(self.db, "tech1", "wrong-password")
            # stale still holds the old row in its identity map
            second = validate_credentials(stale, "tech1", "wrong-password")
        finally:
            stale.close()

        self.assertIs(first, LoginFailure.INVALID_CREDENTIALS)
        self.assertIs(second, LoginFailure.ACCOUNT_BLOCKED)
        user = self.reload(user)
        self.assertEqual(user.failed_login_attempts, FAILED_ATTEMPTS_THRESHOLD)
        self.assertTrue(user.is_blocked)

    def test_custom_threshold(self) -> None:
        user = self.add_user(failed_login_attempts=1)
        result = validate_credentials(self.db, "tech1", "wrong-password", max_failed_attempts=2)
        self.assertIs(result, LoginFailure.ACCOUNT_BLOCKED)
        self.assertTrue(self.reload(user).is_blocked)

    def test_other_accounts_are_untouched(self) -> None:
        other = self.add_user("tech2", failed_login_attempts=3)
        self.add_user("tech1")
        validate_credentials(self.db, "tech1", "wrong-password")
        self.assertEqual(self.reload(other).failed_login_attempts, 3)


class TestSuccessfulLogin(DatabaseTestCase):
    """A correct password returns the identity and clears the lockout state."""

    def test_returns_identity(self) -> None:
        user = self.add_user(phone="600123123")
        result = validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        self.assertIsInstance(result, UserIdentity)
        self.assertEqual(result.id, user.id)
        self.assertEqual(result.username, "tech1")
        self.assertEqual(result.role, "COLABORADOR")
        self.assertEqual(result.name, "Tech1")
        self.assertEqual(result.email, "tech1@example.com")
        self.assertEqual(result.phone, "600123123")

    def test_resets_counter(self) -> None:
        user = self.add_user(failed_login_attempts=FAILED_ATTEMPTS_THRESHOLD - 1)
        validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        user = self.reload(user)
        self.assertEqual(user.failed_login_attempts, 0)
        self.assertFalse(user.is_blocked)

    def test_counter_starts_over_after_success(self) -> None:
        user = self.add_user(failed_login_attempts=3)
        validate_credentials(self.db, "tech1", DEFAULT_PASSWORD)
        result = validate_credentials(self.db, "tech1", "wrong-password")
        self.assertIs(result, LoginFailure.INVALID_CREDENTIALS)
        self.assertEqual(self.reload(user).failed_login_attempts, 1)


if __name__ == "__main__":
    unittest.main()
