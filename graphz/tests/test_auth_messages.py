"""
Tests for the auth provider error vocabulary.
"""

import pytest

from graphz.auth import AuthError, AuthErrorCode, auth_error_message, parse_auth_error_code


class TestAuthErrorMessages:
    @pytest.mark.parametrize(
        "code,message",
        [
            ("auth/invalid-email", "Invalid email address."),
            ("auth/user-disabled", "This account has been disabled."),
            ("auth/user-not-found", "No account found with this email."),
            ("auth/wrong-password", "Incorrect password."),
            ("auth/email-already-in-use", "Email already in use."),
            ("auth/weak-password", "Password should be at least 6 characters."),
        ],
    )
    def test_known_codes(self, code, message):
        assert auth_error_message(code) == message

    def test_bare_code_accepted(self):
        assert parse_auth_error_code("wrong-password") is AuthErrorCode.WRONG_PASSWORD

    @pytest.mark.parametrize("code", ["auth/network-request-failed", "network-failure", "AUTH/NETWORK-FAILURE"])
    def test_network_failure_aliases(self, code):
        assert parse_auth_error_code(code) is AuthErrorCode.NETWORK_FAILURE

    @pytest.mark.parametrize("code", [None, "", "auth/quota-exceeded", "something else"])
    def test_unknown_falls_back(self, code):
        assert auth_error_message(code) == "Authentication failed. Please try again."

    def test_every_code_has_a_message(self):
        for code in AuthErrorCode:
            assert auth_error_message(code)


class TestAuthError:
    def test_carries_normalised_code_and_message(self):
        err = AuthError("auth/weak-password")
        assert err.code is AuthErrorCode.WEAK_PASSWORD
        assert str(err) == "Password should be at least 6 characters."

    def test_explicit_message_wins(self):
        err = AuthError("auth/user-not-found", "custom")
        assert str(err) == "custom"
