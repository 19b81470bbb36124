"""Tests for sign-in/sign-out URI generation and callback verification."""

from urllib.parse import parse_qs, parse_qsl, urlparse

import pytest

from logto.auth.models.errors import (
    AuthorizationCallbackError,
    MissingAuthorizationCodeError,
    ProviderError,
    RedirectMismatchError,
    StateMismatchError,
    UriParseError,
)
from logto.auth.models.flow import (
    SignInUriGenerationOptions,
    SignOutUriGenerationOptions,
)
from logto.auth.services.flow import (
    generate_signin_uri,
    generate_signout_uri,
    verify_and_parse_code,
)


def _query(uri: str) -> dict[str, str]:
    return dict(parse_qsl(urlparse(uri).query, keep_blank_values=True))


class TestGenerateSignInUri:
    def setup_method(self):
        self.base_options = dict(
            authorization_endpoint="http://logto.dev/oidc/sign-in",
            client_id="clientId",
            redirect_uri="https://example.com/callback",
            code_challenge="codeChallenge",
            state="state",
        )

    def test_minimal_options(self):
        # Act
        uri = generate_signin_uri(SignInUriGenerationOptions(**self.base_options))

        # Assert
        assert uri.startswith("http://logto.dev/oidc/sign-in?")
        assert _query(uri) == {
            "client_id": "clientId",
            "redirect_uri": "https://example.com/callback",
            "code_challenge": "codeChallenge",
            "code_challenge_method": "S256",
            "response_type": "code",
            "state": "state",
            "scope": "offline_access openid profile",
            "prompt": "consent",
        }

    def test_parameter_order_is_fixed(self):
        # Act
        uri = generate_signin_uri(
            SignInUriGenerationOptions(
                **self.base_options,
                resources=["resource1"],
                interaction_mode="signUp",
            )
        )

        # Assert
        keys = [key for key, _ in parse_qsl(urlparse(uri).query)]
        assert keys == [
            "client_id",
            "redirect_uri",
            "code_challenge",
            "code_challenge_method",
            "state",
            "response_type",
            "scope",
            "prompt",
            "resource",
            "interaction_mode",
        ]

    def test_with_optionals(self):
        # Act
        uri = generate_signin_uri(
            SignInUriGenerationOptions(
                **self.base_options,
                scopes=["email"],
                resources=["resource1", "resource2", "resource1"],
                prompt="login",
            )
        )

        # Assert
        query = _query(uri)
        assert query["scope"] == "email offline_access openid profile"
        assert query["resource"] == "resource1 resource2"
        assert query["prompt"] == "login"
        assert "interaction_mode" not in query

    def test_with_interaction_mode(self):
        # Act
        uri = generate_signin_uri(
            SignInUriGenerationOptions(**self.base_options, interaction_mode="signUp")
        )

        # Assert
        query = _query(uri)
        assert query["interaction_mode"] == "signUp"
        assert query["prompt"] == "consent"
        assert "resource" not in query

    def test_explicit_empty_prompt_is_kept(self):
        # Act
        uri = generate_signin_uri(
            SignInUriGenerationOptions(
                **self.base_options, prompt="", interaction_mode=""
            )
        )

        # Assert
        query = _query(uri)
        assert query["prompt"] == ""
        assert query["interaction_mode"] == ""

    def test_empty_resources_are_omitted(self):
        # Act
        uri = generate_signin_uri(
            SignInUriGenerationOptions(**self.base_options, resources=[])
        )

        # Assert
        assert "resource" not in _query(uri)

    def test_existing_query_is_preserved(self):
        # Arrange
        options = dict(
            self.base_options,
            authorization_endpoint="https://logto.dev/oidc/auth?tenant=default",
        )

        # Act
        uri = generate_signin_uri(SignInUriGenerationOptions(**options))

        # Assert
        query = parse_qs(urlparse(uri).query)
        assert query["tenant"] == ["default"]
        assert query["client_id"] == ["clientId"]

    @pytest.mark.parametrize(
        "endpoint",
        [
            "not a uri",
            "http://[broken/sign-in",
            "http://",
            "http:///oidc/sign-in",
            "https://exa mple.com/sign-in",
            "http://host:notaport/x",
            "https://logto.dev/sign-in\n",
        ],
    )
    def test_invalid_endpoint_raises(self, endpoint):
        # Arrange
        options = dict(self.base_options, authorization_endpoint=endpoint)

        # Act & Assert
        with pytest.raises(UriParseError):
            generate_signin_uri(SignInUriGenerationOptions(**options))


class TestGenerateSignOutUri:
    def test_without_redirect(self):
        # Act
        uri = generate_signout_uri(
            SignOutUriGenerationOptions(
                end_session_endpoint="http://logto.dev/oidc/session/end",
                client_id="clientId",
            )
        )

        # Assert
        assert uri == "http://logto.dev/oidc/session/end?client_id=clientId"

    def test_with_redirect(self):
        # Act
        uri = generate_signout_uri(
            SignOutUriGenerationOptions(
                end_session_endpoint="http://logto.dev/oidc/session/end",
                client_id="clientId",
                post_logout_redirect_uri="http://example.com/callback",
            )
        )

        # Assert
        assert uri == (
            "http://logto.dev/oidc/session/end?client_id=clientId"
            "&post_logout_redirect_uri=http%3A%2F%2Fexample.com%2Fcallback"
        )

    def test_explicit_empty_redirect_is_kept(self):
        # Act
        uri = generate_signout_uri(
            SignOutUriGenerationOptions(
                end_session_endpoint="http://logto.dev/oidc/session/end",
                client_id="clientId",
                post_logout_redirect_uri="",
            )
        )

        # Assert
        assert uri == (
            "http://logto.dev/oidc/session/end?client_id=clientId"
            "&post_logout_redirect_uri="
        )

    @pytest.mark.parametrize(
        "endpoint", ["/oidc/session/end", "https://", "http://logto.dev:80a/end"]
    )
    def test_invalid_endpoint_raises(self, endpoint):
        with pytest.raises(UriParseError):
            generate_signout_uri(
                SignOutUriGenerationOptions(
                    end_session_endpoint=endpoint, client_id="clientId"
                )
            )


class TestVerifyAndParseCode:
    """Test callback URI verification and code extraction."""

    def setup_method(self):
        self.redirect_uri = "http://example.com/callback"

    def test_valid_callback_returns_code(self):
        # Act
        code = verify_and_parse_code(
            "http://example.com/callback?state=123456&code=abcdef",
            self.redirect_uri,
            "123456",
        )

        # Assert
        assert code == "abcdef"

    def test_custom_scheme_callback(self):
        # Act
        code = verify_and_parse_code(
            "io.logto.app://callback?state=123456&code=abcdef",
            "io.logto.app://callback",
            "123456",
        )

        # Assert
        assert code == "abcdef"

    def test_redirect_mismatch(self):
        with pytest.raises(RedirectMismatchError):
            verify_and_parse_code(
                "http://example.com/callback?state=123456&code=abcdef",
                "http://example.com/redirect",
                "123456",
            )

    def test_missing_state(self):
        with pytest.raises(StateMismatchError):
            verify_and_parse_code(
                "http://example.com/callback?code=abcdef", self.redirect_uri, "123456"
            )

    def test_wrong_state(self):
        with pytest.raises(StateMismatchError):
            verify_and_parse_code(
                "http://example.com/callback?state=654321&code=abcdef",
                self.redirect_uri,
                "123456",
            )

    def test_missing_code(self):
        with pytest.raises(MissingAuthorizationCodeError):
            verify_and_parse_code(
                "http://example.com/callback?state=123456", self.redirect_uri, "123456"
            )

    def test_provider_error_carries_raw_value(self):
        # Act
        with pytest.raises(ProviderError) as exc_info:
            verify_and_parse_code(
                "http://example.com/callback?state=123456&code=abcdef"
                "&error=access_denied&error_description=User+denied",
                self.redirect_uri,
                "123456",
            )

        # Assert
        assert exc_info.value.error == "access_denied"
        assert exc_info.value.error_description == "User denied"

    def test_provider_error_wins_over_state_mismatch(self):
        with pytest.raises(ProviderError):
            verify_and_parse_code(
                "http://example.com/callback?state=wrong&error=server_error",
                self.redirect_uri,
                "123456",
            )

    def test_redirect_mismatch_checked_before_parsing(self):
        with pytest.raises(RedirectMismatchError):
            verify_and_parse_code(
                "http://[broken?state=123456&code=abcdef",
                self.redirect_uri,
                "123456",
            )

    def test_malformed_callback_raises_parse_error(self):
        with pytest.raises(UriParseError):
            verify_and_parse_code(
                "http://[broken?state=123456&code=abcdef",
                "http://[broken",
                "123456",
            )

    def test_callback_errors_share_base_class(self):
        with pytest.raises(AuthorizationCallbackError):
            verify_and_parse_code(
                "http://example.com/callback?state=123456", self.redirect_uri, "123456"
            )
