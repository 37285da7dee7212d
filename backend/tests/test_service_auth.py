"""Tests for Firebase ID token verification."""
from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from pixcraft.core.errors import Unauthenticated
from pixcraft.services.auth import FirebaseTokenVerifier, bearer_token


def _request(headers: dict[str, str]) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "POST", "path": "/", "headers": raw})


@pytest.fixture
def verifier() -> FirebaseTokenVerifier:
    return FirebaseTokenVerifier(project_id="test-project", request=MagicMock())


class TestVerify:
    def test_returns_uid(self, verifier: FirebaseTokenVerifier) -> None:
        with patch("pixcraft.services.auth.id_token.verify_firebase_token", return_value={"user_id": "u1", "sub": "u1"}) as mock_verify:
            assert verifier.verify("token-abc") == "u1"
        assert mock_verify.call_args.kwargs["audience"] == "test-project"

    def test_falls_back_to_sub_claim(self, verifier: FirebaseTokenVerifier) -> None:
        with patch("pixcraft.services.auth.id_token.verify_firebase_token", return_value={"sub": "u2"}):
            assert verifier.verify("token-abc") == "u2"

    def test_empty_token(self, verifier: FirebaseTokenVerifier) -> None:
        with pytest.raises(Unauthenticated):
            verifier.verify("")

    def test_invalid_token(self, verifier: FirebaseTokenVerifier) -> None:
        with patch("pixcraft.services.auth.id_token.verify_firebase_token", side_effect=ValueError("Token expired")):
            with pytest.raises(Unauthenticated) as exc_info:
                verifier.verify("expired")
        assert exc_info.value.status_code == 401

    def test_claims_without_uid(self, verifier: FirebaseTokenVerifier) -> None:
        with patch("pixcraft.services.auth.id_token.verify_firebase_token", return_value={}):
            with pytest.raises(Unauthenticated):
                verifier.verify("token-abc")


class TestBearerToken:
    def test_extracts_token(self) -> None:
        assert bearer_token(_request({"Authorization": "Bearer abc.def"})) == "abc.def"

    def test_scheme_is_case_insensitive(self) -> None:
        assert bearer_token(_request({"Authorization": "bearer xyz"})) == "xyz"

    def test_missing_header(self) -> None:
        assert bearer_token(_request({})) == ""

    def test_other_scheme(self) -> None:
        assert bearer_token(_request({"Authorization": "Basic dXNlcg=="})) == ""
