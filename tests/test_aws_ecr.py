"""Tests for ECR token retrieval and decoding."""

import base64
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from conftest import ALICE_TOKEN
from ecs_local.core.aws.ecr import EcrRegistryAuth, decode_authorization_token
from ecs_local.core.models import AuthorizationToken
from ecs_local.errors import ExitCode, RegistryAuthError


def _token(payload: str) -> AuthorizationToken:
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return AuthorizationToken(token=encoded, proxy_endpoint="https://registry.example.com")


def test_decode_token() -> None:
    auth = decode_authorization_token(ALICE_TOKEN)

    assert auth.username == "alice"
    assert auth.password == "s3cret"
    assert auth.registry == ALICE_TOKEN.proxy_endpoint
    assert auth.as_docker_auth_config() == {
        "username": "alice",
        "password": "s3cret",
        "serveraddress": ALICE_TOKEN.proxy_endpoint,
    }


@pytest.mark.parametrize("payload", ["alice", "alice:s3cret:extra", ":s3cret", "alice:", ""])
def test_malformed_payload_is_rejected(payload: str) -> None:
    with pytest.raises(RegistryAuthError, match="Malformed registry token"):
        decode_authorization_token(_token(payload))


def test_invalid_base64_is_rejected() -> None:
    token = AuthorizationToken(token="not base64!", proxy_endpoint="https://registry.example.com")

    with pytest.raises(RegistryAuthError, match="Malformed registry token"):
        decode_authorization_token(token)


def test_registry_auth_errors_map_to_runtime_exit_code() -> None:
    assert RegistryAuthError.exit_code is ExitCode.RUNTIME_ERROR


def test_get_authorization_token_reads_first_entry() -> None:
    session = MagicMock()
    session.client.return_value.get_authorization_token.return_value = {
        "authorizationData": [
            {"authorizationToken": ALICE_TOKEN.token, "proxyEndpoint": ALICE_TOKEN.proxy_endpoint}
        ]
    }

    token = EcrRegistryAuth(session).get_authorization_token()

    session.client.assert_called_once_with("ecr")
    assert token == ALICE_TOKEN


def test_get_authorization_token_without_data() -> None:
    session = MagicMock()
    session.client.return_value.get_authorization_token.return_value = {"authorizationData": []}

    with pytest.raises(RegistryAuthError, match="no authorization data"):
        EcrRegistryAuth(session).get_authorization_token()


def test_get_authorization_token_client_error() -> None:
    session = MagicMock()
    session.client.return_value.get_authorization_token.side_effect = ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
        "GetAuthorizationToken",
    )

    with pytest.raises(RegistryAuthError, match="Failed to authenticate with ECR"):
        EcrRegistryAuth(session).get_authorization_token()
