"""ECR registry authentication."""

import base64
import binascii
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_local.core.interfaces import RegistryAuthClient
from ecs_local.core.models import AuthorizationToken, RegistryAuth
from ecs_local.errors import RegistryAuthError


class EcrRegistryAuth(RegistryAuthClient):
    """Issue registry tokens through the ECR API."""

    def __init__(self, session: Any) -> None:
        self._session = session

    def get_authorization_token(self) -> AuthorizationToken:
        ecr = self._session.client("ecr")
        try:
            # spellchecker:ignore-next-line
            response = ecr.get_authorization_token()
        except (ClientError, BotoCoreError) as exc:
            raise RegistryAuthError(f"Failed to authenticate with ECR: {exc}") from exc

        # spellchecker:ignore-next-line
        auth_data = response.get("authorizationData") or []
        if not auth_data:
            raise RegistryAuthError("ECR returned no authorization data.")
        return AuthorizationToken(
            token=auth_data[0]["authorizationToken"],
            proxy_endpoint=auth_data[0]["proxyEndpoint"],
        )


def decode_authorization_token(token: AuthorizationToken) -> RegistryAuth:
    """Decode a base64 ``user:password`` registry token.

    Args:
        token: Raw authorization data from the registry.

    Returns:
        The decoded registry credentials.

    Raises:
        RegistryAuthError: The token is not valid base64 or does not contain
            exactly one non-empty username and password.
    """
    try:
        payload = base64.b64decode(token.token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise RegistryAuthError(f"Malformed registry token: {exc}") from exc

    parts = payload.split(":")
    if len(parts) != 2 or not all(parts):
        raise RegistryAuthError(
            "Malformed registry token: expected a single username:password pair."
        )

    username, password = parts
    return RegistryAuth(username=username, password=password, registry=token.proxy_endpoint)
