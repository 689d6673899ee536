"""Recognise AWS credential and connectivity failures in exception chains."""

from collections.abc import Iterator

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    ProfileNotFound,
)

# Error codes AWS returns when it refuses the signing credentials.
REJECTED_CREDENTIAL_CODES = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "ExpiredToken",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "InvalidSignatureException",
        "RequestExpired",
        # spellchecker:ignore-next-line
        "UnrecognizedClientException",
    }
)

CREDENTIAL_HINT = "check the credentials for the AWS profile"
ENDPOINT_HINT = "check the network connection and --region"


def describe_error(exc: BaseException) -> str:
    """Return a one-line, user-facing description of a failure.

    AWS credential and endpoint failures get a short hint appended.
    """
    message = " ".join(str(exc).split()) or type(exc).__name__
    if is_credential_failure(exc):
        return f"{message} ({CREDENTIAL_HINT})"
    if is_endpoint_failure(exc):
        return f"{message} ({ENDPOINT_HINT})"
    return message


def is_credential_failure(exc: BaseException) -> bool:
    """Return true when AWS credentials were missing or rejected anywhere in the chain."""
    for cause in iter_causes(exc):
        if isinstance(cause, (NoCredentialsError, ProfileNotFound)):
            return True
        if isinstance(cause, ClientError) and _error_code(cause) in REJECTED_CREDENTIAL_CODES:
            return True
    return False


def is_endpoint_failure(exc: BaseException) -> bool:
    """Return true when an AWS endpoint could not be reached."""
    return any(isinstance(cause, EndpointConnectionError) for cause in iter_causes(exc))


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield the exception, then each explicit or implicit cause once."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))
