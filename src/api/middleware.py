"""
Operator metadata middleware.

Turns a valid bearer access token into the x-md-operator header so that route
dependencies and downstream services read identity and authority from one
place, without re-resolving authority.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.api.utils.jwt import decode_user_claims
from src.api.utils.operator_metadata import (
    OPERATOR_HEADER,
    OperatorMetadata,
    encode_operator_metadata,
)

logger = logging.getLogger(__name__)

_OPERATOR_HEADER_RAW = OPERATOR_HEADER.encode("latin-1")


def _bearer_token(request: Request):
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class OperatorMetadataMiddleware(BaseHTTPMiddleware):
    """
    A valid bearer token always wins over a client-supplied x-md-operator.

    Without one, a client-supplied header is dropped unless trust_header is
    set (deployments behind a trusted internal mesh).
    """

    def __init__(self, app, trust_header: bool = False):
        super().__init__(app)
        self.trust_header = trust_header

    async def dispatch(self, request: Request, call_next) -> Response:
        headers = [
            (key, value)
            for key, value in request.scope["headers"]
            if key.lower() != _OPERATOR_HEADER_RAW
        ]
        supplied = len(headers) != len(request.scope["headers"])

        token = _bearer_token(request)
        claims = decode_user_claims(token) if token else None

        if claims is not None:
            value = encode_operator_metadata(OperatorMetadata.from_claims(claims))
            headers.append((_OPERATOR_HEADER_RAW, value.encode("latin-1")))
            request.scope["headers"] = headers
        elif supplied and not self.trust_header:
            logger.warning(f"Dropping untrusted {OPERATOR_HEADER} header on {request.url.path}")
            request.scope["headers"] = headers

        return await call_next(request)
