"""
Validate Token Use Case

Checks an access token by its signature and expiry alone. The issued-token
store is not consulted, so a token stays valid until it expires.
"""

from libs.result import Result, Return
from src.api.utils.jwt import decode_user_claims
from .dtos import ValidateTokenResponse


class ValidateTokenUseCase:
    async def execute(self, token: str) -> Result[ValidateTokenResponse]:
        claims = decode_user_claims(token) if token else None
        if claims is None:
            return Return.ok(ValidateTokenResponse(is_valid=False))
        return Return.ok(ValidateTokenResponse(is_valid=True, claims=claims))
