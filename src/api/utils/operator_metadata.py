"""
Operator Metadata

Compact snapshot of the caller's identity and resolved authority, carried
between internal services in the x-md-operator header so that receivers never
re-run authority resolution.

Wire format: msgpack map with short keys, base64 without padding.
"""

import base64
import binascii
import logging
from typing import Dict, Mapping, Optional

import msgpack
from fastapi import status
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from libs.result import Error
from src.domain.entities import DataScope
from src.domain.viewer import UserViewer

logger = logging.getLogger(__name__)

OPERATOR_HEADER = "x-md-operator"
# Reserved for signed metadata; not read by the resolution path
SIGNATURE_HEADER = "x-md-signature"


class OperatorMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: int = Field(alias="uid")
    username: str = Field(default="", alias="un")
    tenant_id: int = Field(default=0, alias="tid")
    org_unit_id: int = Field(default=0, alias="ouid")
    is_platform_admin: bool = Field(default=False, alias="pad")
    is_tenant_admin: bool = Field(default=False, alias="tad")
    data_scope: Optional[DataScope] = Field(default=None, alias="ds")

    @classmethod
    def from_claims(cls, claims) -> "OperatorMetadata":
        """Build from decoded access-token claims (UserTokenClaims)"""
        return cls(
            user_id=claims.user_id,
            username=claims.username,
            tenant_id=claims.tenant_id,
            org_unit_id=claims.org_unit_id,
            is_platform_admin=claims.is_platform_admin,
            is_tenant_admin=claims.is_tenant_admin,
            data_scope=claims.data_scope,
        )

    def to_viewer(self) -> UserViewer:
        return UserViewer(
            uid=self.user_id,
            tid=self.tenant_id,
            ouid=self.org_unit_id,
            is_platform_admin=self.is_platform_admin,
            data_scope=self.data_scope,
        )


class OperatorMetadataError(Exception):
    """Base class for operator metadata decoding failures (all map to 401)"""

    code = "UNAUTHORIZED"
    message = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: Optional[str] = None):
        self.error = Error(self.code, message or self.message)
        super().__init__(self.error.message)


class MissingOperatorHeaderError(OperatorMetadataError):
    code = "MISSING_OPERATOR_HEADER"
    message = "no operator metadata"


class MalformedOperatorHeaderError(OperatorMetadataError):
    code = "MALFORMED_OPERATOR_HEADER"
    message = "operator metadata is not valid base64"


class InvalidOperatorHeaderError(OperatorMetadataError):
    code = "INVALID_OPERATOR_HEADER"
    message = "operator metadata could not be decoded"


def encode_operator_metadata(metadata: OperatorMetadata) -> str:
    packed = msgpack.packb(metadata.model_dump(mode="json", by_alias=True))
    return base64.b64encode(packed).decode("ascii").rstrip("=")


def decode_operator_metadata(value: str) -> OperatorMetadata:
    """
    Decode a header value produced by encode_operator_metadata

    Raises:
        MalformedOperatorHeaderError: value is not base64
        InvalidOperatorHeaderError: payload is not a valid metadata struct
    """
    try:
        raw = base64.b64decode(value + "=" * (-len(value) % 4), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedOperatorHeaderError() from e

    try:
        data = msgpack.unpackb(raw)
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise InvalidOperatorHeaderError() from e

    if not isinstance(data, dict):
        raise InvalidOperatorHeaderError()
    try:
        return OperatorMetadata.model_validate(data)
    except ValidationError as e:
        raise InvalidOperatorHeaderError() from e


def from_headers(headers: Mapping[str, str]) -> OperatorMetadata:
    """
    Read operator metadata from request headers, failing closed

    Raises:
        MissingOperatorHeaderError: header absent or empty
        MalformedOperatorHeaderError / InvalidOperatorHeaderError: bad value
    """
    value = headers.get(OPERATOR_HEADER)
    if not value:
        raise MissingOperatorHeaderError()
    return decode_operator_metadata(value)


def from_operator_metadata(headers: Mapping[str, str]) -> Optional[OperatorMetadata]:
    """Like from_headers, but returns None instead of raising"""
    try:
        return from_headers(headers)
    except OperatorMetadataError as e:
        logger.debug(f"No operator metadata: {e.error.code}")
        return None


def new_operator_headers(metadata: OperatorMetadata) -> Dict[str, str]:
    """Headers an internal client attaches to a downstream call"""
    return {OPERATOR_HEADER: encode_operator_metadata(metadata)}
