import base64

import msgpack
import pytest
from pydantic import ValidationError

from src.api.utils.jwt import UserTokenClaims
from src.api.utils.operator_metadata import (
    OPERATOR_HEADER,
    InvalidOperatorHeaderError,
    MalformedOperatorHeaderError,
    MissingOperatorHeaderError,
    OperatorMetadata,
    decode_operator_metadata,
    encode_operator_metadata,
    from_headers,
    from_operator_metadata,
    new_operator_headers,
)
from src.domain.entities import DataScope


@pytest.fixture
def metadata():
    return OperatorMetadata(
        user_id=123,
        username="root",
        tenant_id=456,
        org_unit_id=789,
        is_platform_admin=True,
        data_scope=DataScope.UNIT_AND_CHILD,
    )


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode().rstrip("=")


def test_round_trip_through_headers(metadata):
    headers = new_operator_headers(metadata)

    assert list(headers) == [OPERATOR_HEADER]
    assert from_headers(headers) == metadata


def test_encoded_value_has_no_padding(metadata):
    assert not encode_operator_metadata(metadata).endswith("=")


def test_round_trip_without_data_scope():
    metadata = OperatorMetadata(user_id=1)

    decoded = decode_operator_metadata(encode_operator_metadata(metadata))

    assert decoded == metadata
    assert decoded.data_scope is None


def test_padded_value_also_decodes(metadata):
    value = encode_operator_metadata(metadata)
    padded = value + "=" * (-len(value) % 4)

    assert decode_operator_metadata(padded) == metadata


def test_missing_header_fails_closed():
    with pytest.raises(MissingOperatorHeaderError) as exc:
        from_headers({})
    assert exc.value.error.code == "MISSING_OPERATOR_HEADER"

    with pytest.raises(MissingOperatorHeaderError):
        from_headers({OPERATOR_HEADER: ""})


def test_non_base64_header_is_malformed():
    with pytest.raises(MalformedOperatorHeaderError) as exc:
        decode_operator_metadata("!!not base64!!")
    assert exc.value.error.code == "MALFORMED_OPERATOR_HEADER"


@pytest.mark.parametrize(
    "raw",
    [
        b"hello world",  # trailing bytes after a msgpack value
        msgpack.packb([1, 2, 3]),  # not a map
        msgpack.packb({"un": "root"}),  # no user id
        msgpack.packb({"uid": 1, "ds": "EVERYTHING"}),  # unknown scope
    ],
)
def test_undecodable_payload_is_invalid(raw):
    with pytest.raises(InvalidOperatorHeaderError) as exc:
        decode_operator_metadata(b64(raw))
    assert exc.value.error.code == "INVALID_OPERATOR_HEADER"


@pytest.mark.parametrize("headers", [{}, {OPERATOR_HEADER: "@@@"}, {OPERATOR_HEADER: b64(b"\x93\x01")}])
def test_lenient_reader_returns_none(headers):
    assert from_operator_metadata(headers) is None


def test_from_claims_and_viewer():
    claims = UserTokenClaims(
        user_id=5,
        username="alice",
        tenant_id=3,
        org_unit_id=9,
        data_scope=DataScope.UNIT_AND_CHILD,
        is_tenant_admin=True,
        roles=["tenant_admin"],
    )

    metadata = OperatorMetadata.from_claims(claims)
    viewer = metadata.to_viewer()

    assert metadata.user_id == 5
    assert metadata.is_tenant_admin is True
    assert viewer.user_id() == 5
    assert viewer.tenant() == (3, True)
    assert viewer.get_org_unit_id() == 9
    assert viewer.is_tenant_admin() is True


def test_metadata_is_immutable(metadata):
    with pytest.raises(ValidationError):
        metadata.user_id = 1
