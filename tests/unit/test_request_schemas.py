import pytest

from pdfhub.api.schemas import (
    CompressRequest,
    FederatedLoginRequest,
    RegisterRequest,
    RotateRequest,
    SplitRequest,
    WatermarkRequest,
    parse_request,
)
from pdfhub.exceptions import ValidationError


class TestPages:
    @pytest.mark.parametrize(
        "pages", [[1, 3], ["1", "3"], "1,3", " 1 , 3 ", "[1, 3]", ["1,3"]]
    )
    def test_accepts_list_json_and_comma_forms(self, pages: object) -> None:
        assert parse_request(SplitRequest, {"pages": pages}).pages == [1, 3]

    def test_missing_pages_is_reported(self) -> None:
        with pytest.raises(ValidationError, match="pages"):
            parse_request(SplitRequest, {})

    def test_empty_pages_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="pages"):
            parse_request(SplitRequest, {"pages": ""})

    def test_non_numeric_page_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="pages"):
            parse_request(SplitRequest, {"pages": "1,two"})

    def test_broken_json_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="pages"):
            parse_request(SplitRequest, {"pages": "[1,"})


class TestRotateRequest:
    def test_angle_from_form_string(self) -> None:
        body = parse_request(RotateRequest, {"pages": "1", "angle": "90"})
        assert body.angle == 90

    def test_angle_is_required(self) -> None:
        with pytest.raises(ValidationError, match="angle"):
            parse_request(RotateRequest, {"pages": "1"})


class TestCompressRequest:
    def test_default_quality(self) -> None:
        assert parse_request(CompressRequest, {}).image_quality == 80

    @pytest.mark.parametrize("quality", ["0", "101"])
    def test_quality_bounds(self, quality: str) -> None:
        with pytest.raises(ValidationError, match="imageQuality"):
            parse_request(CompressRequest, {"imageQuality": quality})


class TestWatermarkRequest:
    def test_defaults(self) -> None:
        body = parse_request(WatermarkRequest, {"text": "DRAFT"})
        assert body.font_size == 50
        assert body.angle == 45

    def test_text_is_required(self) -> None:
        with pytest.raises(ValidationError, match="text"):
            parse_request(WatermarkRequest, {"fontSize": "12"})


class TestAuthRequests:
    def test_register_uses_camel_case_fields(self) -> None:
        body = parse_request(
            RegisterRequest,
            {"fullName": "Jane Doe", "email": "jane@example.com", "password": " spaced "},
        )
        assert body.full_name == "Jane Doe"
        assert body.password == " spaced "

    def test_none_payload_is_reported_as_missing_fields(self) -> None:
        with pytest.raises(ValidationError, match="fullName"):
            parse_request(RegisterRequest, None)

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [({"token": "id-token"}, "id-token"), ({"accessToken": "fb-token"}, "fb-token"), ({}, "")],
    )
    def test_federated_assertion(self, payload: dict, expected: str) -> None:
        assert parse_request(FederatedLoginRequest, payload).assertion == expected
