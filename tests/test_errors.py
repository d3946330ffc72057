# tests/test_errors.py
from bjjconnect.core.errors import _parse_detail, error_envelope
from bjjconnect.core.exceptions import Forbidden, NotFound, SlotTaken


class TestDomainErrors:
    def test_default_codes_and_status(self):
        assert NotFound("x").status_code == 404
        assert Forbidden("x").status_code == 403
        assert SlotTaken("x").status_code == 400
        assert SlotTaken("x").code == "slot_taken"

    def test_custom_code_wins(self):
        assert NotFound("Session not found", "session_not_found").code == "session_not_found"

    def test_dict_detail_is_unpacked(self):
        detail = {"message": "Instructor not found", "code": "instructor_not_found"}
        assert _parse_detail(detail) == ("Instructor not found", "instructor_not_found")


class TestEnvelope:
    def test_error_envelope(self):
        assert error_envelope("Boom", "boom") == {
            "success": False,
            "message": "Boom",
            "error": "boom",
        }

    def test_snake_case_detail_becomes_message(self):
        assert _parse_detail("invalid_token") == ("Invalid token", "invalid_token")
