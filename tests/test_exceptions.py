"""
Tests for database error translation and the error body.
"""

from postgrest.exceptions import APIError

from emis_party.core.exceptions import ConflictError, ValidationFailed, error_body, translate_api_error


class TestTranslateApiError:
    def test_unique_violation(self):
        error = APIError({
            "code": "23505",
            "message": "duplicate key value violates unique constraint",
            "details": "Key (type, name, phone, email)=(Other, A, 1, a@b.co) already exists.",
        })
        translated = translate_api_error(error)
        assert isinstance(translated, ConflictError)
        assert translated.status_code == 409
        assert [e["field"] for e in translated.errors] == ["type", "name", "phone", "email"]

    def test_unique_violation_columns_are_camelized(self):
        error = APIError({"code": "23505", "message": "dup", "details": "Key (physical_address)=(x) already exists."})
        assert translate_api_error(error).errors[0]["field"] == "physicalAddress"

    def test_unique_violation_without_details(self):
        error = APIError({"code": "23505", "message": "dup"})
        translated = translate_api_error(error, ("name",))
        assert [e["field"] for e in translated.errors] == ["name"]

    def test_foreign_key_violation(self):
        error = APIError({"code": "23503", "message": "violates foreign key constraint"})
        translated = translate_api_error(error)
        assert isinstance(translated, ValidationFailed)
        assert translated.status_code == 422

    def test_data_exception(self):
        error = APIError({"code": "22P02", "message": 'invalid input syntax for type json'})
        translated = translate_api_error(error)
        assert isinstance(translated, ValidationFailed)
        assert translated.status_code == 422
        assert translated.errors[0]["message"] == "invalid input syntax for type json"

    def test_invalid_timestamp(self):
        error = APIError({"code": "22007", "message": 'invalid input syntax for type timestamp with time zone: "bogus"'})
        assert translate_api_error(error).status_code == 422

    def test_malformed_request(self):
        error = APIError({"code": "PGRST100", "message": "failed to parse filter"})
        assert translate_api_error(error).status_code == 422

    def test_other_errors(self):
        error = APIError({"code": "XX000", "message": "boom"})
        translated = translate_api_error(error)
        assert translated.status_code == 500
        assert translated.detail == "boom"


class TestErrorBody:
    def test_defaults_to_status_phrase(self):
        assert error_body(404) == {
            "status": 404,
            "code": "NOT_FOUND",
            "name": "Not Found",
            "message": "Not Found",
            "errors": [],
        }

    def test_code(self):
        body = error_body(422, "Validation failed", [{"field": "name", "message": "x", "type": "missing"}])
        assert body["status"] == 422
        assert body["code"] == body["name"].upper().replace(" ", "_")
        assert body["errors"][0]["field"] == "name"


class TestDatabaseErrorResponses:
    """Errors raised by the database reach the caller as JSON bodies."""

    def test_filter_value_of_wrong_type(self, client, supabase):
        supabase.fail("parties", APIError({"code": "22P02", "message": "invalid input syntax for type json"}))
        response = client.get("/v1/parties?filter[location]=x")
        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Invalid value"
        assert body["errors"][0]["type"] == "value_error"

    def test_unexpected_database_error(self, client, supabase):
        supabase.fail("parties", APIError({"code": "XX000", "message": "boom"}))
        response = client.get("/v1/parties")
        assert response.status_code == 500
        assert response.json()["message"] == "boom"
