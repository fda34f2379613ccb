"""Tests for field extraction helpers."""

from submission_quality.field_extractor import (
    FieldRole,
    email_domain,
    extract_email,
    extract_name,
    flatten_text,
    has_field,
    has_filled_field,
    has_selection,
    is_valid_email,
    string_text,
)


class TestEmail:
    def test_email_field_wins_even_when_invalid(self):
        submission = {"work_email": "not-an-email", "other": "jane@example.com"}
        assert extract_email(submission) == "not-an-email"

    def test_first_email_field_in_order(self):
        submission = {"email": "a@one.com", "backup_email": "b@two.com"}
        assert extract_email(submission) == "a@one.com"

    def test_falls_back_to_valid_value(self):
        submission = {"contact": "hello", "reach_me": "jane@example.com"}
        assert extract_email(submission) == "jane@example.com"

    def test_list_email_field_skipped(self):
        submission = {"emails": ["a@b.com"], "note": "jane@example.com"}
        assert extract_email(submission) == "jane@example.com"

    def test_no_email(self):
        assert extract_email({"name": "Jane"}) == ""
        assert extract_email({}) == ""

    def test_validation(self):
        assert is_valid_email("jane@example.com")
        assert is_valid_email("jane.doe+forms@mail.example.co.uk")
        assert not is_valid_email("jane@localhost")
        assert not is_valid_email(" jane@example.com")
        assert not is_valid_email("jane@example.com ")
        assert not is_valid_email("")
        assert not is_valid_email(["jane@example.com"])

    def test_domain_lowercased(self):
        assert email_domain("Jane@Example.COM") == "example.com"
        assert email_domain("a@b@c.org") == "c.org"
        assert email_domain("no-at-sign") == ""


class TestName:
    def test_preferred_field_order(self):
        submission = {"full_name": "Jane Doe", "name": "J"}
        assert extract_name(submission) == "J"

    def test_trimmed(self):
        assert extract_name({"your_name": "  Jane  "}) == "Jane"

    def test_substring_fallback(self):
        submission = {"contact_name": "Jane Doe"}
        assert extract_name(submission) == "Jane Doe"

    def test_empty_preferred_skipped(self):
        submission = {"name": "   ", "last_name": "Doe"}
        assert extract_name(submission) == "Doe"

    def test_no_name(self):
        assert extract_name({"email": "a@b.com"}) == ""


class TestFieldPresence:
    def test_has_field_length_is_strict(self):
        assert not has_field({"phone": "12345"}, FieldRole.PHONE, 5)
        assert has_field({"phone": "123456"}, FieldRole.PHONE, 5)

    def test_has_field_trims(self):
        assert not has_field({"phone": "  12345  "}, FieldRole.PHONE, 5)

    def test_has_field_case_insensitive(self):
        assert has_field({"Mobile_Number": "555-123-4567"}, FieldRole.PHONE, 5)

    def test_lists_never_match_has_field(self):
        assert not has_field({"company": ["Acme Corp"]}, FieldRole.COMPANY, 2)

    def test_has_filled_field_accepts_lists(self):
        assert has_filled_field({"best_time": ["Morning"]}, FieldRole.CONTACT_PREFERENCE)
        assert not has_filled_field({"best_time": []}, FieldRole.CONTACT_PREFERENCE)
        assert not has_filled_field({"best_time": ""}, FieldRole.CONTACT_PREFERENCE)

    def test_has_selection(self):
        assert has_selection({"services": ["SEO"]})
        assert not has_selection({"services": []})
        assert not has_selection({"services": "SEO"})


class TestText:
    def test_flatten_joins_lists(self):
        submission = {"name": "Jane", "services": ["SEO", "Hosting"]}
        assert flatten_text(submission) == "Jane SEO, Hosting"

    def test_flatten_keeps_numbers(self):
        assert flatten_text({"seats": 3, "name": "Jane"}) == "3 Jane"

    def test_string_text_ignores_lists(self):
        submission = {"name": "Jane", "services": ["SEO"], "message": "Hi"}
        assert string_text(submission) == "Jane Hi"
