"""Tests for reply_parser.parse_reply and the fenced-block extractor."""

import json

from app.services.prompt import NO_ERRORS_REPLY
from app.services.reply_parser import extract_fenced_json, parse_reply

_TEXT = "We provide high-quality implantss for patients."


def _fenced(payload) -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"```json\n{body}\n```"


_ONE_ERROR = [
    {
        "errorWord": "implantss",
        "originalSentence": _TEXT,
        "correctedSentence": "We provide high-quality implants for patients.",
        "offset": 24,
        "message": "Từ bị sai chính tả.",
    }
]


class TestExtractFencedJson:
    def test_extracts_body(self):
        assert extract_fenced_json('```json\n[1, 2]\n```') == "[1, 2]"

    def test_surrounding_prose_is_ignored(self):
        reply = 'Here you go:\n```json\n[]\n```\nHope this helps.'
        assert extract_fenced_json(reply) == "[]"

    def test_plain_fence_without_marker_is_not_a_match(self):
        assert extract_fenced_json("```\n[]\n```") is None

    def test_unclosed_fence_is_not_a_match(self):
        assert extract_fenced_json("```json\n[]") is None

    def test_multiline_body(self):
        body = json.dumps(_ONE_ERROR, indent=2)
        assert extract_fenced_json(_fenced(body)) == body


class TestParseReplyNoErrors:
    def test_sentinel_reply_is_normalised_to_empty(self):
        assert parse_reply(_fenced(NO_ERRORS_REPLY), _TEXT) == []

    def test_sentinel_normalisation_is_stable(self):
        reply = _fenced(NO_ERRORS_REPLY)
        assert parse_reply(reply) == parse_reply(reply) == []

    def test_empty_array_is_empty(self):
        assert parse_reply(_fenced([]), _TEXT) == []

    def test_empty_reply_is_not_a_failure(self):
        assert parse_reply("", _TEXT) == []

    def test_whitespace_reply_is_not_a_failure(self):
        assert parse_reply("   \n\t ", _TEXT) == []

    def test_sentinel_with_other_message_is_kept(self):
        reply = [dict(NO_ERRORS_REPLY[0], message="Something else")]
        errors = parse_reply(_fenced(reply), _TEXT)
        assert len(errors) == 1
        assert errors[0].message == "Something else"


class TestParseReplyErrors:
    def test_decoded_errors_are_returned(self):
        errors = parse_reply(_fenced(_ONE_ERROR), _TEXT)
        assert len(errors) == 1
        assert errors[0].error_word == "implantss"
        assert errors[0].offset == 24
        assert errors[0].message == "Từ bị sai chính tả."

    def test_offsets_are_not_validated_against_text(self):
        payload = [dict(_ONE_ERROR[0], offset=10_000)]
        errors = parse_reply(_fenced(payload), "short")
        assert errors[0].offset == 10_000


class TestParseReplyContractViolations:
    def test_reply_without_fence_gives_one_sentinel(self):
        errors = parse_reply("I found no problems at all.", _TEXT)
        assert len(errors) == 1
        assert errors[0].error_word == "N/A"
        assert "I found no problems at all." in errors[0].message
        assert errors[0].original_sentence == _TEXT

    def test_bare_json_without_fence_is_a_violation(self):
        errors = parse_reply(json.dumps(_ONE_ERROR), _TEXT)
        assert len(errors) == 1
        assert errors[0].is_sentinel

    def test_invalid_json_gives_one_sentinel(self):
        reply = _fenced('[{"errorWord": "x",]')
        errors = parse_reply(reply, _TEXT)
        assert len(errors) == 1
        assert errors[0].error_word == "N/A"
        assert '[{"errorWord": "x",]' in errors[0].message

    def test_object_instead_of_array_is_rejected(self):
        errors = parse_reply(_fenced(_ONE_ERROR[0]), _TEXT)
        assert len(errors) == 1
        assert errors[0].is_sentinel

    def test_wrong_field_type_is_rejected(self):
        payload = [dict(_ONE_ERROR[0], offset="24")]
        errors = parse_reply(_fenced(payload), _TEXT)
        assert len(errors) == 1
        assert errors[0].is_sentinel

    def test_missing_field_is_rejected(self):
        payload = [{k: v for k, v in _ONE_ERROR[0].items() if k != "message"}]
        errors = parse_reply(_fenced(payload), _TEXT)
        assert len(errors) == 1
        assert errors[0].is_sentinel
