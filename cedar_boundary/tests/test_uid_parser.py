"""
Unit tests for the entity identifier parser.
"""

import pytest

from shared.errors import EngineRejection
from cedar_boundary.app.engine.types import EntityUid, quote_cedar_string
from cedar_boundary.app.engine.uid import parse_entity_uid, unescape_cedar_string


class TestParseEntityUid:
    """Test cases for parse_entity_uid."""

    def test_simple_uid(self):
        """Test a type and id."""
        uid = parse_entity_uid('User::"alice"')

        assert uid == EntityUid(entity_type="User", entity_id="alice")

    def test_namespaced_uid(self):
        """Test a namespace path before the type."""
        uid = parse_entity_uid('PhotoApp::Groups::User::"alice"')

        assert uid.entity_type == "PhotoApp::Groups::User"
        assert uid.entity_id == "alice"

    def test_whitespace_and_comments(self):
        """Test that whitespace and line comments between tokens are ignored."""
        uid = parse_entity_uid('  User // the principal\n  :: "alice"  ')

        assert uid == EntityUid("User", "alice")

    def test_empty_id(self):
        """Test that an empty id is accepted."""
        assert parse_entity_uid('Photo::""').entity_id == ""

    def test_escaped_id(self):
        """Test Cedar escapes inside the id."""
        uid = parse_entity_uid(r'Photo::"vacation \"2023\"\n\u{1F600}"')

        assert uid.entity_id == 'vacation "2023"\n\U0001F600'

    def test_single_colon(self):
        """Test a single colon separator."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid('User:"alice"')

        assert exc_info.value.message == "unexpected token `:`"

    def test_empty_input(self):
        """Test empty input."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid("")

        assert exc_info.value.message == "unexpected end of input"

    def test_missing_id(self):
        """Test a type without an id."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid("User::")

        assert exc_info.value.message == "unexpected end of input"

    def test_unquoted_id(self):
        """Test an id that is not a string literal."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid("User::42")

        assert exc_info.value.message == "unexpected token `4`"

    def test_unterminated_string(self):
        """Test an id with no closing quote."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid('User::"alice')

        assert exc_info.value.message == "invalid token"

    def test_trailing_tokens(self):
        """Test input after the id."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid('User::"alice" extra')

        assert exc_info.value.message == "unexpected token `extra`"

    def test_reserved_identifier(self):
        """Test a reserved word as the type."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid('if::"alice"')

        assert exc_info.value.message == "this identifier is reserved and cannot be used: `if`"

    def test_invalid_escape(self):
        """Test an unknown escape sequence."""
        with pytest.raises(EngineRejection) as exc_info:
            parse_entity_uid(r'User::"\q"')

        assert exc_info.value.message == r"the input `\q` is not a valid escape"


class TestCedarStrings:
    """Test cases for string literal escaping."""

    def test_unescape(self):
        """Test the supported escapes."""
        assert unescape_cedar_string(r'"a\tb\\c\0\'"') == "a\tb\\c\0'"

    def test_surrogate_escape_rejected(self):
        """Test that surrogate code points are rejected."""
        with pytest.raises(EngineRejection):
            unescape_cedar_string(r'"\u{D800}"')

    def test_quote(self):
        """Test rendering a value as a literal."""
        assert quote_cedar_string('say "hi"\n') == r'"say \"hi\"\n"'
        assert quote_cedar_string("\x01") == r'"\u{1}"'

    def test_uid_str_parses_back(self):
        """Test that a rendered identifier parses to the same value."""
        uid = EntityUid("PhotoApp::Photo", 'odd "name"\twith\\escapes')

        assert parse_entity_uid(str(uid)) == uid

