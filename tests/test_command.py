"""Unit tests for add-spot command extraction."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from tripchat.chat import CommandText, PlainText, extract_command
from tripchat.itinerary import TransportMode

TOKYO_TOWER = "AI_ADD_SPOT::name=Tokyo Tower;;description=;;dateTime=2024-07-15T14:30;;transportMode=train"


class TestMatching:

    def test_bare_command(self):
        """A reply made only of the command gets the canned acknowledgement."""
        result = extract_command(TOKYO_TOWER)

        assert isinstance(result, CommandText)
        assert result.command.name == "Tokyo Tower"
        assert result.command.description == ""
        assert result.command.raw_date_time == "2024-07-15T14:30"
        assert result.command.transport_mode == TransportMode.TRAIN
        assert result.token == TOKYO_TOWER
        assert result.display_text == (
            "Understood. I'm now instructing the app to add Tokyo Tower to your itinerary."
        )

    def test_prose_around_command_is_kept(self):
        text = (
            "Sure! AI_ADD_SPOT::name=Ramen Place;;description=Try shoyu;;"
            "dateTime=DATETIME_UNSPECIFIED;;transportMode=walk"
        )
        result = extract_command(text)

        assert isinstance(result, CommandText)
        assert result.command.raw_date_time == "DATETIME_UNSPECIFIED"
        assert result.command.transport_mode == TransportMode.WALK
        assert result.display_text == "Sure!"

    def test_trailing_separator_is_consumed(self):
        result = extract_command(f"Okay.\n{TOKYO_TOWER};;\nEnjoy!")

        assert isinstance(result, CommandText)
        assert result.token.endswith(";;")
        assert ";;" not in result.display_text
        assert result.display_text == "Okay.\n\nEnjoy!"

    def test_spans_lines(self):
        text = (
            "AI_ADD_SPOT::name=Senso-ji;;description=Oldest temple.\nGo early;;"
            "dateTime=2024-07-16T08:00;;transportMode=bus"
        )
        result = extract_command(text)

        assert isinstance(result, CommandText)
        assert result.command.description == "Oldest temple.\nGo early"

    def test_only_first_command_is_used(self):
        second = TOKYO_TOWER.replace("Tokyo Tower", "Skytree")
        result = extract_command(f"{TOKYO_TOWER}\n{second}")

        assert isinstance(result, CommandText)
        assert result.command.name == "Tokyo Tower"
        assert "Skytree" in result.display_text

    def test_empty_name_is_accepted(self):
        result = extract_command(
            "AI_ADD_SPOT::name=;;description=x;;dateTime=2024-07-15T14:30;;transportMode=car"
        )
        assert isinstance(result, CommandText)
        assert result.command.name == ""

    def test_single_semicolon_in_value(self):
        result = extract_command(
            "AI_ADD_SPOT::name=Cafe;;description=open 9-5; closed Mon;;"
            "dateTime=2024-07-15T14:30;;transportMode=bicycle"
        )
        assert isinstance(result, CommandText)
        assert result.command.description == "open 9-5; closed Mon"

    @pytest.mark.parametrize("mode", TransportMode.values())
    def test_every_transport_mode(self, mode: str):
        text = f"AI_ADD_SPOT::name=X;;description=;;dateTime=2024-07-15T14:30;;transportMode={mode}"
        result = extract_command(text)
        assert isinstance(result, CommandText)
        assert result.command.transport_mode.value == mode


class TestPlainText:

    def test_no_command(self):
        result = extract_command("I think you should visit Shibuya.")

        assert isinstance(result, PlainText)
        assert result.display_text == "I think you should visit Shibuya."

    def test_unknown_mode_is_prose(self):
        text = "AI_ADD_SPOT::name=Moon;;description=;;dateTime=2024-07-15T14:30;;transportMode=rocket"
        result = extract_command(text)

        assert isinstance(result, PlainText)
        assert result.display_text == text

    def test_separator_inside_value_is_not_a_command(self):
        text = (
            "AI_ADD_SPOT::name=A;;B;;description=;;dateTime=2024-07-15T14:30;;transportMode=rocket;;"
            "transportMode=walk"
        )
        assert isinstance(extract_command(text), PlainText)

    def test_missing_field(self):
        text = "AI_ADD_SPOT::name=Tokyo Tower;;dateTime=2024-07-15T14:30;;transportMode=train"
        assert isinstance(extract_command(text), PlainText)

    @given(st.text())
    def test_text_without_token_is_unchanged(self, text: str):
        """Property test: text without the command prefix is displayed verbatim."""
        if "AI_ADD_SPOT::" in text:
            return
        result = extract_command(text)
        assert isinstance(result, PlainText)
        assert result.display_text == text
