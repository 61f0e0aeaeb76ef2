"""Extraction of the add-spot command embedded in assistant text.

Wire format, fields in fixed order, ``;;`` as separator::

    AI_ADD_SPOT::name=<v>;;description=<v>;;dateTime=<v>;;transportMode=<mode>[;;]

A token whose mode is outside the enumeration is not a command at all and
the text stays plain prose.
"""

import logging
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..itinerary.models import AddSpotCommand, TransportMode

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "AI_ADD_SPOT::"
FIELD_SEPARATOR = ";;"

# A field value is the shortest run that does not contain the separator
_VALUE = r"((?:(?!;;).)*?)"

COMMAND_PATTERN = re.compile(
    re.escape(COMMAND_PREFIX)
    + rf"name={_VALUE};;description={_VALUE};;dateTime={_VALUE};;"
    + rf"transportMode=({'|'.join(TransportMode.values())})(?:;;)?",
    re.DOTALL,
)


def acknowledgement_text(name: str) -> str:
    return f"Understood. I'm now instructing the app to add {name} to your itinerary."


class PlainText(BaseModel):
    """No command present; the text is shown as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["plain"] = "plain"
    display_text: str


class CommandText(BaseModel):
    """A command was found and removed from the display text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["command"] = "command"
    command: AddSpotCommand
    token: str
    display_text: str


def extract_command(text: str) -> PlainText | CommandText:
    """Split finalized assistant text into display text and an optional command.

    Only the first well-formed token is honoured.
    """
    match = COMMAND_PATTERN.search(text)
    if match is None:
        return PlainText(display_text=text)

    name, description, raw_date_time, mode = match.groups()
    command = AddSpotCommand(
        name=name,
        description=description,
        raw_date_time=raw_date_time,
        transport_mode=TransportMode(mode),
    )
    display_text = (text[:match.start()] + text[match.end():]).strip()
    if not display_text:
        display_text = acknowledgement_text(name)

    logger.debug("Found add-spot command for %r", name)
    return CommandText(command=command, token=match.group(0), display_text=display_text)
