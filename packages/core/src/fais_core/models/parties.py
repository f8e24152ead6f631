"""Parties, cases and the authenticated principal.

Users and cases are owned by external services. Only the fields the
affidavit engine reads are modelled here.
"""

import re
from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..formatting import full_name

ENTITY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def is_valid_entity_id(value: Optional[str]) -> bool:
    """Return True when ``value`` is a well-formed user/case/row id."""
    return bool(value) and bool(ENTITY_ID_PATTERN.match(value))


class Role(IntEnum):
    """Application role, which doubles as the user's case role."""

    PETITIONER = 1
    RESPONDENT = 2
    PETITIONER_ATTORNEY = 3
    RESPONDENT_ATTORNEY = 4
    ADMINISTRATOR = 5
    LEGAL_ASSISTANT = 6

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def carries_affidavit(self) -> bool:
        """Only petitioners and respondents are affidavit subjects."""
        return self in (Role.PETITIONER, Role.RESPONDENT)

    @property
    def views_petitioner(self) -> bool:
        """Respondent-side roles view the petitioner's affidavit for a case."""
        return self in (Role.RESPONDENT, Role.RESPONDENT_ATTORNEY)


class _PartyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Principal(_PartyModel):
    """An already-authenticated caller."""

    user_id: str
    role: Role
    username: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR


class Party(_PartyModel):
    """A user as seen by the affidavit engine."""

    id: str
    role: Role
    username: str = Field(default="", alias="uname")
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return full_name(self.first_name, self.last_name, self.username)


class Case(_PartyModel):
    """A family-law case linking the parties and its jurisdiction."""

    id: str
    case_number: str = ""
    division: str = ""
    circuit_id: Optional[int] = None
    county_id: Optional[int] = None
    petitioner_id: Optional[str] = None
    respondent_id: Optional[str] = None
    petitioner_attorney_id: Optional[str] = Field(default=None, alias="petitionerAttId")
    respondent_attorney_id: Optional[str] = Field(default=None, alias="respondentAttId")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def party_ids(self) -> list[str]:
        slots = [
            self.petitioner_id,
            self.respondent_id,
            self.petitioner_attorney_id,
            self.respondent_attorney_id,
        ]
        return [slot for slot in slots if slot]

    def includes(self, user_id: str) -> bool:
        """Return True when ``user_id`` occupies any of the four party slots."""
        return user_id in self.party_ids

    def on_respondent_side(self, user_id: str) -> bool:
        return user_id in (self.respondent_id, self.respondent_attorney_id)


class AffidavitQuery(_PartyModel):
    """Optional query parameters of an affidavit request."""

    user_id: Optional[str] = None
    case_id: Optional[str] = None
