"""Profile data models.

Pure data structures with no business logic.
These can be safely used by any module.

Profiles are frozen: a matching run works on the snapshot it read from the
store, never on a copy that is being edited elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from datetime import date
from enum import Enum
from typing import Any


class Gender(Enum):
    """Binary gender as stored on customer profiles."""
    MALE = "Male"
    FEMALE = "Female"

    @property
    def opposite(self) -> "Gender":
        return Gender.FEMALE if self is Gender.MALE else Gender.MALE


class Preference(Enum):
    """Tri-state answer used by the preference flags."""
    YES = "Yes"
    NO = "No"
    MAYBE = "Maybe"

    @classmethod
    def parse(cls, value: Any) -> "Preference":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.MAYBE


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        # Accept both "1990-04-12" and full ISO timestamps
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _parse_languages(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(lang.strip() for lang in value if str(lang).strip())


@dataclass(frozen=True)
class Profile:
    """A customer, or a candidate from the synthetic pool."""
    id: str
    first_name: str
    last_name: str
    gender: Gender
    date_of_birth: date | None = None
    income: int = 0
    height: int = 0  # cm
    city: str = ""
    country: str = ""
    marital_status: str = ""
    religion: str = ""
    caste: str = ""
    languages: tuple[str, ...] = dataclass_field(default_factory=tuple)
    wants_kids: Preference = Preference.MAYBE
    open_to_relocate: Preference = Preference.MAYBE
    open_to_pets: Preference = Preference.MAYBE
    designation: str = ""
    company: str = ""
    degree: str = ""
    college: str = ""
    is_candidate_pool: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def age(self, today: date | None = None) -> int | None:
        """Age in whole years, or None when the date of birth is unknown."""
        if self.date_of_birth is None:
            return None
        today = today or date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))

    def is_younger_than(self, other: "Profile") -> bool:
        if self.date_of_birth is None or other.date_of_birth is None:
            return False
        return self.date_of_birth > other.date_of_birth

    def is_older_than(self, other: "Profile") -> bool:
        if self.date_of_birth is None or other.date_of_birth is None:
            return False
        return self.date_of_birth < other.date_of_birth

    def shares_language_with(self, other: "Profile") -> bool:
        mine = {lang.lower() for lang in self.languages}
        return any(lang.lower() in mine for lang in other.languages)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (camelCase, as stored)."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "gender": self.gender.value,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "income": self.income,
            "height": self.height,
            "city": self.city,
            "country": self.country,
            "maritalStatus": self.marital_status,
            "religion": self.religion,
            "caste": self.caste,
            "languages": list(self.languages),
            "wantKids": self.wants_kids.value,
            "openToRelocate": self.open_to_relocate.value,
            "openToPets": self.open_to_pets.value,
            "designation": self.designation,
            "company": self.company,
            "degree": self.degree,
            "college": self.college,
            "isCandidatePool": self.is_candidate_pool,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary.

        Raises:
            ValueError: If id or gender is missing or invalid
        """
        profile_id = data.get("id") or data.get("_id")
        if not profile_id:
            raise ValueError("Profile is missing an id")
        try:
            gender = Gender(data.get("gender"))
        except ValueError as e:
            raise ValueError(f"Profile {profile_id} has invalid gender: {data.get('gender')!r}") from e

        return cls(
            id=str(profile_id),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            gender=gender,
            date_of_birth=_parse_date(data.get("dateOfBirth") or data.get("dob")),
            income=int(data.get("income") or 0),
            height=int(data.get("height") or 0),
            city=data.get("city", ""),
            country=data.get("country", ""),
            marital_status=data.get("maritalStatus", ""),
            religion=data.get("religion", ""),
            caste=data.get("caste", ""),
            languages=_parse_languages(data.get("languages") or data.get("languagesKnown")),
            wants_kids=Preference.parse(data.get("wantKids")),
            open_to_relocate=Preference.parse(data.get("openToRelocate")),
            open_to_pets=Preference.parse(data.get("openToPets")),
            designation=data.get("designation", ""),
            company=data.get("company") or data.get("currentCompany", ""),
            degree=data.get("degree", ""),
            college=data.get("college") or data.get("undergraduateCollege", ""),
            is_candidate_pool=bool(data.get("isCandidatePool", data.get("isDummy", False))),
        )
