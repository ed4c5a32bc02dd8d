"""Synthetic candidate pool generator.

Builds realistic-looking profiles for local development and demos. The first
half of the generated profiles are male, the second half female; all are
flagged as candidate-pool profiles.
"""

from __future__ import annotations

import random
from datetime import date

from src.models import Gender, Preference, Profile

FIRST_NAMES_MALE = [
    "Aarav", "Arjun", "Rohan", "Karan", "Varun", "Siddharth", "Rajesh", "Vikram",
    "Amit", "Rahul", "Pradeep", "Suresh", "Anil", "Deepak", "Manoj", "Ravi",
    "Ashish", "Nitin", "Sandeep", "Ajay", "Vijay", "Akash", "Rohit", "Gaurav",
]

FIRST_NAMES_FEMALE = [
    "Priya", "Ananya", "Shreya", "Kavya", "Aditi", "Nikita", "Pooja", "Meera",
    "Sanya", "Riya", "Divya", "Neha", "Swati", "Rekha", "Sunita", "Geeta",
    "Anjali", "Preeti", "Shikha", "Nisha", "Kiran", "Sapna", "Maya", "Arya",
]

LAST_NAMES = [
    "Sharma", "Gupta", "Agarwal", "Singh", "Kumar", "Jain", "Mehta", "Shah",
    "Patel", "Verma", "Yadav", "Mishra", "Tiwari", "Pandey", "Joshi", "Kapoor",
]

CITIES = [
    "Mumbai", "Delhi", "Bangalore", "Chennai", "Kolkata", "Hyderabad", "Pune",
    "Ahmedabad", "Jaipur", "Lucknow", "Indore", "Bhopal",
]

MARITAL_STATUSES = ["Single", "Divorced", "Widowed"]
CASTES = ["General", "OBC", "SC", "ST"]
RELIGIONS = ["Hindu", "Muslim", "Christian", "Sikh", "Jain", "Buddhist", "Other"]
LANGUAGES = ["English", "Hindi", "Marathi", "Tamil", "Bengali", "Gujarati"]
DESIGNATIONS = ["Software Engineer", "Manager", "Analyst", "Consultant", "Specialist"]
DEGREES = ["Science", "Arts", "Commerce", "Engineering", "Business Administration"]
COMPANY_SUFFIXES = ["Tech", "Solutions", "Enterprises", "Industries", "Group"]


def generate_profile(rng: random.Random, index: int, gender: Gender) -> Profile:
    first_names = FIRST_NAMES_MALE if gender is Gender.MALE else FIRST_NAMES_FEMALE
    city = rng.choice(CITIES)
    return Profile(
        id=f"pool-{index:04d}",
        first_name=rng.choice(first_names),
        last_name=rng.choice(LAST_NAMES),
        gender=gender,
        date_of_birth=date(rng.randint(1970, 1999), rng.randint(1, 12), rng.randint(1, 28)),
        income=rng.randint(500_000, 1_500_000),
        height=rng.randint(150, 190),
        city=city,
        country="India",
        marital_status=rng.choice(MARITAL_STATUSES),
        religion=rng.choice(RELIGIONS),
        caste=rng.choice(CASTES),
        languages=tuple(rng.sample(LANGUAGES, k=rng.randint(1, 3))),
        wants_kids=rng.choice(list(Preference)),
        open_to_relocate=rng.choice(list(Preference)),
        open_to_pets=rng.choice(list(Preference)),
        designation=rng.choice(DESIGNATIONS),
        company=f"{city} {rng.choice(COMPANY_SUFFIXES)}",
        degree=f"Bachelor of {rng.choice(DEGREES)}",
        college=f"University of {city}",
        is_candidate_pool=True,
    )


def generate_profiles(count: int = 100, seed: int | None = None) -> list[Profile]:
    """Generate `count` profiles; the same seed always yields the same pool."""
    rng = random.Random(seed)
    half = count // 2
    return [
        generate_profile(rng, i, Gender.MALE if i < half else Gender.FEMALE)
        for i in range(count)
    ]
