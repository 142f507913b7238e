#!/usr/bin/env python3
"""
Attribute Normalizer - Map raw questionnaire answers and pet listings
into canonical, comparable records.

Adopter answers are strict: every required field must be present and one of
its allowed values, otherwise ValidationError lists every offending field.
Pet listings are lenient: missing or unrecognised optional attributes become
None (scored as unknown) so a pet is always scoreable.

Both accept the field names and values used by the adoption web app
(camelCase keys, "first-time", "house", "any", ...).
"""

import logging
import warnings
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type

from core.exceptions import ValidationError, PetDataError, IncompleteDataWarning
from core.matcher.models import (
    AdopterProfile, PetAttributes,
    LivingSpace, EnergyLevel, ExperienceLevel, KidsAtHome, KidsCompatibility,
    CareLevel, Species, Size, AdoptionStatus,
)
from core.utils import ProfileFingerprinter, parse_datetime

logger = logging.getLogger(__name__)

# Answers meaning "no preference" for optional categorical questions
NO_PREFERENCE = {'', 'any', 'none', 'no-preference', 'either', 'no'}

_TRUE = {'true', 'yes', 'y', '1'}
_FALSE = {'false', 'no', 'n', '0'}

LIVING_SPACE_ALIASES = {
    'house': LivingSpace.HOUSE_NO_YARD,
    'house-without-yard': LivingSpace.HOUSE_NO_YARD,
    'house-no-yard': LivingSpace.HOUSE_NO_YARD,
    'flat': LivingSpace.APARTMENT,
    'condo': LivingSpace.APARTMENT,
    'yard': LivingSpace.HOUSE_WITH_YARD,
    'house-yard': LivingSpace.HOUSE_WITH_YARD,
}

ADOPTER_ENERGY_ALIASES = {
    'minimal': EnergyLevel.LOW,
    'moderate': EnergyLevel.MEDIUM,
    'very-high': EnergyLevel.HIGH,
}

PET_ENERGY_ALIASES = {
    'calm': EnergyLevel.LOW,
    'moderate': EnergyLevel.MEDIUM,
    'active': EnergyLevel.HIGH,
    'very-active': EnergyLevel.VERY_HIGH,
}

EXPERIENCE_ALIASES = {
    'first-time': ExperienceLevel.NONE,
    'beginner': ExperienceLevel.NONE,
    'novice': ExperienceLevel.NONE,
    'some-experience': ExperienceLevel.SOME,
    'intermediate': ExperienceLevel.SOME,
    'expert': ExperienceLevel.EXPERIENCED,
    'experienced-only': ExperienceLevel.EXPERIENCED,
}

KIDS_AT_HOME_ALIASES = {
    'no': KidsAtHome.NONE,
    'no-kids': KidsAtHome.NONE,
    'teen': KidsAtHome.OLDER,
    'teens': KidsAtHome.OLDER,
    'older-kids': KidsAtHome.OLDER,
    'yes': KidsAtHome.YOUNG,
    'young-kids': KidsAtHome.YOUNG,
    'toddlers': KidsAtHome.YOUNG,
}

KIDS_COMPATIBILITY_ALIASES = {
    'no': KidsCompatibility.NONE,
    'not-with-kids': KidsCompatibility.NONE,
    'older-kids': KidsCompatibility.OLDER,
    'young': KidsCompatibility.ANY,
    'all': KidsCompatibility.ANY,
    'yes': KidsCompatibility.ANY,
}

CARE_CAPACITY_ALIASES = {
    'no': CareLevel.NONE,
    'some': CareLevel.LIMITED,
    'partial': CareLevel.LIMITED,
    'yes': CareLevel.FULL,
}

# The listing form records the kind of care; the engine compares intensity.
CARE_NEEDS_ALIASES = {
    'anxiety': CareLevel.LIMITED,
    'training': CareLevel.LIMITED,
    'senior': CareLevel.LIMITED,
    'minor': CareLevel.LIMITED,
    'medical': CareLevel.FULL,
    'major': CareLevel.FULL,
}

# (attribute, accepted keys, enum, aliases)
ADOPTER_REQUIRED_FIELDS: Sequence[Tuple[str, Tuple[str, ...], Type[Enum], Dict[str, Enum]]] = (
    ('living_space', ('living_space', 'livingSpace', 'home_type', 'homeType'),
     LivingSpace, LIVING_SPACE_ALIASES),
    ('energy_tolerance', ('energy_tolerance', 'energyTolerance', 'energy_level', 'energyLevel'),
     EnergyLevel, ADOPTER_ENERGY_ALIASES),
    ('experience_level', ('experience_level', 'experienceLevel', 'experience'),
     ExperienceLevel, EXPERIENCE_ALIASES),
    ('kids_at_home', ('kids_at_home', 'kidsAtHome', 'has_young_kids', 'hasYoungKids', 'kids'),
     KidsAtHome, KIDS_AT_HOME_ALIASES),
    ('special_care_capacity', ('special_care_capacity', 'specialCareCapacity', 'special_care', 'specialCare'),
     CareLevel, CARE_CAPACITY_ALIASES),
)

ADOPTER_PREFERENCE_FIELDS = (
    ('species_preference', ('species_preference', 'speciesPreference', 'preferredSpecies', 'preferred_species'),
     Species, {}),
    ('size_preference', ('size_preference', 'sizePreference', 'preferredSize', 'preferred_size'),
     Size, {}),
)

PET_FIELDS = (
    ('species', ('species',), Species, {}),
    ('size', ('size',), Size, {}),
    ('ideal_living_space', ('ideal_living_space', 'idealLivingSpace', 'living_space', 'livingSpace'),
     LivingSpace, LIVING_SPACE_ALIASES),
    ('energy_level', ('energy_level', 'energyLevel'), EnergyLevel, PET_ENERGY_ALIASES),
    ('experience_needed', ('experience_needed', 'experienceNeeded', 'experience'),
     ExperienceLevel, EXPERIENCE_ALIASES),
    ('kids_compatibility', ('kids_compatibility', 'kidsCompatibility', 'kids', 'good_with_kids'),
     KidsCompatibility, KIDS_COMPATIBILITY_ALIASES),
    # "specialCareNeeds" is free text in the listing form; the enum field wins when both exist
    ('special_care_needs', ('special_care_needs', 'specialCare', 'special_care', 'specialCareNeeds'),
     CareLevel, CARE_NEEDS_ALIASES),
)

PET_ID_KEYS = ('pet_id', 'petId', 'id', '_id')
ADOPTER_ID_KEYS = ('adopter_id', 'adopterId', 'user_id', 'userId')


def _token(value: Any) -> str:
    return str(value).strip().lower().replace('_', '-').replace(' ', '-')


def _first_present(raw: Mapping[str, Any], keys: Sequence[str]) -> Tuple[bool, Any]:
    for key in keys:
        if key in raw and raw[key] is not None:
            return True, raw[key]
    return False, None


def _coerce_enum(value: Any, enum_cls: Type[Enum], aliases: Dict[str, Enum]) -> Optional[Enum]:
    """Map a raw value onto enum_cls, or None if it is not recognised."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, Enum):
        value = value.value
    token = _token(value)
    if token in aliases:
        return aliases[token]
    try:
        return enum_cls(token)
    except ValueError:
        return None


def _coerce_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    token = _token(value)
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    return None


def _allowed(enum_cls: Type[Enum]) -> str:
    return ', '.join(member.value for member in enum_cls)


def normalize_adopter(
    raw_answers: Mapping[str, Any],
    adopter_id: Optional[str] = None,
    version: int = 0
) -> AdopterProfile:
    """
    Build an AdopterProfile from raw questionnaire answers.

    Args:
        raw_answers: Answers keyed by questionnaire field
        adopter_id: Adopter identifier (falls back to an id inside raw_answers)
        version: Profile version to stamp on the result

    Returns:
        AdopterProfile with a fingerprint of the canonical answers

    Raises:
        ValidationError: with one message per missing or invalid field
    """
    if not isinstance(raw_answers, Mapping):
        raise ValidationError({'answers': 'Questionnaire answers must be an object'})

    errors: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    if adopter_id is None:
        _, adopter_id = _first_present(raw_answers, ADOPTER_ID_KEYS)
    if adopter_id is None or not str(adopter_id).strip():
        errors['adopter_id'] = 'Adopter id is required'

    for attr, keys, enum_cls, aliases in ADOPTER_REQUIRED_FIELDS:
        present, raw = _first_present(raw_answers, keys)
        if not present or (isinstance(raw, str) and not raw.strip()):
            errors[attr] = 'This question is required'
            continue

        if isinstance(raw, bool) and attr == 'kids_at_home':
            coerced = KidsAtHome.YOUNG if raw else KidsAtHome.NONE
        elif isinstance(raw, bool) and attr == 'special_care_capacity':
            coerced = CareLevel.FULL if raw else CareLevel.NONE
        else:
            coerced = _coerce_enum(raw, enum_cls, aliases)

        # Pets may be very-high energy; adopters answer on a three-point scale
        if coerced == EnergyLevel.VERY_HIGH and attr == 'energy_tolerance':
            coerced = EnergyLevel.HIGH

        if coerced is None:
            errors[attr] = f"'{raw}' is not one of: {_allowed(enum_cls)}"
            continue
        values[attr] = coerced

    for attr, keys, enum_cls, aliases in ADOPTER_PREFERENCE_FIELDS:
        present, raw = _first_present(raw_answers, keys)
        if not present or _token(raw) in NO_PREFERENCE:
            values[attr] = None
            continue
        coerced = _coerce_enum(raw, enum_cls, aliases)
        if coerced is None:
            errors[attr] = f"'{raw}' is not one of: {_allowed(enum_cls)}"
            continue
        values[attr] = coerced

    present, raw = _first_present(raw_answers, ('has_cats', 'hasCats'))
    if present:
        has_cats = _coerce_bool(raw)
        if has_cats is None:
            errors['has_cats'] = f"'{raw}' is not a yes/no answer"
        values['has_cats'] = has_cats
    else:
        values['has_cats'] = None

    if errors:
        logger.info(f"Rejected questionnaire for adopter {adopter_id}: {sorted(errors)}")
        raise ValidationError(errors)

    canonical = {
        k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()
    }
    return AdopterProfile(
        adopter_id=str(adopter_id).strip(),
        version=version,
        fingerprint=ProfileFingerprinter.calculate(canonical),
        **values
    )


def normalize_pet(raw_listing: Any) -> PetAttributes:
    """
    Build PetAttributes from a raw listing mapping.

    Missing or unrecognised optional attributes become None; an
    IncompleteDataWarning naming them is emitted but nothing is raised.

    Raises:
        PetDataError: if the listing has no pet id
    """
    if isinstance(raw_listing, PetAttributes):
        return raw_listing
    if not isinstance(raw_listing, Mapping):
        raise PetDataError(f"Pet listing must be a mapping, got {type(raw_listing).__name__}")

    present, pet_id = _first_present(raw_listing, PET_ID_KEYS)
    if not present or not str(pet_id).strip():
        raise PetDataError("Pet listing has no id")
    pet_id = str(pet_id).strip()

    values: Dict[str, Any] = {}
    missing = []
    for attr, keys, enum_cls, aliases in PET_FIELDS:
        present, raw = _first_present(raw_listing, keys)
        coerced = None
        if present and isinstance(raw, bool) and attr == 'kids_compatibility':
            coerced = KidsCompatibility.ANY if raw else KidsCompatibility.NONE
        elif present and not isinstance(raw, bool):
            coerced = _coerce_enum(raw, enum_cls, aliases)
            if coerced is None and str(raw).strip():
                logger.debug(f"Pet {pet_id}: unrecognised {attr} value {raw!r}")
        if coerced is None:
            missing.append(attr)
        values[attr] = coerced

    present, raw = _first_present(raw_listing, ('cat_friendly', 'catFriendly'))
    values['cat_friendly'] = _coerce_bool(raw) if present else None

    values['adoption_status'] = _status(raw_listing, ('adoption_status', 'adoptionStatus'))
    values['listing_status'] = _status(raw_listing, ('listing_status', 'listingStatus', 'status'))

    present, raw = _first_present(raw_listing, ('archived', 'is_archived', 'isArchived'))
    values['archived'] = bool(_coerce_bool(raw)) if present else False

    present, raw = _first_present(raw_listing, ('listed_at', 'listedAt', 'created_at', 'createdAt'))
    values['listed_at'] = parse_datetime(raw) if present else None

    for attr in ('name', 'breed'):
        _, raw = _first_present(raw_listing, (attr,))
        values[attr] = str(raw) if raw is not None else None

    _, image = _first_present(raw_listing, ('image', 'image_url', 'imageUrl'))
    photos = raw_listing.get('photos')
    if image is None and isinstance(photos, Sequence) and not isinstance(photos, str) and photos:
        image = photos[0]
    values['image'] = str(image) if image is not None else None

    if missing:
        warnings.warn(
            f"Pet {pet_id} is missing {', '.join(missing)}; those dimensions score as unknown",
            IncompleteDataWarning,
            stacklevel=2
        )

    return PetAttributes(pet_id=pet_id, **values)


def _status(raw_listing: Mapping, keys: Tuple[str, ...]) -> Optional[AdoptionStatus]:
    """Coerce one status field; an unrecognised status word becomes OTHER."""
    present, raw = _first_present(raw_listing, keys)
    if not present or not str(raw).strip():
        return None
    return _coerce_enum(raw, AdoptionStatus, {}) or AdoptionStatus.OTHER

