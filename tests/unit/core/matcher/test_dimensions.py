#!/usr/bin/env python3
"""
Unit tests for the per-dimension scorers.
"""

import unittest

from core.config_loader import ScorerConfig
from core.matcher.dimensions import (
    score_living_space, score_energy, score_experience, score_kids,
    score_special_care, score_species, score_size, score_other_pets,
    score_dimensions, unknown_dimensions,
)
from core.matcher.models import (
    Dimension, Verdict,
    LivingSpace, EnergyLevel, ExperienceLevel, KidsAtHome, KidsCompatibility,
    CareLevel, Species, Size,
)
from tests.fixtures.pet_fixtures import make_profile, make_pet


class TestOrdinalDimensions(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def test_living_space(self):
        cases = [
            (LivingSpace.HOUSE_WITH_YARD, LivingSpace.APARTMENT, 100, Verdict.MATCH),
            (LivingSpace.APARTMENT, LivingSpace.APARTMENT, 100, Verdict.MATCH),
            (LivingSpace.APARTMENT, LivingSpace.HOUSE_NO_YARD, 60, Verdict.PARTIAL),
            (LivingSpace.HOUSE_NO_YARD, LivingSpace.HOUSE_WITH_YARD, 60, Verdict.PARTIAL),
            (LivingSpace.APARTMENT, LivingSpace.HOUSE_WITH_YARD, 0, Verdict.MISMATCH),
        ]
        for adopter, pet, expected_score, expected_verdict in cases:
            with self.subTest(adopter=adopter, pet=pet):
                result = score_living_space(adopter, pet, self.config)
                self.assertEqual(result.sub_score, expected_score)
                self.assertEqual(result.verdict, expected_verdict)
                self.assertTrue(result.hard)
                self.assertEqual(result.weight, 0.30)

    def test_energy_is_symmetric(self):
        cases = [
            (EnergyLevel.MEDIUM, EnergyLevel.MEDIUM, 100, Verdict.MATCH),
            (EnergyLevel.LOW, EnergyLevel.MEDIUM, 60, Verdict.PARTIAL),
            (EnergyLevel.MEDIUM, EnergyLevel.LOW, 60, Verdict.PARTIAL),
            (EnergyLevel.LOW, EnergyLevel.HIGH, 20, Verdict.PARTIAL),
            (EnergyLevel.HIGH, EnergyLevel.LOW, 20, Verdict.PARTIAL),
            (EnergyLevel.LOW, EnergyLevel.VERY_HIGH, 0, Verdict.MISMATCH),
        ]
        for adopter, pet, expected_score, expected_verdict in cases:
            with self.subTest(adopter=adopter, pet=pet):
                result = score_energy(adopter, pet, self.config)
                self.assertEqual(result.sub_score, expected_score)
                self.assertEqual(result.verdict, expected_verdict)
                self.assertFalse(result.hard)

    def test_experience_only_penalizes_shortfall(self):
        over = score_experience(ExperienceLevel.EXPERIENCED, ExperienceLevel.NONE, self.config)
        one_short = score_experience(ExperienceLevel.NONE, ExperienceLevel.SOME, self.config)
        two_short = score_experience(ExperienceLevel.NONE, ExperienceLevel.EXPERIENCED, self.config)

        self.assertEqual((over.sub_score, over.verdict), (100, Verdict.MATCH))
        self.assertEqual((one_short.sub_score, one_short.verdict), (60, Verdict.PARTIAL))
        self.assertEqual((two_short.sub_score, two_short.verdict), (0, Verdict.MISMATCH))
        self.assertFalse(two_short.is_hard_mismatch)

    def test_special_care(self):
        enough = score_special_care(CareLevel.FULL, CareLevel.LIMITED, self.config)
        short = score_special_care(CareLevel.LIMITED, CareLevel.FULL, self.config)
        none_vs_full = score_special_care(CareLevel.NONE, CareLevel.FULL, self.config)

        self.assertEqual(enough.sub_score, 100)
        self.assertEqual(short.sub_score, 60)
        self.assertEqual(none_vs_full.sub_score, 0)
        self.assertTrue(none_vs_full.is_hard_mismatch)

    def test_kids(self):
        cases = [
            (KidsAtHome.NONE, KidsCompatibility.NONE, Verdict.MATCH),
            (KidsAtHome.OLDER, KidsCompatibility.OLDER, Verdict.MATCH),
            (KidsAtHome.YOUNG, KidsCompatibility.ANY, Verdict.MATCH),
            (KidsAtHome.YOUNG, KidsCompatibility.OLDER, Verdict.MISMATCH),
            (KidsAtHome.OLDER, KidsCompatibility.NONE, Verdict.MISMATCH),
        ]
        for kids, pet, expected_verdict in cases:
            with self.subTest(kids=kids, pet=pet):
                result = score_kids(kids, pet, self.config)
                self.assertEqual(result.verdict, expected_verdict)
                self.assertEqual(result.sub_score, 100 if expected_verdict == Verdict.MATCH else 0)

    def test_unknown_pet_attribute(self):
        for scorer, adopter_value in (
            (score_living_space, LivingSpace.APARTMENT),
            (score_energy, EnergyLevel.LOW),
            (score_experience, ExperienceLevel.NONE),
            (score_kids, KidsAtHome.YOUNG),
            (score_special_care, CareLevel.NONE),
        ):
            with self.subTest(scorer=scorer.__name__):
                result = scorer(adopter_value, None, self.config)
                self.assertEqual(result.sub_score, 60)
                self.assertEqual(result.verdict, Verdict.UNKNOWN)
                self.assertFalse(result.is_informative)
                self.assertFalse(result.is_hard_mismatch)
                self.assertIsNone(result.pet_value)

    def test_configured_step_scores(self):
        config = ScorerConfig(ordinal_step_scores=[100, 50, 10], unknown_score=40)

        self.assertEqual(score_energy(EnergyLevel.LOW, EnergyLevel.MEDIUM, config).sub_score, 50)
        self.assertEqual(score_energy(EnergyLevel.LOW, EnergyLevel.HIGH, config).sub_score, 10)
        self.assertEqual(score_energy(EnergyLevel.LOW, None, config).sub_score, 40)

    def test_configured_hard_dimensions(self):
        config = ScorerConfig(hard_dimensions=['living_space'])

        result = score_kids(KidsAtHome.YOUNG, KidsCompatibility.NONE, config)

        self.assertEqual(result.verdict, Verdict.MISMATCH)
        self.assertFalse(result.is_hard_mismatch)


class TestCategoricalDimensions(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def test_no_preference_is_skipped(self):
        self.assertIsNone(score_species(None, Species.DOG, self.config))
        self.assertIsNone(score_size(None, Size.LARGE, self.config))

    def test_species_preference(self):
        match = score_species(Species.CAT, Species.CAT, self.config)
        mismatch = score_species(Species.CAT, Species.DOG, self.config)
        unknown = score_species(Species.CAT, None, self.config)

        self.assertEqual((match.sub_score, match.verdict), (100, Verdict.MATCH))
        self.assertEqual((mismatch.sub_score, mismatch.verdict), (0, Verdict.MISMATCH))
        self.assertTrue(mismatch.is_hard_mismatch)
        self.assertEqual(unknown.verdict, Verdict.UNKNOWN)

    def test_size_preference(self):
        mismatch = score_size(Size.SMALL, Size.LARGE, self.config)

        self.assertEqual(mismatch.sub_score, 0)
        self.assertEqual(mismatch.adopter_value, "small")
        self.assertEqual(mismatch.pet_value, "large")

    def test_other_pets(self):
        self.assertIsNone(score_other_pets(None, Species.DOG, False, self.config))
        self.assertIsNone(score_other_pets(False, Species.DOG, False, self.config))

        cat = score_other_pets(True, Species.CAT, None, self.config)
        friendly = score_other_pets(True, Species.DOG, True, self.config)
        unfriendly = score_other_pets(True, Species.DOG, False, self.config)
        unknown = score_other_pets(True, Species.DOG, None, self.config)

        self.assertEqual(cat.verdict, Verdict.MATCH)
        self.assertEqual(friendly.verdict, Verdict.MATCH)
        self.assertTrue(unfriendly.is_hard_mismatch)
        self.assertEqual(unknown.verdict, Verdict.UNKNOWN)


class TestScoreDimensions(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def test_canonical_order_without_preferences(self):
        results = score_dimensions(make_profile(), make_pet(), self.config)

        self.assertEqual(
            [r.dimension for r in results],
            [Dimension.LIVING_SPACE, Dimension.ENERGY, Dimension.EXPERIENCE,
             Dimension.KIDS, Dimension.SPECIAL_CARE]
        )
        self.assertTrue(all(r.sub_score == 100 for r in results))

    def test_preferences_add_dimensions(self):
        profile = make_profile(species_preference=Species.DOG, size_preference=Size.MEDIUM, has_cats=True)
        pet = make_pet(cat_friendly=True)

        results = score_dimensions(profile, pet, self.config)

        self.assertEqual(len(results), 8)
        self.assertEqual(results[-1].dimension, Dimension.OTHER_PETS)

    def test_unknown_dimensions(self):
        profile = make_profile(species_preference=Species.CAT)

        results = unknown_dimensions(profile, "pet-9", self.config)

        self.assertEqual(len(results), 6)
        self.assertTrue(all(r.verdict == Verdict.UNKNOWN for r in results))

    def test_out_of_range_value_raises(self):
        pet = make_pet(energy_level="turbo")

        with self.assertRaises(KeyError):
            score_dimensions(make_profile(), pet, self.config)


if __name__ == '__main__':
    unittest.main()
