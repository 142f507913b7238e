#!/usr/bin/env python3
"""
Unit tests for ranking, partitioning and per-pet failure handling.
"""

import unittest
import warnings
from datetime import datetime, timezone

from core.config_loader import ScorerConfig, RankerConfig
from core.exceptions import IncompleteDataWarning
from core.matcher.models import (
    AdoptionStatus, LivingSpace, EnergyLevel, KidsAtHome, KidsCompatibility, CareLevel, Species,
)
from core.scorer import ranker
from core.scorer.explainer import INCOMPLETE_DATA_REASON
from core.scorer.models import Label, RecommendationSet
from tests.fixtures.pet_fixtures import FIXED_NOW, RAW_LISTING, make_profile, make_pet, pet_ids


def listed(day: int) -> datetime:
    return datetime(2026, 1, day, tzinfo=timezone.utc)


class TestScorePet(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def test_score_fields(self):
        profile = make_profile(version=3)
        pet = make_pet("pet-5")

        score = ranker.score_pet(profile, pet, self.config, computed_at=FIXED_NOW)

        self.assertEqual(score.adopter_id, "adopter-1")
        self.assertEqual(score.pet_id, "pet-5")
        self.assertEqual(score.overall_score, 100)
        self.assertEqual(score.label, Label.SUITABLE)
        self.assertEqual(score.profile_version, 3)
        self.assertEqual(score.computed_at, FIXED_NOW)
        self.assertEqual(score.listed_at, pet.listed_at)
        self.assertEqual(score.pet.name, "Pet pet-5")
        self.assertEqual(score.pet.species, Species.DOG)
        self.assertEqual(score.to_dict()["pet"]["size"], "medium")
        self.assertEqual(len(score.dimensions), 5)
        self.assertEqual(score.engine_version, "1.0")
        self.assertTrue(score.reasons)

    def test_malformed_pet_falls_back_to_unknown(self):
        pet = make_pet("pet-bad", energy_level="turbo")

        score = ranker.score_pet(make_profile(), pet, self.config)

        self.assertEqual(score.reasons[0], INCOMPLETE_DATA_REASON)
        self.assertEqual(score.overall_score, 60)
        self.assertEqual(score.label, Label.CONDITIONAL)
        self.assertEqual(
            list(score.missing_info),
            ['living_space', 'energy', 'experience', 'kids', 'special_care']
        )

    def test_is_eligible(self):
        config = RankerConfig()
        self.assertTrue(ranker.is_eligible(make_pet(), config))
        self.assertFalse(ranker.is_eligible(make_pet(adoption_status=AdoptionStatus.PENDING), config))
        self.assertFalse(ranker.is_eligible(make_pet(adoption_status=AdoptionStatus.ADOPTED), config))
        self.assertFalse(ranker.is_eligible(make_pet(adoption_status=None), config))

        lenient = RankerConfig(eligible_statuses=['available', 'pending'])
        self.assertTrue(ranker.is_eligible(make_pet(adoption_status=AdoptionStatus.PENDING), lenient))

    def test_is_eligible_checks_every_status_and_archived(self):
        config = RankerConfig()
        self.assertTrue(ranker.is_eligible(make_pet(listing_status=AdoptionStatus.AVAILABLE), config))
        self.assertTrue(ranker.is_eligible(
            make_pet(adoption_status=None, listing_status=AdoptionStatus.AVAILABLE), config
        ))
        self.assertFalse(ranker.is_eligible(make_pet(listing_status=AdoptionStatus.PENDING), config))
        self.assertFalse(ranker.is_eligible(make_pet(adoption_status=AdoptionStatus.OTHER), config))
        self.assertFalse(ranker.is_eligible(make_pet(archived=True), config))



class TestRank(unittest.TestCase):

    def setUp(self):
        self.scorer_config = ScorerConfig()
        self.ranker_config = RankerConfig(max_workers=1)

    def _rank(self, pets, profile=None, ranker_config=None):
        return ranker.rank(
            profile or make_profile(),
            pets,
            self.scorer_config,
            ranker_config or self.ranker_config,
            computed_at=FIXED_NOW
        )

    def test_orders_by_score(self):
        pets = [
            make_pet("partial", energy_level=EnergyLevel.HIGH),
            make_pet("perfect"),
            make_pet("poor", energy_level=EnergyLevel.VERY_HIGH, ideal_living_space=LivingSpace.HOUSE_WITH_YARD),
        ]
        result = self._rank(pets)

        self.assertEqual(pet_ids(result), ["perfect", "partial", "poor"])
        scores = [s.overall_score for s in result.scores]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_tie_breaks_by_recency_then_pet_id(self):
        pets = [
            make_pet("b-old", listed_at=listed(1)),
            make_pet("undated", listed_at=None),
            make_pet("c-new", listed_at=listed(20)),
            make_pet("a-old", listed_at=listed(1)),
        ]
        result = self._rank(pets)

        self.assertEqual(pet_ids(result), ["c-new", "a-old", "b-old", "undated"])

    def test_partitions_matching_and_not_matching(self):
        pets = [
            make_pet("ok"),
            make_pet("needs-yard", ideal_living_space=LivingSpace.HOUSE_WITH_YARD),
            make_pet("no-kids", kids_compatibility=KidsCompatibility.NONE),
        ]
        profile = make_profile(living_space=LivingSpace.APARTMENT, kids_at_home=KidsAtHome.YOUNG)
        result = self._rank(pets, profile=profile)

        self.assertEqual([s.pet_id for s in result.matching], ["ok"])
        self.assertEqual([s.pet_id for s in result.not_matching], ["needs-yard", "no-kids"])
        self.assertEqual(pet_ids(result), ["ok", "needs-yard", "no-kids"])

        for score in result.not_matching:
            self.assertEqual(score.overall_score, 0)
            self.assertEqual(score.label, Label.NOT_SUITABLE)
            self.assertTrue(score.reasons)

    def test_not_matching_keep_reasons(self):
        pets = [make_pet("ok"), make_pet("carer", special_care_needs=CareLevel.FULL)]
        profile = make_profile(special_care_capacity=CareLevel.NONE)
        result = self._rank(pets, profile=profile)

        self.assertEqual([s.pet_id for s in result.matching], ["ok"])
        self.assertEqual(result.not_matching[0].pet_id, "carer")
        self.assertEqual(result.not_matching[0].reasons[0], "Needs more special care than you can provide")

    def test_only_available_pets(self):
        pets = [
            make_pet("available"),
            make_pet("pending", adoption_status=AdoptionStatus.PENDING),
            make_pet("adopted", adoption_status=AdoptionStatus.ADOPTED),
        ]
        self.assertEqual(pet_ids(self._rank(pets)), ["available"])

    def test_only_open_listings_from_the_web_app(self):
        pets = [
            dict(RAW_LISTING, id="open", status="available", adoptionStatus="Available"),
            dict(RAW_LISTING, id="archived", status="available", adoptionStatus="Available", archived=True),
            dict(RAW_LISTING, id="closed", status="pending", adoptionStatus="Available"),
            dict(RAW_LISTING, id="reserved", adoptionStatus="Reserved"),
        ]
        self.assertEqual(pet_ids(self._rank(pets)), ["open"])

    def test_empty_eligible_set(self):

        result = self._rank([make_pet("pending", adoption_status=AdoptionStatus.PENDING)])

        self.assertIsInstance(result, RecommendationSet)
        self.assertEqual(len(result), 0)
        self.assertEqual(result.matching, [])
        self.assertEqual(result.profile_version, 1)

        self.assertEqual(len(self._rank([])), 0)

    def test_duplicate_listings_keep_first(self):
        pets = [make_pet("dup"), make_pet("dup", energy_level=EnergyLevel.LOW)]
        result = self._rank(pets)

        self.assertEqual(pet_ids(result), ["dup"])
        self.assertEqual(result.get("dup").overall_score, 100)

    def test_malformed_pet_does_not_abort(self):
        pets = [make_pet("good"), make_pet("bad", kids_compatibility="sometimes")]
        result = self._rank(pets)

        self.assertEqual(pet_ids(result), ["good", "bad"])
        self.assertEqual(result.get("bad").reasons[0], INCOMPLETE_DATA_REASON)

    def test_raw_listings(self):
        listing_without_id = dict(RAW_LISTING)
        del listing_without_id["id"]

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", IncompleteDataWarning)
            result = self._rank([RAW_LISTING, listing_without_id, dict(RAW_LISTING, id="pet-102", energyLevel="?")])

        self.assertEqual(pet_ids(result), ["pet-101", "pet-102"])
        self.assertIn("energy", result.get("pet-102").missing_info)

    def test_parallel_matches_sequential(self):
        pets = [
            make_pet(
                f"pet-{i:02d}",
                energy_level=list(EnergyLevel)[i % 4],
                ideal_living_space=list(LivingSpace)[i % 3],
                listed_at=listed(1 + i % 7),
            )
            for i in range(24)
        ]
        sequential = self._rank(pets, ranker_config=RankerConfig(max_workers=1))
        parallel = self._rank(pets, ranker_config=RankerConfig(max_workers=6))

        self.assertEqual(parallel, sequential)
        self.assertEqual(pet_ids(parallel), pet_ids(sequential))

    def test_deterministic(self):
        pets = [make_pet(f"pet-{i}", energy_level=list(EnergyLevel)[i % 4]) for i in range(10)]
        first = self._rank(pets, ranker_config=RankerConfig(max_workers=4))
        second = self._rank(list(reversed(pets)), ranker_config=RankerConfig(max_workers=4))

        self.assertEqual(first.to_dict(), second.to_dict())

    def test_bounds_and_label_consistency(self):
        pets = []
        for i, space in enumerate(LivingSpace):
            for j, energy in enumerate(EnergyLevel):
                for k, care in enumerate(CareLevel):
                    pets.append(make_pet(f"pet-{i}{j}{k}", ideal_living_space=space, energy_level=energy, special_care_needs=care))
        profile = make_profile(living_space=LivingSpace.APARTMENT, special_care_capacity=CareLevel.NONE)
        result = self._rank(pets, profile=profile, ranker_config=RankerConfig(max_workers=4))

        for score in result.scores:
            self.assertTrue(0 <= score.overall_score <= 100)
            if score.label == Label.SUITABLE:
                self.assertGreaterEqual(score.overall_score, 70)
            self.assertEqual(score.label == Label.NOT_SUITABLE, score.overall_score < 40)


class TestRecommendationSet(unittest.TestCase):

    def test_lookup_and_with_score(self):
        profile = make_profile()
        result = ranker.rank(profile, [make_pet("a", listed_at=listed(2))], ScorerConfig(), RankerConfig())
        late = ranker.score_pet(profile, make_pet("b", listed_at=listed(5)), ScorerConfig())

        merged = result.with_score(late)

        self.assertIsNone(result.get("b"))
        self.assertIs(merged.get("b"), late)
        self.assertEqual(pet_ids(merged), ["b", "a"])
        self.assertEqual(merged.profile, result.profile)

    def test_serialization(self):
        profile = make_profile(version=2)
        result = ranker.rank(profile, [make_pet("a"), make_pet("b", energy_level=EnergyLevel.LOW)],
                             ScorerConfig(), RankerConfig(), computed_at=FIXED_NOW)

        restored = RecommendationSet.from_dict(result.to_dict())

        self.assertEqual(restored, result)
        self.assertEqual(restored.profile_version, 2)
        self.assertEqual(restored.computed_at, FIXED_NOW)


if __name__ == '__main__':
    unittest.main()
