import unittest
import os
import yaml
from unittest.mock import patch, mock_open
from pydantic import ValidationError as PydanticValidationError

from core.config_loader import load_config, AppConfig, ScorerConfig, DimensionWeights


class TestConfigLoader(unittest.TestCase):

    def setUp(self):
        self.sample_config = {
            "matching": {
                "scorer": {
                    "weights": {"living_space": 0.5, "energy": 0.1},
                    "thresholds": {"suitable_min": 75, "conditional_min": 45},
                    "hard_dimensions": ["living_space", "kids"],
                    "max_reasons": 2
                },
                "ranker": {"max_workers": 4, "eligible_statuses": ["available", "pending"]},
                "cache": {"backend": "redis", "redis_url": "redis://cache:6379/1"}
            },
            "web": {"host": "127.0.0.1", "port": 9000}
        }
        self.config_yaml = yaml.dump(self.sample_config)

    def test_load_config_default(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                config = load_config("dummy_path.yaml")
                self.assertIsInstance(config, AppConfig)
                self.assertEqual(config.matching.scorer.weights.living_space, 0.5)
                self.assertEqual(config.matching.scorer.weights.kids, 0.15)
                self.assertEqual(config.matching.scorer.thresholds.suitable_min, 75)
                self.assertEqual(config.matching.scorer.hard_dimensions, ["living_space", "kids"])
                self.assertEqual(config.matching.ranker.max_workers, 4)
                self.assertEqual(config.matching.cache.backend, "redis")
                self.assertEqual(config.web.port, 9000)

    def test_env_var_override_redis(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"REDIS_URL": "redis://env-cache:6379/0"}):
                    config = load_config("dummy_path.yaml")
                    self.assertEqual(config.matching.cache.redis_url, "redis://env-cache:6379/0")

    def test_env_var_override_backend(self):
        minimal_config_yaml = yaml.dump({"web": {"port": 8080}})
        with patch("builtins.open", mock_open(read_data=minimal_config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"MATCHING_CACHE_BACKEND": "redis"}):
                    config = load_config("dummy")
                    self.assertEqual(config.matching.cache.backend, "redis")

    def test_env_var_override_web(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"WEB_HOST": "0.0.0.0", "WEB_PORT": "8123"}):
                    config = load_config("dummy_path.yaml")
                    self.assertEqual(config.web.host, "0.0.0.0")
                    self.assertEqual(config.web.port, 8123)

    def test_defaults_without_file(self):
        with patch("os.path.exists", return_value=False):
            config = load_config("missing.yaml")
            scorer = config.matching.scorer
            self.assertEqual(scorer.thresholds.suitable_min, 70)
            self.assertEqual(scorer.thresholds.conditional_min, 40)
            self.assertEqual(scorer.ordinal_step_scores, [100, 60, 20])
            self.assertEqual(scorer.unknown_score, 60)
            self.assertEqual(scorer.max_reasons, 3)
            self.assertEqual(config.matching.ranker.eligible_statuses, ["available"])
            self.assertEqual(config.matching.cache.backend, "memory")

    def test_empty_file(self):
        with patch("builtins.open", mock_open(read_data="")):
            with patch("os.path.exists", return_value=True):
                config = load_config("empty.yaml")
                self.assertEqual(config.matching.scorer.weights.living_space, 0.30)

    def test_invalid_values_rejected(self):
        with self.assertRaises(PydanticValidationError):
            ScorerConfig(ordinal_step_scores=[100, 60])
        with self.assertRaises(PydanticValidationError):
            DimensionWeights(energy=-1)
        with self.assertRaises(PydanticValidationError):
            AppConfig(**{"matching": {"cache": {"backend": "memcached"}}})

    def test_for_dimension(self):
        weights = DimensionWeights()
        self.assertEqual(weights.for_dimension("special_care"), 0.15)
        self.assertEqual(weights.for_dimension("other_pets"), 0.10)


if __name__ == '__main__':
    unittest.main()
