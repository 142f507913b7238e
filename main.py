import logging
import sys
import json
import argparse

from core.config_loader import load_config
from core.app_context import AppContext
from core.exceptions import ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_json_file(path: str, description: str):
    """Load a JSON document, or None if it is missing or malformed."""
    logger.info(f"Loading {description} from {path}")
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"{description.capitalize()} file not found: {path}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {description} file: {e}")
        return None


def _pet_label(score) -> str:
    pet = score.pet
    if pet is None or not pet.name:
        return score.pet_id
    species = f", {pet.species.value}" if pet.species else ""
    return f"{pet.name} ({score.pet_id}{species})"


def print_recommendations(recommendation_set, show_all: bool = False) -> None:
    """Print ranked pets, then the excluded ones with their reasons."""
    print(f"\nRecommendations for {recommendation_set.adopter_id} "
          f"(profile v{recommendation_set.profile_version})")
    print("=" * 60)
    for score in recommendation_set.matching:
        print(f"{score.overall_score:>3}  {score.label.value:<13} {_pet_label(score)}")
        for reason in score.reasons:
            print(f"       - {reason}")

    if show_all and recommendation_set.not_matching:
        print("\nNot a matching pet")
        print("-" * 60)
        for score in recommendation_set.not_matching:
            print(f"  0  {score.label.value:<13} {_pet_label(score)}")
            for reason in score.reasons:
                print(f"       - {reason}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Rank shelter pets for an adopter questionnaire")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--adopter-id", required=True, help="Adopter identifier")
    parser.add_argument("--answers", required=True, help="JSON file with questionnaire answers")
    parser.add_argument("--pets", required=True, help="JSON file with a list of pet listings")
    parser.add_argument("--all", action="store_true", help="Also list pets that are not a match")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    context = AppContext.build(config)

    answers = load_json_file(args.answers, "answers")
    pets = load_json_file(args.pets, "pets")
    if answers is None or pets is None:
        return 1
    if not isinstance(pets, list):
        logger.error("Pets file must contain a JSON list of listings")
        return 1

    try:
        recommendation_set = context.matching_service.submit_questionnaire(args.adopter_id, answers, pets)
    except ValidationError as e:
        logger.error(str(e))
        for field, message in sorted(e.errors.items()):
            logger.error(f"  {field}: {message}")
        return 2

    if args.json:
        print(json.dumps(recommendation_set.to_dict(), indent=2))
    else:
        print_recommendations(recommendation_set, show_all=args.all)
    return 0


if __name__ == "__main__":
    sys.exit(main())
