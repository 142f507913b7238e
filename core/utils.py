import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so listing timestamps compare safely."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime; returns None for anything else."""
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            return to_utc(datetime.fromisoformat(raw))
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
    return None


class ProfileFingerprinter:
    """
    Pure logic for creating deterministic fingerprints of questionnaire answers.
    """

    @staticmethod
    def calculate(canonical_answers: Dict[str, Any]) -> str:
        """
        Hash the canonical (already normalized) answers.
        Formula: SHA256(JSON with sorted keys)[:16]
        """
        raw_string = json.dumps(canonical_answers, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(raw_string.encode('utf-8')).hexdigest()[:16]
