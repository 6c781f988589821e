import json
import logging
from datetime import datetime, timezone

from database.base import BaseManager

logger = logging.getLogger(__name__)


class PreferencesDBManager(BaseManager):
    """
    Key/value storage for rosters and preferences.

    Values are stored as JSON text in the ``preferences`` table. Last write
    wins; a missing row, a failed query or unreadable JSON all give back the
    default.
    """

    table_name = "preferences"

    def load(self, key: str, default=None):
        try:
            result = (
                self.supabase.table(self.table_name)
                .select("value")
                .eq("key", key)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Error loading preference {key}: {e}")
            return default

        if not result.data:
            return default

        try:
            return json.loads(result.data[0]["value"])
        except (TypeError, KeyError, ValueError) as e:
            logger.warning(f"Ignoring malformed preference {key}: {e}")
            return default

    def save(self, key: str, value) -> bool:
        row = {
            "key": key,
            "value": json.dumps(value),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.supabase.table(self.table_name).upsert(row).execute()
            return True
        except Exception as e:
            logger.warning(f"Error saving preference {key}: {e}")
            return False
