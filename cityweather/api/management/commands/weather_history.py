"""Print the most recent city searches."""
from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from cityweather.api.views import serialize_entry
from cityweather.core.models import HistoryStore, PersistenceError


class Command(BaseCommand):
    help = "List recent weather searches, newest first"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--limit", type=int, default=settings.HISTORY_LIMIT, help="Number of entries to show")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        limit = options["limit"]
        if limit < 1:
            raise CommandError("--limit must be positive")

        try:
            store = HistoryStore(settings.HISTORY_DATABASE_URL, pool_size=1)
            try:
                entries = store.recent(limit)
            finally:
                store.close()
        except PersistenceError as exc:
            raise CommandError("Could not read search history") from exc

        if not entries:
            self.stdout.write("No searches recorded yet")
            return
        for entry in entries:
            payload = serialize_entry(entry)
            self.stdout.write(f"{payload['id']:>5}  {payload['search_time']}  {payload['city']}")
