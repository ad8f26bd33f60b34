"""Management command to resolve a hardiness zone using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api.views import parse_coordinate, resolve_coordinate


class Command(BaseCommand):
    help = "Resolve the hardiness zone for the provided coordinates"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=float, required=True, help="Latitude")
        parser.add_argument("--lon", type=float, required=True, help="Longitude")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        try:
            coordinate = parse_coordinate(options["lat"], options["lon"])
        except ValueError as exc:
            raise CommandError(f"Invalid coordinate: {exc}") from exc

        payload = resolve_coordinate(coordinate)
        self.stdout.write(json.dumps(payload))
