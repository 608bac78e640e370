from __future__ import annotations

from django.db import models


class SavedRoute(models.Model):
    objects = models.Manager["SavedRoute"]()

    strategy = models.CharField(max_length=32)
    start_latitude = models.FloatField(null=True, blank=True)
    start_longitude = models.FloatField(null=True, blank=True)

    # Visiting order: [{"id", "label", "latitude", "longitude", "distance_from_prev_km"}]
    stops = models.JSONField(default=list)
    total_distance_km = models.FloatField(default=0.0)
    initial_distance_km = models.FloatField(default=0.0)
    constructed_distance_km = models.FloatField(default=0.0)
    two_opt_passes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = (models.Index(fields=["created_at"]),)

    @property
    def stop_count(self) -> int:
        return len(self.stops)

    def __str__(self) -> str:
        return f"{self.strategy} route with {self.stop_count} stops ({self.total_distance_km:.1f} km)"
