from django.contrib import admin

from route_sequencer.models import SavedRoute


@admin.register(SavedRoute)
class SavedRouteAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "strategy",
        "stop_count",
        "total_distance_km",
        "two_opt_passes",
        "created_at",
    )
    list_filter = ("strategy",)
    ordering = ("-created_at",)
