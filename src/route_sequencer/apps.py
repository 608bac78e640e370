from django.apps import AppConfig


class RouteSequencerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "route_sequencer"
