from django.urls import path

from route_sequencer import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/route-sequence", views.route_sequence_view, name="route-sequence"),
    path(
        "api/v1/route-sequence/latest",
        views.latest_route_view,
        name="route-sequence-latest",
    ),
]
