from django.urls import path

from . import consumers

websocket_urlpatterns = [
    path("ws/occupancy/", consumers.OccupancyConsumer.as_asgi()),
]
