# wards/consumers.py
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .signals import BOARD_GROUP


class OccupancyConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        await self.channel_layer.group_add(BOARD_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(BOARD_GROUP, self.channel_name)

    async def bed_update(self, event):
        """
        Called for every committed bed change sent to the board group.
        """
        await self.send_json({
            "type": "bed_update",
            "bed_id": event["bed_id"],
            "bed_number": event["bed_number"],
            "status": event["status"],
            "patient_id": event["patient_id"],
            "patient_name": event["patient_name"],
        })
