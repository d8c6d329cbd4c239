import asyncio

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase, TestCase

from wards.consumers import OccupancyConsumer
from wards.exceptions import BedUnavailable
from wards.models import Bed
from wards.services import occupancy
from wards.signals import BOARD_GROUP
from wards.tests.helpers import admission_data


async def _next_message(layer, channel):
    return await asyncio.wait_for(layer.receive(channel), timeout=1)


class BoardBroadcastTest(TestCase):
    def setUp(self):
        self.layer = get_channel_layer()
        self.channel = async_to_sync(self.layer.new_channel)()
        async_to_sync(self.layer.group_add)(BOARD_GROUP, self.channel)
        self.bed = occupancy.create_beds(1)[0]

    def tearDown(self):
        async_to_sync(self.layer.flush)()

    def receive(self):
        return async_to_sync(_next_message)(self.layer, self.channel)

    def test_admission_is_broadcast_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            patient = occupancy.admit(self.bed.pk, admission_data())

        message = self.receive()
        self.assertEqual(message["type"], "bed_update")
        self.assertEqual(message["bed_id"], self.bed.pk)
        self.assertEqual(message["status"], Bed.PATIENT_ADMITTED)
        self.assertEqual(message["patient_id"], patient.pk)
        self.assertEqual(message["patient_name"], "Rajesh Kumar")

    def test_discharge_is_broadcast(self):
        with self.captureOnCommitCallbacks(execute=True):
            patient = occupancy.admit(self.bed.pk, admission_data())
        self.receive()

        with self.captureOnCommitCallbacks(execute=True):
            occupancy.discharge(patient.pk, "Recovered")

        message = self.receive()
        self.assertEqual(message["status"], Bed.VACANT)
        self.assertIsNone(message["patient_id"])

    def test_rejected_admission_is_not_broadcast(self):
        Bed.objects.filter(pk=self.bed.pk).update(status=Bed.UNDER_MAINTENANCE)

        with self.captureOnCommitCallbacks() as callbacks:
            with self.assertRaises(BedUnavailable):
                occupancy.admit(self.bed.pk, admission_data())

        self.assertEqual(callbacks, [])


class OccupancyConsumerTest(SimpleTestCase):
    # channels>=4.2 closes stale DB connections on every dispatched message
    databases = {"default"}

    async def test_board_receives_bed_updates(self):
        communicator = WebsocketCommunicator(OccupancyConsumer.as_asgi(), "/ws/occupancy/")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await get_channel_layer().group_send(BOARD_GROUP, {
            "type": "bed_update",
            "bed_id": 7,
            "bed_number": 3,
            "status": Bed.VACANT,
            "patient_id": None,
            "patient_name": None,
        })

        message = await communicator.receive_json_from()
        self.assertEqual(message["bed_number"], 3)
        self.assertEqual(message["status"], Bed.VACANT)
        await communicator.disconnect()
