from django.test import TestCase
from django.urls import reverse

from wards.exceptions import NotFound, ValidationError
from .exceptions import InvalidTransition
from .models import OPDPatient
from . import services


def opd_data(**overrides):
    data = {
        "name": "Sunita Rao",
        "age": "42",
        "contact": "9876500000",
        "issue": "Back pain",
        "doctor": "Dr. Kapoor",
        "appointment_time": "10:30",
    }
    data.update(overrides)
    return data


class QueueTest(TestCase):
    def test_queue_numbers_increase(self):
        first = services.enqueue(opd_data())
        second = services.enqueue(opd_data(name="Arjun"))

        self.assertEqual(first.queue_number, 1)
        self.assertEqual(second.queue_number, 2)
        self.assertEqual(second.status, OPDPatient.WAITING)

    def test_removal_keeps_later_numbers(self):
        first = services.enqueue(opd_data())
        services.enqueue(opd_data(name="Arjun"))
        services.remove(first.pk)

        self.assertEqual(services.enqueue(opd_data(name="Kiran")).queue_number, 3)

    def test_age_out_of_range(self):
        with self.assertRaises(ValidationError) as ctx:
            services.enqueue(opd_data(age="200"))
        self.assertIn("age", ctx.exception.details)

    def test_search_and_filter(self):
        services.enqueue(opd_data())
        arjun = services.enqueue(opd_data(name="Arjun", doctor="Dr. Shah"))
        services.update_status(arjun.pk, OPDPatient.IN_CONSULTATION)

        self.assertEqual([p.name for p in services.list_queue(search="shah")], ["Arjun"])
        self.assertEqual([p.name for p in services.list_queue(status=OPDPatient.WAITING)], ["Sunita Rao"])

    def test_stats(self):
        services.enqueue(opd_data())
        done = services.enqueue(opd_data(name="Arjun"))
        services.update_status(done.pk, OPDPatient.CANCELLED)

        stats = services.queue_stats()
        self.assertEqual(stats[OPDPatient.WAITING], 1)
        self.assertEqual(stats[OPDPatient.CANCELLED], 1)
        self.assertEqual(stats[OPDPatient.COMPLETED], 0)
        self.assertEqual(stats["total"], 2)


class StatusTest(TestCase):
    def setUp(self):
        self.patient = services.enqueue(opd_data())

    def test_consultation_flow(self):
        services.update_status(self.patient.pk, OPDPatient.IN_CONSULTATION)
        patient = services.update_status(self.patient.pk, OPDPatient.COMPLETED)
        self.assertEqual(patient.status, OPDPatient.COMPLETED)

    def test_cannot_skip_consultation(self):
        with self.assertRaises(InvalidTransition):
            services.update_status(self.patient.pk, OPDPatient.COMPLETED)

    def test_finished_visits_are_final(self):
        services.update_status(self.patient.pk, OPDPatient.CANCELLED)
        with self.assertRaises(InvalidTransition):
            services.update_status(self.patient.pk, OPDPatient.WAITING)

    def test_unknown_patient(self):
        with self.assertRaises(NotFound):
            services.update_status(999, OPDPatient.CANCELLED)

    def test_update_details_keeps_queue_place(self):
        patient = services.update_details(self.patient.pk, opd_data(notes="Bring X-ray"))
        self.assertEqual(patient.notes, "Bring X-ray")
        self.assertEqual(patient.queue_number, 1)


class OPDViewTest(TestCase):
    def test_register_and_list(self):
        created = self.client.post(reverse("opd_queue"), opd_data())
        listed = self.client.get(reverse("opd_queue")).json()

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["queue_number"], 1)
        self.assertEqual([p["name"] for p in listed["patients"]], ["Sunita Rao"])
        self.assertEqual(listed["stats"]["total"], 1)

    def test_invalid_transition_is_conflict(self):
        patient = services.enqueue(opd_data())
        response = self.client.post(reverse("opd_status", args=[patient.pk]), {"status": OPDPatient.COMPLETED})
        self.assertEqual(response.status_code, 409)

    def test_delete(self):
        patient = services.enqueue(opd_data())
        response = self.client.delete(reverse("opd_patient", args=[patient.pk]))

        self.assertEqual(response.status_code, 204)
        self.assertFalse(OPDPatient.objects.exists())

    def test_stats(self):
        self.assertEqual(self.client.get(reverse("opd_stats")).json()["total"], 0)
