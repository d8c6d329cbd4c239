from django.core.management.base import BaseCommand
from wards.services.occupancy import create_beds

class Command(BaseCommand):
    help = "Create numbered vacant beds"

    def add_arguments(self, parser):
        parser.add_argument("count", type=int)
        parser.add_argument("--start", type=int, default=None, help="First bed number (default: after the highest)")

    def handle(self, *args, **options):
        beds = create_beds(options["count"], start=options["start"])
        if beds:
            self.stdout.write(self.style.SUCCESS(
                f"Created beds {beds[0].bed_number} to {beds[-1].bed_number}"
            ))
        else:
            self.stdout.write("No beds created")
