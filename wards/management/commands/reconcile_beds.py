from django.core.management.base import BaseCommand
from wards.services.occupancy import reconcile

class Command(BaseCommand):
    help = "Check that bed status matches bed occupancy, optionally repairing mismatches"

    def add_arguments(self, parser):
        parser.add_argument("--fix", action="store_true", help="Repair the mismatches found")

    def handle(self, *args, **options):
        found = reconcile(fix=options["fix"])
        for issue in found:
            who = f" ({issue.patient})" if issue.patient else ""
            self.stdout.write(f"Bed {issue.bed.bed_number}: {issue.kind}{who}")

        if not found:
            self.stdout.write(self.style.SUCCESS("All beds consistent"))
        elif options["fix"]:
            self.stdout.write(self.style.SUCCESS(f"Repaired {len(found)} beds"))
        else:
            self.stdout.write(self.style.WARNING(f"{len(found)} beds need attention, rerun with --fix"))
