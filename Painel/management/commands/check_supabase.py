from django.core.management.base import BaseCommand

from Painel.integration.health import integration_health_snapshot


class Command(BaseCommand):
    help = "Check that the Supabase project used by the dashboard is reachable."

    def handle(self, *args, **options):
        result = integration_health_snapshot()
        upstream = result.get("upstream", {})
        if result.get("healthy"):
            self.stdout.write(self.style.SUCCESS(f"Supabase reachable. upstream={upstream}"))
        else:
            self.stdout.write(
                self.style.WARNING(
                    f"Supabase unavailable. configured={result.get('configured')} upstream={upstream}"
                )
            )
