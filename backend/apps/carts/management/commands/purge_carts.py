from django.core.management.base import BaseCommand

from apps.carts.container import build_cart_service


class Command(BaseCommand):
    help = "Delete carts that have not been touched within their lifetime (30 days)."

    def handle(self, *args, **options):
        removed = build_cart_service().purge_expired()
        self.stdout.write(self.style.SUCCESS(f"Purged {removed} expired cart(s)."))
