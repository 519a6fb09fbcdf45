from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

from apps.carts.models import Cart
from apps.catalog.models import Product
from apps.users.models import User


def _gallery(folder):
    base = f"/products/{folder}/desktop"
    return [
        f"{base}/image-product.jpg",
        f"{base}/image-gallery-1.jpg",
        f"{base}/image-gallery-2.jpg",
        f"{base}/image-gallery-3.jpg",
    ]


PRODUCTS = [
    {
        "name": "XX99 Mark II Headphones",
        "description": "The new XX99 Mark II headphones is the pinnacle of pristine audio. It redefines your premium headphone experience by reproducing the balanced depth and precision of studio-quality sound.",
        "price": "2999.00",
        "images": _gallery("xx99-mark-two-headphones"),
        "category": "headphones",
        "stock": 15,
        "sku": "XX99-MK2",
        "specifications": {
            "impedance": "25 Ω",
            "headphoneType": "Over-ear",
            "frequency": "5Hz to 40kHz",
            "includedItems": [
                "Headphone unit",
                "Replacement earcups",
                "User manual",
                "3.5mm 5m audio cable",
                "Travel bag",
            ],
        },
        "tags": ["premium", "over-ear", "wireless", "featured"],
        "featured": True,
    },
    {
        "name": "XX99 Mark I Headphones",
        "description": "As the gold standard for headphones, the classic XX99 Mark I offers detailed and accurate audio reproduction for audiophiles, mixing engineers, and music aficionados alike in studios and on the go.",
        "price": "1750.00",
        "images": _gallery("xx99-mark-one-headphones"),
        "category": "headphones",
        "stock": 22,
        "sku": "XX99-MK1",
        "specifications": {
            "impedance": "25 Ω",
            "headphoneType": "Over-ear",
            "frequency": "20Hz to 40kHz",
            "includedItems": [
                "Headphone unit",
                "Replacement earcups",
                "User manual",
                "3.5mm 5m audio cable",
            ],
        },
        "tags": ["premium", "over-ear", "wired"],
        "featured": True,
    },
    {
        "name": "XX59 Headphones",
        "description": "Enjoy your audio almost anywhere and customize it to your specific tastes with the XX59 headphones. The stylish yet durable versatile wireless headset is a brilliant companion at home or on the move.",
        "price": "899.00",
        "images": _gallery("xx59-headphones"),
        "category": "headphones",
        "stock": 8,
        "sku": "XX59",
        "specifications": {
            "impedance": "32 Ω",
            "headphoneType": "Over-ear",
            "frequency": "20Hz to 22kHz",
            "includedItems": [
                "Headphone unit",
                "User manual",
                "3.5mm 5m audio cable",
                "Travel bag",
            ],
        },
        "tags": ["wireless", "portable"],
        "featured": False,
    },
    {
        "name": "ZX9 Speaker",
        "description": "Upgrade your sound system with the all new ZX9 active bookshelf speaker. It's a bookshelf speaker system that offers truly wireless connectivity -- creating new possibilities for more pleasing and practical audio setups.",
        "price": "4500.00",
        "images": _gallery("zx9-speaker"),
        "category": "speakers",
        "stock": 5,
        "sku": "ZX9",
        "specifications": {
            "powerOutput": "125W",
            "speakerType": "Bookshelf",
            "frequency": "20Hz to 20kHz",
            "includedItems": ["Speaker unit", "User manual", "Power cable", "RCA cable"],
        },
        "tags": ["premium", "bookshelf", "wireless", "featured"],
        "featured": True,
    },
    {
        "name": "ZX7 Speaker",
        "description": "Stream high quality sound wirelessly with minimal loss. The ZX7 bookshelf speaker uses high-end audiophile components that represents the pinnacle of ingenuity in design and produce incredible sound.",
        "price": "3500.00",
        "images": _gallery("zx7-speaker"),
        "category": "speakers",
        "stock": 12,
        "sku": "ZX7",
        "specifications": {
            "powerOutput": "100W",
            "speakerType": "Bookshelf",
            "frequency": "20Hz to 20kHz",
            "includedItems": ["Speaker unit", "User manual", "Power cable"],
        },
        "tags": ["premium", "bookshelf", "wireless"],
        "featured": False,
    },
    {
        "name": "YX1 Wireless Earphones",
        "description": "Tailor your listening experience with bespoke dynamic drivers from the new YX1 Wireless Earphones. Enjoy incredible high-fidelity sound even in noisy environments with its active noise cancellation feature.",
        "price": "599.00",
        "images": _gallery("yx1-earphones"),
        "category": "earphones",
        "stock": 25,
        "sku": "YX1",
        "specifications": {
            "impedance": "16 Ω",
            "headphoneType": "In-ear",
            "frequency": "20Hz to 20kHz",
            "includedItems": [
                "Earphone unit",
                "Multi-size earplugs",
                "User manual",
                "USB-C charging cable",
                "Travel pouch",
            ],
        },
        "tags": ["wireless", "in-ear", "noise-cancelling", "portable"],
        "featured": True,
    },
]

USERS = [
    {
        "username": "demo_shopper",
        "email": "shopper@example.com",
        "password": "Shopper123",
        "first_name": "Demo",
        "last_name": "Shopper",
        "phone": "+441234567890",
        "is_staff": False,
    },
    {
        "username": "store_admin",
        "email": "admin@example.com",
        "password": "Admin12345",
        "first_name": "Store",
        "last_name": "Admin",
        "phone": None,
        "is_staff": True,
    },
]


class Command(BaseCommand):
    help = "Seed the demo audio catalog plus a demo shopper and staff account."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete carts, products and non-superuser accounts before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            Cart.objects.all().delete()
            # Rows referenced by orders stay
            Product.objects.filter(order_items__isnull=True).delete()
            User.objects.filter(is_superuser=False, orders__isnull=True).delete()

        self.stdout.write("Seeding products...")
        for payload in PRODUCTS:
            data = dict(payload)
            sku = data.pop("sku")
            Product.objects.update_or_create(
                sku=sku,
                defaults={**data, "slug": slugify(data["name"]), "brand": "Audiophile"},
            )

        self.stdout.write("Seeding users...")
        for payload in USERS:
            attrs = dict(payload)
            raw_password = attrs.pop("password")
            user, _created = User.objects.update_or_create(
                username=attrs.pop("username"), defaults=attrs
            )
            user.set_password(raw_password)
            user.save()

        self.stdout.write(self.style.SUCCESS("Storefront seed completed."))
