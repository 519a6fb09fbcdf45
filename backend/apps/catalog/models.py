from django.core.validators import MinValueValidator
from django.db import models


class ProductCategory(models.TextChoices):
    HEADPHONES = "headphones", "Headphones"
    SPEAKERS = "speakers", "Speakers"
    EARPHONES = "earphones", "Earphones"
    ACCESSORIES = "accessories", "Accessories"


PRODUCT_TAGS = (
    "premium",
    "wireless",
    "wired",
    "bluetooth",
    "noise-cancelling",
    "over-ear",
    "on-ear",
    "in-ear",
    "portable",
    "bookshelf",
    "featured",
    "bestseller",
    "new",
    "limited-edition",
)


class Product(models.Model):
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    sku = models.CharField(max_length=20, unique=True)
    description = models.TextField(max_length=2000)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    stock = models.PositiveIntegerField(default=0)
    images = models.JSONField(default=list)
    category = models.CharField(max_length=20, choices=ProductCategory.choices)
    brand = models.CharField(max_length=100, blank=True)
    tags = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0), name="product_stock_non_negative"
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0), name="product_price_non_negative"
            ),
        ]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_category_idx"),
            models.Index(fields=["featured", "is_active"], name="product_featured_idx"),
            models.Index(fields=["price"], name="product_price_idx"),
            models.Index(fields=["brand"], name="product_brand_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""
