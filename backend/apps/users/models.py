from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # id, username, password, first_name, last_name, is_staff, is_superuser are inherited
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True, null=True)

    @property
    def is_admin(self) -> bool:
        return bool(self.is_staff or self.is_superuser)

    def __str__(self):
        return self.username


class AddressType(models.TextChoices):
    SHIPPING = "shipping", "Shipping"
    BILLING = "billing", "Billing"


class Address(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="addresses")
    type = models.CharField(max_length=10, choices=AddressType.choices)
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    company = models.CharField(max_length=100, blank=True)
    address1 = models.CharField(max_length=200)
    address2 = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    country = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True)
    # At most one default per (user, type); the address book service maintains it.
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "type"],
                condition=models.Q(is_default=True),
                name="address_single_default_per_type",
            ),
        ]

    def __str__(self):
        return f"{self.address1}, {self.city} ({self.type})"
