import re
from decimal import Decimal

from rest_framework import serializers

from .commands import SORT_ORDERINGS
from .models import PRODUCT_TAGS, ProductCategory

_SKU_PATTERN = re.compile(r"^[A-Z0-9-]{3,20}$")


class ProductReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    slug = serializers.CharField()
    sku = serializers.CharField()
    description = serializers.CharField()
    price = serializers.CharField()
    stock = serializers.IntegerField()
    in_stock = serializers.BooleanField()
    images = serializers.ListField(child=serializers.CharField())
    category = serializers.CharField()
    brand = serializers.CharField(allow_blank=True)
    tags = serializers.ListField(child=serializers.CharField())
    specifications = serializers.DictField()
    is_active = serializers.BooleanField()
    featured = serializers.BooleanField()
    created_at = serializers.CharField()
    updated_at = serializers.CharField()


class ProductSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    slug = serializers.CharField()
    price = serializers.CharField()
    image = serializers.CharField(allow_blank=True)
    stock = serializers.IntegerField()
    is_active = serializers.BooleanField()


class ProductSearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True, max_length=100)
    category = serializers.ChoiceField(
        choices=[*ProductCategory.values, "all"], required=False
    )
    minPrice = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    maxPrice = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    inStock = serializers.BooleanField(required=False, default=False)
    featured = serializers.BooleanField(required=False, default=False)
    sortBy = serializers.ChoiceField(
        choices=list(SORT_ORDERINGS), required=False, default="newest"
    )
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False, default=12)

    def validate(self, attrs):
        low, high = attrs.get("minPrice"), attrs.get("maxPrice")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError(
                {"maxPrice": "maxPrice must be greater than or equal to minPrice."}
            )
        return attrs


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    sku = serializers.CharField(max_length=20)
    description = serializers.CharField(max_length=2000)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, max_value=Decimal("99999.99")
    )
    stock = serializers.IntegerField(min_value=0, max_value=99999, required=False)
    images = serializers.ListField(
        child=serializers.CharField(max_length=500), min_length=1, max_length=10
    )
    category = serializers.ChoiceField(choices=ProductCategory.choices)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tags = serializers.ListField(
        child=serializers.ChoiceField(choices=PRODUCT_TAGS),
        required=False,
        max_length=10,
    )
    specifications = serializers.DictField(required=False)
    is_active = serializers.BooleanField(required=False)
    featured = serializers.BooleanField(required=False)

    def validate_sku(self, value: str) -> str:
        normalized = value.strip().upper()
        if not _SKU_PATTERN.match(normalized):
            raise serializers.ValidationError(
                "SKU must be 3-20 characters of letters, numbers and hyphens."
            )
        return normalized

    def validate_tags(self, value):
        return list(dict.fromkeys(tag.lower() for tag in value))


class FeaturedQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=12, required=False, default=3)


class RelatedQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=12, required=False, default=4)
