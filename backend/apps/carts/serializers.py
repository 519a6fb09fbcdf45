from rest_framework import serializers

from apps.catalog.serializers import ProductSummarySerializer


class CartTotalsSerializer(serializers.Serializer):
    itemCount = serializers.IntegerField(source="item_count")
    subtotal = serializers.CharField()
    shipping = serializers.CharField()
    vat = serializers.CharField()
    total = serializers.CharField()


class CartLineSerializer(serializers.Serializer):
    product = ProductSummarySerializer()
    quantity = serializers.IntegerField()
    lineTotal = serializers.CharField(source="line_total")


class CartReadSerializer(serializers.Serializer):
    owner = serializers.CharField()
    items = CartLineSerializer(many=True)
    totalItemCount = serializers.IntegerField(source="total_item_count")
    totals = CartTotalsSerializer()
    updatedAt = serializers.CharField(source="updated_at", allow_null=True)


class CartItemWriteSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(required=False, default=1)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
