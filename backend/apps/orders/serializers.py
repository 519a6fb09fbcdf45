import re

from rest_framework import serializers

from apps.users.validators import validate_phone
from .models import OrderStatus, PaymentMethod

_CARD_NUMBER_PATTERN = re.compile(r"^\d{12,19}$")
_EXPIRY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
_CVV_PATTERN = re.compile(r"^\d{3,4}$")

CARD_FIELDS = ("cardNumber", "expiryDate", "cvv", "cardholderName")


class AddressSerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=50)
    lastName = serializers.CharField(max_length=50)
    company = serializers.CharField(max_length=100, required=False, allow_blank=True)
    address1 = serializers.CharField(max_length=200)
    address2 = serializers.CharField(max_length=200, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zipCode = serializers.CharField(max_length=20)
    country = serializers.CharField(max_length=100)
    phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True, validators=[validate_phone]
    )


class CheckoutSerializer(serializers.Serializer):
    """
    Checkout form. Card fields are checked here and dropped; they never reach
    the service layer or the database.
    """

    email = serializers.EmailField()
    shippingAddress = AddressSerializer()
    billingAddress = AddressSerializer(required=False)
    sameAsShipping = serializers.BooleanField(required=False, default=False)
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices)
    cardNumber = serializers.CharField(required=False, allow_blank=True, write_only=True)
    expiryDate = serializers.CharField(required=False, allow_blank=True, write_only=True)
    cvv = serializers.CharField(required=False, allow_blank=True, write_only=True)
    cardholderName = serializers.CharField(
        max_length=100, required=False, allow_blank=True, write_only=True
    )
    notes = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )

    def _validate_card(self, attrs):
        missing = [name for name in CARD_FIELDS if not (attrs.get(name) or "").strip()]
        if missing:
            raise serializers.ValidationError(
                {
                    "cardNumber": "Credit card details are required when selecting "
                    "credit card payment"
                }
            )
        errors = {}
        if not _CARD_NUMBER_PATTERN.match(attrs["cardNumber"].replace(" ", "")):
            errors["cardNumber"] = "Invalid card number."
        if not _EXPIRY_PATTERN.match(attrs["expiryDate"].strip()):
            errors["expiryDate"] = "Expiry date must look like MM/YY."
        if not _CVV_PATTERN.match(attrs["cvv"].strip()):
            errors["cvv"] = "CVV must be 3 or 4 digits."
        if errors:
            raise serializers.ValidationError(errors)

    def validate(self, attrs):
        if not attrs.get("sameAsShipping") and not attrs.get("billingAddress"):
            raise serializers.ValidationError(
                {"billingAddress": "This field is required unless sameAsShipping is true."}
            )
        if attrs["paymentMethod"] == PaymentMethod.CREDIT_CARD:
            self._validate_card(attrs)
        for name in CARD_FIELDS:
            attrs.pop(name, None)
        return attrs


class CheckoutResultSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(source="order_id")
    orderNumber = serializers.CharField(source="order_number")


class OrderItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField()
    product_image = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    price = serializers.CharField()
    total = serializers.CharField()


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_number = serializers.CharField()
    user_id = serializers.IntegerField()
    items = OrderItemSerializer(many=True)
    subtotal = serializers.CharField()
    shipping = serializers.CharField()
    vat = serializers.CharField()
    total = serializers.CharField()
    status = serializers.CharField()
    payment_status = serializers.CharField()
    shipping_address = serializers.DictField()
    billing_address = serializers.DictField()
    payment_method = serializers.CharField()
    notes = serializers.CharField(allow_blank=True)
    created_at = serializers.CharField()
    updated_at = serializers.CharField()
    contact_email = serializers.CharField(allow_blank=True)


class OrderListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False, default=10)


class AdminOrderListQuerySerializer(OrderListQuerySerializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False, default=20)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ProductStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    active = serializers.IntegerField()
    inactive = serializers.IntegerField()


class OrderStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    revenue = serializers.CharField()


class AdminStatsSerializer(serializers.Serializer):
    products = ProductStatsSerializer()
    orders = OrderStatsSerializer()
    recentOrders = OrderReadSerializer(source="recent_orders", many=True)
