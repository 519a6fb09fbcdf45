from drf_spectacular.utils import inline_serializer
from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


class PaginationSerializer(serializers.Serializer):
    currentPage = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    totalCount = serializers.IntegerField()
    hasNextPage = serializers.BooleanField()
    hasPrevPage = serializers.BooleanField()


def paginated_response(
    item_serializer_class: type[serializers.Serializer],
    *,
    items_field: str = "results",
) -> type[serializers.Serializer]:
    """Create an inline paginated response serializer for the storefront page shape.

    Returns a serializer with fields: <items_field>[item_serializer], pagination.
    """
    name = getattr(item_serializer_class, "__name__", "Items")
    return inline_serializer(
        name=f"Paginated{name}",
        fields={
            items_field: item_serializer_class(many=True),
            "pagination": PaginationSerializer(),
        },
    )
