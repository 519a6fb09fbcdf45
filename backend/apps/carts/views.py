from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.auth.identity import resolve_shopper
from apps.common import get_logger
from .commands import CartItemCommand, CartQuantityCommand
from .container import build_cart_service
from .serializers import (
    CartItemWriteSerializer,
    CartQuantitySerializer,
    CartReadSerializer,
    CartTotalsSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

CART_SESSION_PARAMETER = OpenApiParameter(
    name="X-Cart-Session",
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Anonymous cart token, used when no bearer token is sent",
)

ERROR_RESPONSES = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
}


@extend_schema(tags=["Cart"], parameters=[CART_SESSION_PARAMETER])
class CartView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="Get the current cart",
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def get(self, request):
        identity = resolve_shopper(request)
        return Response(CartReadSerializer(self.service.get_cart(identity)).data)

    @extend_schema(summary="Clear the cart", responses={204: None, **ERROR_RESPONSES})
    def delete(self, request):
        identity = resolve_shopper(request)
        self.log.info("Clearing cart", owner=str(identity))
        self.service.clear_cart(identity)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Cart"], parameters=[CART_SESSION_PARAMETER])
class CartTotalsView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()

    @extend_schema(
        summary="Cart totals",
        description="Item count, subtotal at current prices, shipping, VAT and total.",
        responses={200: CartTotalsSerializer, **ERROR_RESPONSES},
    )
    def get(self, request):
        identity = resolve_shopper(request)
        return Response(CartTotalsSerializer(self.service.get_totals(identity)).data)


@extend_schema(tags=["Cart"], parameters=[CART_SESSION_PARAMETER])
class CartItemsView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartItemsView")

    @extend_schema(
        summary="Add a product to the cart",
        description="Adds to the existing quantity when the product is already in the cart.",
        request=CartItemWriteSerializer,
        responses={
            200: CartReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **ERROR_RESPONSES,
        },
    )
    def post(self, request):
        identity = resolve_shopper(request)
        serializer = CartItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartItemCommand.from_raw(serializer.validated_data)
        self.log.debug(
            "Add to cart requested",
            owner=str(identity),
            product_id=command.product_id,
            quantity=command.quantity,
        )
        dto = self.service.add_item(identity, command)
        return Response(CartReadSerializer(dto).data)


@extend_schema(tags=["Cart"], parameters=[CART_SESSION_PARAMETER])
class CartItemDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Set a line quantity",
        description="A quantity of zero or less removes the line.",
        request=CartQuantitySerializer,
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def patch(self, request, product_id: int):
        identity = resolve_shopper(request)
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartQuantityCommand.from_raw(product_id, serializer.validated_data)
        dto = self.service.update_quantity(identity, command)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(summary="Remove a line", responses={200: CartReadSerializer, **ERROR_RESPONSES})
    def delete(self, request, product_id: int):
        identity = resolve_shopper(request)
        dto = self.service.remove_item(identity, product_id)
        return Response(CartReadSerializer(dto).data)
