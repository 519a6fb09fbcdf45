from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import IsStaff
from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.auth.identity import require_user_id
from apps.common import get_logger
from .commands import AdminOrderListCommand, CheckoutCommand, OrderListCommand, OrderStatusCommand
from .container import build_admin_order_service, build_checkout_service, build_order_service
from .serializers import (
    AdminOrderListQuerySerializer,
    AdminStatsSerializer,
    CheckoutResultSerializer,
    CheckoutSerializer,
    OrderListQuerySerializer,
    OrderReadSerializer,
    OrderStatusUpdateSerializer,
)

logger = get_logger(__name__).bind(component="orders", layer="view")

ORDER_ID_PARAMETER = OpenApiParameter("order_id", int, OpenApiParameter.PATH)


@extend_schema(tags=["Orders"])
class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Place an order from the current cart",
        request=CheckoutSerializer,
        responses={
            201: CheckoutResultSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            402: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
            500: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        user_id = require_user_id(request)
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CheckoutCommand.from_validated(serializer.validated_data)
        self.log.info(
            "Checkout requested", user_id=user_id, payment_method=command.payment_method
        )
        result = self.service.checkout(user_id, command)
        return Response(
            CheckoutResultSerializer(result).data, status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Order history for the current user",
        parameters=[OrderListQuerySerializer],
        responses={
            200: paginated_response(OrderReadSerializer, items_field="orders"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        user_id = require_user_id(request)
        serializer = OrderListQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        page = self.service.list_orders(
            OrderListCommand.from_validated(user_id, serializer.validated_data)
        )
        return Response(
            {
                "orders": OrderReadSerializer(page.orders, many=True).data,
                "pagination": page.pagination,
            }
        )


@extend_schema(tags=["Orders"])
class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Get one of my orders",
        parameters=[ORDER_ID_PARAMETER],
        responses={
            200: OrderReadSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, order_id: int):
        user_id = require_user_id(request)
        return Response(OrderReadSerializer(self.service.get_order(user_id, order_id)).data)


@extend_schema(tags=["Admin"])
class AdminOrderListView(APIView):
    permission_classes = [IsStaff]
    service = build_admin_order_service()

    @extend_schema(
        summary="All orders",
        parameters=[AdminOrderListQuerySerializer],
        responses={
            200: paginated_response(OrderReadSerializer, items_field="orders"),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        serializer = AdminOrderListQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        page = self.service.list_orders(
            AdminOrderListCommand.from_validated(serializer.validated_data)
        )
        return Response(
            {
                "orders": OrderReadSerializer(page.orders, many=True).data,
                "pagination": page.pagination,
            }
        )


@extend_schema(tags=["Admin"])
class AdminOrderStatusView(APIView):
    permission_classes = [IsStaff]
    service = build_admin_order_service()
    log = logger.bind(view="AdminOrderStatusView")

    @extend_schema(
        summary="Move an order along its lifecycle",
        parameters=[ORDER_ID_PARAMETER],
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = OrderStatusCommand.from_validated(order_id, serializer.validated_data)
        self.log.info(
            "Order status update requested",
            order_id=order_id,
            status=command.status,
            staff_id=request.user.id,
        )
        return Response(OrderReadSerializer(self.service.update_status(command)).data)


@extend_schema(tags=["Admin"])
class AdminStatsView(APIView):
    permission_classes = [IsStaff]
    service = build_admin_order_service()

    @extend_schema(
        summary="Dashboard counters",
        responses={
            200: AdminStatsSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        return Response(AdminStatsSerializer(self.service.stats()).data)
