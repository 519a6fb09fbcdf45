from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger
from .container import (
    build_address_book_service,
    build_registration_service,
    build_session_service,
)
from .identity import require_user_id
from .serializers import (
    AddressResponseSerializer,
    AddressWriteSerializer,
    CustomerTokenObtainPairSerializer,
    DetailResponseSerializer,
    LogoutRequestSerializer,
    MeResponseSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    StaffTokenObtainPairSerializer,
    UsernameAvailabilityRequestSerializer,
    UsernameAvailabilityResponseSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class UsernameAvailabilityView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="UsernameAvailabilityView")

    @extend_schema(
        summary="Check username availability",
        parameters=[
            OpenApiParameter(
                name="username",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Username to check for uniqueness",
            )
        ],
        responses={
            200: UsernameAvailabilityResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        serializer = UsernameAvailabilityRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["username"]
        available = self.service.is_username_available(username)
        self.log.debug(
            "Username availability checked", username=username, available=available
        )
        payload = {"username": username, "available": available}
        return Response(
            UsernameAvailabilityResponseSerializer(payload).data,
            status=status.HTTP_200_OK,
        )


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register user",
        request=RegisterRequestSerializer,
        responses={
            201: RegisterResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Processing registration request",
            username=serializer.validated_data.get("username"),
        )
        result = self.service.register(serializer.validated_data)
        self.log.info("Registration completed", user_id=result["id"])
        return Response(
            RegisterResponseSerializer(result).data, status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Auth"], summary="Login (JWT obtain pair)")
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = CustomerTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(tags=["Auth"], summary="Staff/Admin Login (JWT obtain pair)")
class StaffLoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = StaffTokenObtainPairSerializer


@extend_schema(
    tags=["Auth"], summary="Get current user", responses={200: MeResponseSerializer}
)
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    def get(self, request):
        user = request.user
        self.log.debug("Returning current user profile", user_id=user.id)
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "first_name": getattr(user, "first_name", ""),
            "last_name": getattr(user, "last_name", ""),
            "phone": getattr(user, "phone", None),
            "last_login": getattr(user, "last_login", None),
            "date_joined": getattr(user, "date_joined", None),
            "is_staff": bool(user.is_staff or user.is_superuser),
        }
        return Response(MeResponseSerializer(payload).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        actor_id = getattr(request.user, "id", None)
        self.service.logout(request.data.get("refresh"), actor_id)
        self.log.info("Logout completed", user_id=actor_id)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)


@extend_schema(tags=["Auth", "Addresses"])
class AddressListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_address_book_service()
    log = logger.bind(view="AddressListView")

    @extend_schema(
        summary="List saved addresses",
        responses={
            200: AddressResponseSerializer(many=True),
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        user_id = require_user_id(request)
        self.log.debug("Listing saved addresses", user_id=user_id)
        addresses = self.service.list_addresses(user_id)
        return Response(AddressResponseSerializer(addresses, many=True).data)

    @extend_schema(
        summary="Save an address",
        description=(
            "Adds a shipping or billing address to the signed-in user's address "
            "book. Saving it as default clears the previous default of the same type."
        ),
        request=AddressWriteSerializer,
        responses={
            201: AddressResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        user_id = require_user_id(request)
        serializer = AddressWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Saving address", user_id=user_id)
        dto = self.service.create_address(user_id, serializer.validated_data)
        return Response(
            AddressResponseSerializer(dto).data, status=status.HTTP_201_CREATED
        )


@extend_schema(
    tags=["Auth", "Addresses"],
    parameters=[OpenApiParameter("address_id", int, OpenApiParameter.PATH)],
)
class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_address_book_service()
    log = logger.bind(view="AddressDetailView")

    @extend_schema(
        summary="Update a saved address",
        request=AddressWriteSerializer,
        responses={
            200: AddressResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, address_id: int):
        user_id = require_user_id(request)
        serializer = AddressWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.log.info("Updating saved address", user_id=user_id, address_id=address_id)
        dto = self.service.update_address(
            user_id, address_id, serializer.validated_data
        )
        return Response(AddressResponseSerializer(dto).data)

    @extend_schema(
        summary="Delete a saved address",
        responses={
            204: None,
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, address_id: int):
        user_id = require_user_id(request)
        self.log.info("Deleting saved address", user_id=user_id, address_id=address_id)
        self.service.delete_address(user_id, address_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
