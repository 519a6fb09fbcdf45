from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import IsStaffOrReadOnly, is_staff_user
from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.common import get_logger
from .commands import ProductCreateCommand, ProductSearchCommand, ProductUpdateCommand
from .container import build_product_service
from .serializers import (
    FeaturedQuerySerializer,
    ProductReadSerializer,
    ProductSearchQuerySerializer,
    ProductWriteSerializer,
    RelatedQuerySerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [IsStaffOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Active products only. Cached pages may be served.",
        parameters=[ProductSearchQuerySerializer],
        responses={
            200: paginated_response(ProductReadSerializer, items_field="products"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        serializer = ProductSearchQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        command = ProductSearchCommand.from_validated(serializer.validated_data)
        self.log.debug(
            "Handling product list request",
            category=command.category,
            page=command.page.page,
        )
        page = self.service.list_products(command)
        return Response(
            {
                "products": ProductReadSerializer(page.products, many=True).data,
                "pagination": page.pagination,
            }
        )

    @extend_schema(
        summary="Create product",
        request=ProductWriteSerializer,
        responses={
            201: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.create_product(
            ProductCreateCommand.from_validated(serializer.validated_data)
        )
        self.log.info("Product created via API", product_id=dto.id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [IsStaffOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.get_product(
            product_id, include_inactive=is_staff_user(request.user)
        )
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Update product",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, product_id: int):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.log.info("Patching product", product_id=product_id)
        dto = self.service.update_product(
            ProductUpdateCommand.from_validated(product_id, serializer.validated_data)
        )
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Deactivate product",
        description="Soft delete. Past orders keep their line snapshots.",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, product_id: int):
        self.log.info("Deactivating product", product_id=product_id)
        self.service.deactivate_product(product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Catalog"])
class ProductBySlugView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()

    @extend_schema(
        summary="Get product by slug",
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, slug: str):
        return Response(ProductReadSerializer(self.service.get_product_by_slug(slug)).data)


@extend_schema(tags=["Catalog"])
class FeaturedProductsView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()

    @extend_schema(
        summary="Featured products",
        parameters=[FeaturedQuerySerializer],
        responses={200: ProductReadSerializer(many=True)},
    )
    def get(self, request):
        serializer = FeaturedQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        dtos = self.service.featured_products(serializer.validated_data["limit"])
        return Response(ProductReadSerializer(dtos, many=True).data)


@extend_schema(tags=["Catalog"])
class RelatedProductsView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()

    @extend_schema(
        summary="Products related by category",
        parameters=[RelatedQuerySerializer],
        responses={
            200: ProductReadSerializer(many=True),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        serializer = RelatedQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        dtos = self.service.related_products(
            product_id, serializer.validated_data["limit"]
        )
        return Response(ProductReadSerializer(dtos, many=True).data)
