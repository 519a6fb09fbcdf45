import types
import unittest
from unittest.mock import Mock, patch

from rest_framework import status
from rest_framework.test import APIRequestFactory, force_authenticate

from apps.catalog.dtos import ProductDTO, ProductPageDTO
from apps.catalog.views import (
    FeaturedProductsView,
    ProductBySlugView,
    ProductDetailView,
    ProductListView,
)
from apps.common.errors import ConflictError, NotFoundError


def make_product_dto(product_id=1, name="Widget"):
    return ProductDTO(
        id=product_id,
        name=name,
        slug=name.lower(),
        sku=f"SKU-{product_id}",
        description="A product",
        price="10.00",
        stock=3,
        in_stock=True,
        images=["/img.jpg"],
        category="accessories",
        brand="",
        tags=[],
        specifications={},
        is_active=True,
        featured=False,
        created_at="2024-01-01T00:00:00+00:00",
        updated_at="2024-01-01T00:00:00+00:00",
    )


def make_user(**flags):
    return types.SimpleNamespace(
        id=flags.get("id", 1),
        is_authenticated=True,
        is_staff=flags.get("is_staff", False),
        is_superuser=False,
    )


class CatalogViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_product_list_parses_filters(self):
        service = Mock()
        service.list_products.return_value = ProductPageDTO(
            products=[make_product_dto()],
            pagination={"currentPage": 2, "totalPages": 2},
        )
        request = self.factory.get(
            "/api/products/",
            {"category": "speakers", "sortBy": "price-low", "page": 2, "limit": 1},
        )
        with patch.object(ProductListView, "service", service):
            response = ProductListView.as_view()(request)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["products"][0]["sku"], "SKU-1")
        command = service.list_products.call_args[0][0]
        self.assertEqual(command.category, "speakers")
        self.assertEqual(command.ordering, ("price", "id"))
        self.assertEqual(command.page.limit, 1)

    def test_product_list_rejects_large_limit(self):
        service = Mock()
        request = self.factory.get("/api/products/", {"limit": 500})
        with patch.object(ProductListView, "service", service):
            response = ProductListView.as_view()(request)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        service.list_products.assert_not_called()

    def test_create_requires_staff(self):
        service = Mock()
        request = self.factory.post("/api/products/", {}, format="json")
        force_authenticate(request, user=make_user())
        with patch.object(ProductListView, "service", service):
            response = ProductListView.as_view()(request)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        service.create_product.assert_not_called()

    def test_create_product_as_staff(self):
        service = Mock()
        service.create_product.return_value = make_product_dto(7, "Cable")
        payload = {
            "name": "Cable",
            "sku": "acc-007",
            "description": "Braided",
            "price": "9.99",
            "category": "accessories",
            "images": ["/img/cable.jpg"],
            "tags": ["Wired"],
        }
        request = self.factory.post("/api/products/", payload, format="json")
        force_authenticate(request, user=make_user(is_staff=True))
        with patch.object(ProductListView, "service", service):
            response = ProductListView.as_view()(request)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        command = service.create_product.call_args[0][0]
        self.assertEqual(command.sku, "ACC-007")
        self.assertEqual(command.tags, ["wired"])

    def test_create_product_conflict(self):
        service = Mock()
        service.create_product.side_effect = ConflictError(
            "SKU already exists", details={"sku": "ACC-007"}
        )
        payload = {
            "name": "Cable",
            "sku": "ACC-007",
            "description": "Braided",
            "price": "9.99",
            "category": "accessories",
            "images": ["/img/cable.jpg"],
        }
        request = self.factory.post("/api/products/", payload, format="json")
        force_authenticate(request, user=make_user(is_staff=True))
        with patch.object(ProductListView, "service", service):
            response = ProductListView.as_view()(request)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "CONFLICT")

    def test_detail_not_found(self):
        service = Mock()
        service.get_product.side_effect = NotFoundError("Product not found")
        request = self.factory.get("/api/products/9/")
        with patch.object(ProductDetailView, "service", service):
            response = ProductDetailView.as_view()(request, product_id=9)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_is_soft(self):
        service = Mock()
        request = self.factory.delete("/api/products/3/")
        force_authenticate(request, user=make_user(is_staff=True))
        with patch.object(ProductDetailView, "service", service):
            response = ProductDetailView.as_view()(request, product_id=3)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        service.deactivate_product.assert_called_once_with(3)

    def test_slug_and_featured(self):
        service = Mock()
        service.get_product_by_slug.return_value = make_product_dto(2, "Speaker")
        service.featured_products.return_value = [make_product_dto()]
        with patch.object(ProductBySlugView, "service", service):
            response = ProductBySlugView.as_view()(
                self.factory.get("/api/products/slug/speaker/"), slug="speaker"
            )
        self.assertEqual(response.data["id"], 2)
        with patch.object(FeaturedProductsView, "service", service):
            response = FeaturedProductsView.as_view()(
                self.factory.get("/api/products/featured/", {"limit": 2})
            )
        self.assertEqual(len(response.data), 1)
        service.featured_products.assert_called_once_with(2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
