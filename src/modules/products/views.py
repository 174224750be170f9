"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.collections.repositories.django_repository import (
    CollectionDjangoRepository,
)
from modules.core.exceptions import InvalidIdentifier
from modules.products.dtos import UpdateProductDTO, UpdateSkusDTO, parse_create_product
from modules.products.exceptions import (
    NotProductOwner,
    ProductConflict,
    ProductNotFound,
    ProductRuleViolation,
)
from modules.products.models import Product
from modules.products.repositories.django_repository import (
    ProductDjangoRepository,
    SkuDjangoRepository,
)
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

# Ordered: subclasses resolve through their base (InactiveCollection is a
# ProductRuleViolation, both SKU conflicts are ProductConflicts).
ERROR_STATUS = (
    (InvalidIdentifier, status.HTTP_400_BAD_REQUEST),
    (ProductNotFound, status.HTTP_404_NOT_FOUND),
    (NotProductOwner, status.HTTP_403_FORBIDDEN),
    (ProductRuleViolation, status.HTTP_400_BAD_REQUEST),
    (ProductConflict, status.HTTP_409_CONFLICT),
)
DOMAIN_ERRORS = tuple(exc_class for exc_class, _ in ERROR_STATUS)


def _error(exc: Exception) -> Response:
    code = next(code for exc_class, code in ERROR_STATUS if isinstance(exc, exc_class))
    return Response({"detail": str(exc)}, status=code)


def _invalid(exc: PydanticValidationError) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(GenericViewSet):
    """ViewSet for the Product lifecycle.

    Uses ``ProductService`` with the Django repositories (DIP).  Does
    **not** extend ``ModelViewSet``; all ORM access goes through the
    service/repository layer.  Mutations are scoped to the caller, who
    becomes the owner on create.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            sku_repository=SkuDjangoRepository(),
            collection_lookup=CollectionDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        products = self._service.list_products()
        return Response(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/

        The body is tagged by ``type``: ``physical`` products may carry a
        ``shipping_model``, ``digital`` ones a ``file_url``.
        """
        try:
            dto = parse_create_product(request.data)
        except PydanticValidationError as exc:
            return _invalid(exc)

        try:
            product = self._service.create_product(dto, owner_id=request.user.pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        Only supplied fields change; the merged product is re-validated.
        """
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _invalid(exc)

        try:
            product = self._service.update_product(pk, dto, owner_id=request.user.pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="skus")
    def update_skus(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/skus/

        Accepts ``{"skus": [{"variant_combination": {...}, "price": ..., "quantity": ...}]}``.
        """
        try:
            dto = UpdateSkusDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _invalid(exc)

        try:
            product = self._service.update_skus(pk, dto, owner_id=request.user.pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk, owner_id=request.user.pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
