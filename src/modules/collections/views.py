"""Collection API views.

Exposes ``CollectionService`` over HTTP.  Domain exceptions are caught
and translated into HTTP status codes; anything else propagates.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.collections.dtos import CreateCollectionDTO, UpdateCollectionDTO
from modules.collections.exceptions import (
    CollectionAlreadyExists,
    CollectionHasProducts,
    CollectionNotFound,
)
from modules.collections.models import Collection
from modules.collections.repositories.django_repository import (
    CollectionDjangoRepository,
)
from modules.collections.serializers import CollectionSerializer
from modules.collections.services import CollectionService
from modules.core.exceptions import InvalidIdentifier

DOMAIN_ERRORS = (
    InvalidIdentifier,
    CollectionNotFound,
    CollectionAlreadyExists,
    CollectionHasProducts,
)

ERROR_STATUS = {
    InvalidIdentifier: status.HTTP_400_BAD_REQUEST,
    CollectionNotFound: status.HTTP_404_NOT_FOUND,
    CollectionAlreadyExists: status.HTTP_409_CONFLICT,
    CollectionHasProducts: status.HTTP_409_CONFLICT,
}


def _error(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=ERROR_STATUS[type(exc)])


class CollectionViewSet(GenericViewSet):
    """ViewSet for Collection CRUD; ORM access goes through the service."""

    queryset = Collection.objects.all()
    serializer_class = CollectionSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CollectionService(repository=CollectionDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/collections/?active=true"""
        active_only = request.query_params.get("active", "").lower() == "true"
        collections = self._service.list_collections(active_only=active_only)
        return Response(CollectionSerializer(collections, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/collections/{pk}/"""
        try:
            collection = self._service.get_collection(pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(CollectionSerializer(collection).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/collections/"""
        try:
            dto = CreateCollectionDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            collection = self._service.create_collection(dto)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(
            CollectionSerializer(collection).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/collections/{pk}/"""
        try:
            dto = UpdateCollectionDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            collection = self._service.update_collection(pk, dto)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(CollectionSerializer(collection).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/collections/{pk}/"""
        try:
            self._service.delete_collection(pk)
        except DOMAIN_ERRORS as exc:
            return _error(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
