from dataclasses import asdict

from rest_framework import serializers as drf_serializers
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.receipts.serializers import ChargeSettingsSerializer

from .layout import resolve_item_columns, resolve_separator, visible_item_columns
from .models import ReceiptTemplate
from .permissions import IsTemplateOwnerOrReadOnly
from .serializers import (
    ReceiptTemplateListSerializer,
    ReceiptTemplateSerializer,
    ScopeFilterSerializer,
)
from .services import (
    SCOPE_ALL,
    create_template,
    delete_template,
    list_visible_templates,
    update_template,
    visibility_filter,
    # Exceptions
    InsufficientPermissionsError,
    TemplateNotFoundError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class TemplatePagination(PageNumberPagination):
    """Custom pagination for templates."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ReceiptTemplateViewSet(viewsets.ModelViewSet):
    """
    ViewSet for receipt template CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Templates visible to the user (``?scope=mine|public|all``)
    create: Create a template owned by the user
    retrieve: Get a template (public, or own private)
    update: Update a template (owner only)
    partial_update: Partially update a template (owner only)
    destroy: Delete a template (owner only)
    """

    serializer_class = ReceiptTemplateSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsTemplateOwnerOrReadOnly]
    pagination_class = TemplatePagination

    def get_queryset(self):
        """Private templates of other users are hidden, so they 404."""
        if self.action == 'list':
            filters = ScopeFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            return list_visible_templates(
                user=self.request.user,
                scope=filters.validated_data['scope'],
            )
        return (
            ReceiptTemplate.objects
            .filter(visibility_filter(self.request.user, SCOPE_ALL))
            .select_related('created_by')
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return ReceiptTemplateListSerializer
        return ReceiptTemplateSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('scope', OpenApiTypes.STR, description='mine, public or all', default=SCOPE_ALL),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        """Create a new template."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        template = create_template(user=request.user, **serializer.validated_data)

        output_serializer = ReceiptTemplateSerializer(template, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update a template (owner only)."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            template = update_template(
                template_id=instance.id,
                user=request.user,
                **serializer.validated_data
            )
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = ReceiptTemplateSerializer(template, context={'request': request})
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete a template (owner only)."""
        instance = self.get_object()
        try:
            delete_template(template_id=instance.id, user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    @extend_schema(
        responses={200: OpenApiTypes.OBJECT, 404: ErrorResponseSerializer},
        description="Normalized layout of the template with resolved item columns and separator geometry.",
        tags=['templates'],
    )
    @action(detail=True, methods=['get'])
    def layout(self, request, pk=None):
        """Get the resolved layout."""
        template = self.get_object()
        layout = template.get_layout()

        return Response({
            'layout': asdict(layout),
            'item_columns': [asdict(column) for column in resolve_item_columns(layout)],
            'visible_columns': [column.key for column in visible_item_columns(layout)],
            'separator': asdict(resolve_separator(layout)),
            'total_separator': asdict(resolve_separator(layout, double=True)),
        })

    @extend_schema(
        responses={200: ChargeSettingsSerializer, 404: ErrorResponseSerializer},
        description="Charge settings a new receipt starts with when this template is selected.",
        tags=['templates'],
    )
    @action(detail=True, methods=['get'])
    def default_charges(self, request, pk=None):
        """Get the default charge settings."""
        template = self.get_object()
        serializer = ChargeSettingsSerializer.from_config(template.default_charge_config())
        return Response(serializer.data)
