from django.db.models import Q
from rest_framework import serializers as drf_serializers
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.designs.services import TemplateNotFoundError, get_template_by_id

from .models import MenuItem
from .permissions import IsMenuTemplateOwnerOrReadOnly
from .serializers import (
    MenuCategoriesQuerySerializer,
    MenuItemFilterSerializer,
    MenuItemSerializer,
    MenuItemUpdateSerializer,
)
from .services import (
    create_menu_item,
    delete_menu_item,
    get_menu_categories,
    list_menu_items,
    update_menu_item,
    # Exceptions
    InsufficientPermissionsError,
    MenuItemNotFoundError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class MenuItemPagination(PageNumberPagination):
    """Custom pagination for menu items."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class MenuItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for menu items.

    list: Menu of one template (``?template=<uuid>`` required)
    create: Add an item at the end of a template's menu (template owner only)
    retrieve: Get a menu item
    update: Update a menu item (template owner only)
    partial_update: Partially update a menu item (template owner only)
    destroy: Delete a menu item (template owner only)
    """

    serializer_class = MenuItemSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsMenuTemplateOwnerOrReadOnly]
    pagination_class = MenuItemPagination

    def get_queryset(self):
        """Items of templates the user cannot see are hidden, so they 404."""
        user = self.request.user
        visible = Q(template__is_public=True)
        if user.is_authenticated:
            visible |= Q(template__created_by=user)
        return MenuItem.objects.filter(visible).select_related('template')

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action in ['update', 'partial_update']:
            return MenuItemUpdateSerializer
        return MenuItemSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('template', OpenApiTypes.UUID, required=True, description='Template ID'),
            OpenApiParameter('active', OpenApiTypes.BOOL, description='Only active items', default=False),
            OpenApiParameter('search', OpenApiTypes.STR, description='Search in name or description'),
            OpenApiParameter('category', OpenApiTypes.STR, description="Category, or 'uncategorized'"),
        ],
        responses={200: MenuItemSerializer(many=True), 404: ErrorResponseSerializer},
    )
    def list(self, request, *args, **kwargs):
        """List a template's menu."""
        filters = MenuItemFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        try:
            template = get_template_by_id(
                template_id=filters.validated_data['template'],
                user=request.user
            )
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        items = list_menu_items(
            template=template,
            active_only=filters.validated_data['active'],
            search=filters.validated_data.get('search'),
            category=filters.validated_data.get('category'),
        )

        page = self.paginate_queryset(items)
        if page is not None:
            serializer = MenuItemSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = MenuItemSerializer(items, many=True)
        return Response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Create a menu item."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        template = data.pop('template')

        if not template.is_visible_to(request.user):
            return Response({'error': 'Template not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            item = create_menu_item(template=template, user=request.user, **data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = MenuItemSerializer(item)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update a menu item."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            item = update_menu_item(
                item_id=instance.id,
                user=request.user,
                **serializer.validated_data
            )
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = MenuItemSerializer(item)
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete a menu item."""
        instance = self.get_object()
        try:
            delete_menu_item(item_id=instance.id, user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    @extend_schema(
        parameters=[
            OpenApiParameter('template', OpenApiTypes.UUID, required=True, description='Template ID'),
        ],
        responses={200: OpenApiTypes.OBJECT, 404: ErrorResponseSerializer},
        description="Distinct categories used in a template's menu.",
        tags=['menu-items'],
    )
    @action(detail=False, methods=['get'])
    def categories(self, request):
        """List menu categories of a template."""
        query = MenuCategoriesQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            template = get_template_by_id(template_id=query.validated_data['template'], user=request.user)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({'categories': get_menu_categories(template=template)})
