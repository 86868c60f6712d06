from django.conf import settings
from django.http import HttpResponse
from rest_framework import serializers as drf_serializers
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.designs.layout_config import TemplateLayout
from apps.designs.services import SCOPE_ALL, visibility_filter
from apps.menus.services import (
    InactiveMenuItemError,
    MenuItemNotFoundError,
)

from .calculator import compute
from .exceptions import QRCodeUnavailableError, RenderingUnavailableError
from .models import Receipt
from .permissions import IsReceiptOwnerOrPublicReadOnly
from .presentation import as_dict, compose_receipt_layout
from .serializers import (
    AddMenuItemSerializer,
    BreakdownSerializer,
    CalculateInputSerializer,
    ImageQuerySerializer,
    LineItemInputSerializer,
    LineItemUpdateSerializer,
    QRCodeQuerySerializer,
    ReceiptFilterSerializer,
    ReceiptListSerializer,
    ReceiptSerializer,
    ReceiptWriteSerializer,
)
from .services import (
    AmountOutOfRangeError,
    add_line_item,
    add_menu_item_to_receipt,
    build_line_items,
    build_receipt_url,
    create_receipt,
    delete_receipt,
    encode_url,
    list_visible_receipts,
    remove_line_item,
    render_receipt_image,
    update_line_item,
    update_receipt,
    # Exceptions
    EmptyReceiptError,
    InsufficientPermissionsError,
    LastLineItemError,
    LineItemNotFoundError,
    QRCodeGenerationError,
    ReceiptNotFoundError,
    ReceiptRenderingError,
    TemplateNotAvailableError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class ReceiptPagination(PageNumberPagination):
    """Custom pagination for receipts."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _error(e, code):
    return Response({'error': str(e)}, status=code)


def _layout_payload(receipt: Receipt) -> dict:
    template_layout = receipt.template.get_layout() if receipt.template else TemplateLayout()
    return as_dict(compose_receipt_layout(
        receipt.get_line_items(),
        receipt.calculate(),
        template_layout,
        currency_symbol=settings.RECEIPT_CURRENCY_SYMBOL,
    ))


class ReceiptViewSet(viewsets.ModelViewSet):
    """
    ViewSet for receipts.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Receipts visible to the user (``?scope=mine|public|all``)
    create: Create a receipt (charges seeded from the template)
    retrieve: Get a receipt (public, or own private)
    update: Update a receipt (owner only)
    partial_update: Partially update a receipt (owner only)
    destroy: Delete a receipt (owner only)
    """

    serializer_class = ReceiptSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsReceiptOwnerOrPublicReadOnly]
    pagination_class = ReceiptPagination

    def get_queryset(self):
        """Private receipts of other users are hidden, so they 404."""
        if self.action == 'list':
            filters = ReceiptFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            return list_visible_receipts(
                user=self.request.user,
                scope=filters.validated_data['scope'],
            )
        return (
            Receipt.objects
            .filter(visibility_filter(self.request.user, SCOPE_ALL))
            .select_related('template', 'created_by')
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return ReceiptListSerializer
        elif self.action in ['create', 'update', 'partial_update']:
            return ReceiptWriteSerializer
        return ReceiptSerializer

    def _output(self, receipt, code=status.HTTP_200_OK):
        serializer = ReceiptSerializer(receipt, context={'request': self.request})
        return Response(serializer.data, status=code)

    @extend_schema(
        parameters=[
            OpenApiParameter('scope', OpenApiTypes.STR, description='mine, public or all', default=SCOPE_ALL),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=ReceiptWriteSerializer, responses={201: ReceiptSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Create a new receipt."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        items = data.pop('items')

        try:
            receipt = create_receipt(user=request.user, items=items, **data)
        except (EmptyReceiptError, TemplateNotAvailableError, AmountOutOfRangeError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return self._output(receipt, status.HTTP_201_CREATED)

    @extend_schema(request=ReceiptWriteSerializer, responses={200: ReceiptSerializer, 400: ErrorResponseSerializer})
    def update(self, request, *args, **kwargs):
        """Update a receipt (owner only). Template changes never reseed charges."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        items = data.pop('items', None)

        try:
            receipt = update_receipt(receipt_id=instance.id, user=request.user, items=items, **data)
        except ReceiptNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except (EmptyReceiptError, TemplateNotAvailableError, AmountOutOfRangeError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return self._output(receipt)

    def destroy(self, request, *args, **kwargs):
        """Delete a receipt (owner only)."""
        instance = self.get_object()
        try:
            delete_receipt(receipt_id=instance.id, user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except ReceiptNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)

    @extend_schema(
        request=CalculateInputSerializer,
        responses={200: OpenApiTypes.OBJECT},
        description="Calculate the breakdown of an unsaved receipt, optionally with its composed layout.",
        tags=['receipts'],
    )
    @action(detail=False, methods=['post'], permission_classes=[AllowAny])
    def calculate(self, request):
        """Stateless calculation for receipts being edited."""
        serializer = CalculateInputSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        items = build_line_items(serializer.validated_data['items'])
        config = serializer.get_charge_config()
        breakdown = compute(items, config)

        payload = {'breakdown': BreakdownSerializer(breakdown.quantized()).data}

        if serializer.validated_data['include_layout']:
            template = serializer.validated_data.get('template')
            template_layout = template.get_layout() if template else TemplateLayout()
            payload['layout'] = as_dict(compose_receipt_layout(
                items,
                breakdown,
                template_layout,
                currency_symbol=settings.RECEIPT_CURRENCY_SYMBOL,
            ))

        return Response(payload)

    @extend_schema(
        responses={200: OpenApiTypes.OBJECT, 404: ErrorResponseSerializer},
        description="Receipt with its breakdown and the composed layout used by the image export.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['get'])
    def preview(self, request, pk=None):
        """Get the composed receipt layout."""
        receipt = self.get_object()
        return Response({
            'receipt': ReceiptSerializer(receipt, context={'request': request}).data,
            'breakdown': BreakdownSerializer(receipt.calculate().quantized()).data,
            'layout': _layout_payload(receipt),
        })

    @extend_schema(
        parameters=[
            OpenApiParameter('scale', OpenApiTypes.INT, description='Pixel density 1..4'),
            OpenApiParameter('background', OpenApiTypes.STR, description='Background colour override'),
        ],
        responses={(200, 'image/png'): OpenApiTypes.BINARY, 503: ErrorResponseSerializer},
        description="Receipt exported as a PNG image.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['get'])
    def image(self, request, pk=None):
        """Render the receipt as PNG."""
        receipt = self.get_object()
        query = ImageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            png = render_receipt_image(
                receipt,
                scale=query.validated_data.get('scale'),
                background_color=query.validated_data.get('background'),
            )
        except ReceiptRenderingError:
            raise RenderingUnavailableError()

        response = HttpResponse(png, content_type='image/png')
        response['Content-Disposition'] = f'inline; filename="{receipt.receipt_number}.png"'
        return response

    @extend_schema(
        parameters=[
            OpenApiParameter('size', OpenApiTypes.INT, description='Image side in pixels'),
        ],
        responses={(200, 'image/png'): OpenApiTypes.BINARY, 503: ErrorResponseSerializer},
        description="QR code linking to the public receipt URL.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['get'])
    def qr_code(self, request, pk=None):
        """Get QR code for the receipt."""
        receipt = self.get_object()
        query = QRCodeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        base_url = settings.RECEIPT_PUBLIC_BASE_URL or request.build_absolute_uri('/')
        size = query.validated_data.get('size', settings.RECEIPT_QR_SIZE)

        try:
            png = encode_url(build_receipt_url(receipt, base_url), size=size)
        except QRCodeGenerationError:
            raise QRCodeUnavailableError()

        return HttpResponse(png, content_type='image/png')

    @extend_schema(
        request=LineItemInputSerializer,
        responses={
            201: ReceiptSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        description="Append a line item.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['post'], url_path='items')
    def add_item(self, request, pk=None):
        """Add a line item."""
        receipt = self.get_object()
        serializer = LineItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            receipt, _ = add_line_item(
                receipt_id=receipt.id,
                user=request.user,
                description=serializer.validated_data['description'],
                quantity=serializer.validated_data['quantity'],
                unit_price=serializer.validated_data['unit_price'],
                item_id=serializer.validated_data.get('id'),
            )
        except ReceiptNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except AmountOutOfRangeError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return self._output(receipt, status.HTTP_201_CREATED)

    @extend_schema(
        request=LineItemUpdateSerializer,
        responses={200: ReceiptSerializer, 204: None, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Edit (PATCH) or remove (DELETE) a line item. The last item cannot be removed.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['patch', 'delete'], url_path=r'items/(?P<item_id>[^/.]+)')
    def item(self, request, pk=None, item_id=None):
        """Edit or remove a line item."""
        receipt = self.get_object()

        try:
            if request.method == 'DELETE':
                remove_line_item(receipt_id=receipt.id, user=request.user, item_id=item_id)
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = LineItemUpdateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            receipt, _ = update_line_item(
                receipt_id=receipt.id,
                user=request.user,
                item_id=item_id,
                **serializer.validated_data
            )
        except (ReceiptNotFoundError, LineItemNotFoundError) as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except (LastLineItemError, AmountOutOfRangeError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return self._output(receipt)

    @extend_schema(
        request=AddMenuItemSerializer,
        responses={201: ReceiptSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Append a line item pre-filled from an active menu item.",
        tags=['receipts'],
    )
    @action(detail=True, methods=['post'])
    def add_menu_item(self, request, pk=None):
        """Add a menu item as a line item."""
        receipt = self.get_object()
        serializer = AddMenuItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            receipt, _ = add_menu_item_to_receipt(
                receipt_id=receipt.id,
                user=request.user,
                menu_item_id=serializer.validated_data['menu_item'],
                quantity=serializer.validated_data['quantity'],
            )
        except (ReceiptNotFoundError, MenuItemNotFoundError) as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        except (InactiveMenuItemError, TemplateNotAvailableError, AmountOutOfRangeError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return self._output(receipt, status.HTTP_201_CREATED)
