from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'receipts'

# No API root view: it would shadow the list route at the empty prefix
router = SimpleRouter()
router.register(r'', views.ReceiptViewSet, basename='receipt')

urlpatterns = [
    # Receipt ViewSet routes
    # GET    /api/receipts/                      - List receipts (?scope=mine|public|all)
    # POST   /api/receipts/                      - Create receipt
    # GET    /api/receipts/{id}/                 - Get receipt
    # PUT    /api/receipts/{id}/                 - Update receipt
    # PATCH  /api/receipts/{id}/                 - Partial update
    # DELETE /api/receipts/{id}/                 - Delete receipt

    # Custom receipt actions
    # POST   /api/receipts/calculate/                 - Breakdown of an unsaved receipt
    # GET    /api/receipts/{id}/preview/              - Breakdown and composed layout
    # GET    /api/receipts/{id}/image/                - PNG export (?scale=)
    # GET    /api/receipts/{id}/qr_code/              - QR code PNG (?size=)
    # POST   /api/receipts/{id}/items/                - Add line item
    # PATCH  /api/receipts/{id}/items/{item_id}/      - Edit line item
    # DELETE /api/receipts/{id}/items/{item_id}/      - Remove line item
    # POST   /api/receipts/{id}/add_menu_item/        - Add line item from menu

    path('', include(router.urls)),
]
