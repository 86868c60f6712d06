from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'designs'

# No API root view: it would shadow the list route at the empty prefix
router = SimpleRouter()
router.register(r'', views.ReceiptTemplateViewSet, basename='template')

urlpatterns = [
    # Template ViewSet routes
    # GET    /api/templates/                     - List templates (?scope=mine|public|all)
    # POST   /api/templates/                     - Create template
    # GET    /api/templates/{id}/                - Get template
    # PUT    /api/templates/{id}/                - Update template
    # PATCH  /api/templates/{id}/                - Partial update
    # DELETE /api/templates/{id}/                - Delete template

    # Custom template actions
    # GET    /api/templates/{id}/layout/           - Resolved layout
    # GET    /api/templates/{id}/default_charges/  - Charges seeded into new receipts

    path('', include(router.urls)),
]
