from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'menus'

# No API root view: it would shadow the list route at the empty prefix
router = SimpleRouter()
router.register(r'', views.MenuItemViewSet, basename='menu-item')

urlpatterns = [
    # Menu item ViewSet routes
    # GET    /api/menu-items/?template={id}      - List a template's menu
    # POST   /api/menu-items/                    - Create menu item
    # GET    /api/menu-items/{id}/               - Get menu item
    # PUT    /api/menu-items/{id}/               - Update menu item
    # PATCH  /api/menu-items/{id}/               - Partial update
    # DELETE /api/menu-items/{id}/               - Delete menu item

    # Custom actions
    # GET    /api/menu-items/categories/?template={id} - Categories in use

    path('', include(router.urls)),
]
