from django.urls import path
from . import views


urlpatterns = [
    path('items/', views.MenuItemListCreateView.as_view(), name='menu-list-create'),
    path('items/active/', views.active_menu_items, name='menu-active'),
    path('items/category/<str:category>/', views.menu_by_category, name='menu-by-category'),
    path('items/<int:pk>/', views.MenuItemRetrieveUpdateDestroyView.as_view(), name='menu-detail'),
    path('items/<int:pk>/activate/', views.activate_menu_item, name='menu-activate'),
    path('items/<int:pk>/deactivate/', views.deactivate_menu_item, name='menu-deactivate'),
]
