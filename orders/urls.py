from django.urls import path
from . import views


urlpatterns = [
    path('', views.OrderListView.as_view(), name='order-list'),
    path('create/', views.OrderCreateView.as_view(), name='order-create'),
    path('customer/', views.CustomerOrderCreateView.as_view(), name='order-customer-create'),
    path('today/', views.today_orders, name='order-today'),
    path('stats/', views.order_stats, name='order-stats'),
    path('<int:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<int:pk>/status/', views.update_order_status, name='order-status'),
    path('<int:pk>/receipt/', views.order_receipt, name='order-receipt'),
]
