import logging

from rest_framework import generics, status, filters
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from authentication.permissions import IsManager, IsManagerOrReadOnly, IsStaffMember
from .models import MenuItem
from .serializers import MenuItemSerializer, MenuItemStatusSerializer

logger = logging.getLogger(__name__)


class MenuItemListCreateView(generics.ListCreateAPIView):
    """
    get: List all menu items in menu order (staff)
    post: Create a new menu item (managers only)
    """
    serializer_class = MenuItemSerializer
    permission_classes = [IsManagerOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['category', 'is_active']
    search_fields = ['name', 'description']
    pagination_class = None

    def get_queryset(self):
        return MenuItem.objects.in_menu_order()

    def perform_create(self, serializer):
        item = serializer.save()
        logger.info(f"Menu item created: {item.name} ({item.category}) by {self.request.user.email}")


class MenuItemRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    get: Get menu item details (staff)
    put/patch: Update menu item (managers only)
    delete: Delete menu item (managers only); past orders keep their item snapshot
    """
    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    permission_classes = [IsManagerOrReadOnly]

    def perform_destroy(self, instance):
        logger.info(f"Menu item deleted: {instance.name} by {self.request.user.email}")
        instance.delete()


@swagger_auto_schema(method='get', responses={200: MenuItemSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsStaffMember])
def active_menu_items(request):
    """Items that can be put on an order, in menu order"""
    items = MenuItem.objects.active().in_menu_order()
    return Response(MenuItemSerializer(items, many=True).data)


@swagger_auto_schema(
    method='get',
    manual_parameters=[
        openapi.Parameter('category', openapi.IN_PATH, type=openapi.TYPE_STRING,
                          enum=list(MenuItem.Category.values)),
    ],
    responses={200: MenuItemSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([IsStaffMember])
def menu_by_category(request, category):
    """Get all menu items for a specific category"""
    if category not in MenuItem.Category.values:
        raise ValidationError({'category': f"Unknown category '{category}'."})

    items = MenuItem.objects.filter(category=category).order_by('name')
    return Response({
        'category': category,
        'menu_items': MenuItemSerializer(items, many=True).data
    })


def _set_active(request, pk, is_active):
    item = get_object_or_404(MenuItem, pk=pk)
    if item.is_active != is_active:
        item.is_active = is_active
        item.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Menu item {item.name} {'activated' if is_active else 'deactivated'} by {request.user.email}")
    return Response(MenuItemStatusSerializer(item).data, status=status.HTTP_200_OK)


@swagger_auto_schema(method='post', responses={200: MenuItemStatusSerializer})
@api_view(['POST'])
@permission_classes([IsManager])
def activate_menu_item(request, pk):
    return _set_active(request, pk, True)


@swagger_auto_schema(method='post', responses={200: MenuItemStatusSerializer})
@api_view(['POST'])
@permission_classes([IsManager])
def deactivate_menu_item(request, pk):
    return _set_active(request, pk, False)
