import logging

from rest_framework import status, generics, permissions, filters
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.permissions import IsManager, IsStaffMember
from finance.periods import range_from_query
from .filters import OrderFilter
from .models import Order
from .serializers import (
    OrderCreateSerializer, CustomerOrderCreateSerializer, OrderReadSerializer,
    OrderUpdateSerializer, OrderStatusSerializer, OrderReceiptSerializer,
    OrderStatsSerializer, order_statistics
)

logger = logging.getLogger(__name__)

ITEMS_SCHEMA = openapi.Schema(
    type=openapi.TYPE_ARRAY,
    items=openapi.Schema(
        type=openapi.TYPE_OBJECT,
        required=['menu_item_id', 'quantity'],
        properties={
            'menu_item_id': openapi.Schema(type=openapi.TYPE_INTEGER),
            'quantity': openapi.Schema(type=openapi.TYPE_INTEGER, minimum=1),
        }
    )
)

PERIOD_PARAMETERS = [
    openapi.Parameter('period', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                      enum=['today', 'week', 'month', 'custom']),
    openapi.Parameter('start_date', openapi.IN_QUERY, description="YYYY-MM-DD, with period=custom",
                      type=openapi.TYPE_STRING),
    openapi.Parameter('end_date', openapi.IN_QUERY, description="YYYY-MM-DD, with period=custom",
                      type=openapi.TYPE_STRING),
]


def order_queryset():
    return Order.objects.select_related('created_by').prefetch_related('items')


class OrderCreateView(generics.CreateAPIView):
    """Create a new order (staff)"""
    serializer_class = OrderCreateSerializer
    permission_classes = [IsStaffMember]

    @swagger_auto_schema(
        operation_description="Create a new order from active menu items",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['items', 'payment_mode'],
            properties={
                'items': ITEMS_SCHEMA,
                'payment_mode': openapi.Schema(type=openapi.TYPE_STRING, enum=Order.PaymentMode.values),
                'order_type': openapi.Schema(type=openapi.TYPE_STRING, enum=Order.OrderType.values),
                'discount': openapi.Schema(type=openapi.TYPE_NUMBER, description='Percentage 0-100'),
                'notes': openapi.Schema(type=openapi.TYPE_STRING),
                'customer_name': openapi.Schema(type=openapi.TYPE_STRING),
                'customer_phone': openapi.Schema(type=openapi.TYPE_STRING),
            }
        ),
        responses={
            201: OrderReadSerializer,
            400: 'Bad Request'
        }
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        logger.info(f"Order #{order.id} created by {request.user.email}: {order.total_amount}")

        return Response(OrderReadSerializer(order).data, status=status.HTTP_201_CREATED)


class CustomerOrderCreateView(generics.CreateAPIView):
    """Public endpoint for online orders placed by customers"""
    serializer_class = CustomerOrderCreateSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_description="Place an online order (no login required)",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['items', 'payment_mode'],
            properties={
                'items': ITEMS_SCHEMA,
                'payment_mode': openapi.Schema(type=openapi.TYPE_STRING, enum=Order.PaymentMode.values),
                'notes': openapi.Schema(type=openapi.TYPE_STRING),
                'customer_name': openapi.Schema(type=openapi.TYPE_STRING),
                'customer_phone': openapi.Schema(type=openapi.TYPE_STRING),
            }
        ),
        responses={201: OrderReadSerializer}
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        logger.info(f"Online order #{order.id} placed: {order.total_amount}")

        return Response(OrderReadSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderListView(generics.ListAPIView):
    """List orders, newest first"""
    serializer_class = OrderReadSerializer
    permission_classes = [IsStaffMember]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = OrderFilter
    search_fields = ['customer_name', 'customer_phone', 'notes', 'items__name']

    def get_queryset(self):
        return order_queryset().order_by('-order_date').distinct()

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by order status", type=openapi.TYPE_STRING),
            openapi.Parameter('payment_mode', openapi.IN_QUERY, description="UPI or Cash", type=openapi.TYPE_STRING),
            openapi.Parameter('order_type', openapi.IN_QUERY, description="online or offline", type=openapi.TYPE_STRING),
            openapi.Parameter('date', openapi.IN_QUERY, description="Filter by date (YYYY-MM-DD)", type=openapi.TYPE_STRING),
            openapi.Parameter('start_date', openapi.IN_QUERY, description="From date (YYYY-MM-DD)", type=openapi.TYPE_STRING),
            openapi.Parameter('end_date', openapi.IN_QUERY, description="To date (YYYY-MM-DD)", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


@swagger_auto_schema(
    method='get',
    operation_description="Today's orders from the shared short-lived snapshot",
    manual_parameters=[
        openapi.Parameter('active', openapi.IN_QUERY, description="Only orders not yet completed or cancelled",
                          type=openapi.TYPE_BOOLEAN),
    ],
)
@api_view(['GET'])
@permission_classes([IsStaffMember])
def today_orders(request):
    snapshot = request.today_orders
    orders = snapshot.active() if request.query_params.get('active') == 'true' else snapshot.orders
    return Response({
        'date': snapshot.day,
        'built_at': snapshot.built_at,
        'count': len(orders),
        'orders': list(orders),
    })


class OrderDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    get: Order details (staff)
    put/patch: Edit items, payment mode, customer info, notes, discount (staff)
    delete: Remove the order (managers only)
    """
    permission_classes = [IsStaffMember]

    def get_queryset(self):
        return order_queryset()

    def get_permissions(self):
        if self.request.method == 'DELETE':
            return [IsManager()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return OrderUpdateSerializer
        return OrderReadSerializer

    @swagger_auto_schema(
        operation_description="Edit an order. Passing items replaces the whole item list.",
        request_body=OrderUpdateSerializer,
        responses={200: OrderReadSerializer}
    )
    def patch(self, request, *args, **kwargs):
        return self._update(request, partial=True)

    @swagger_auto_schema(request_body=OrderUpdateSerializer, responses={200: OrderReadSerializer})
    def put(self, request, *args, **kwargs):
        return self._update(request, partial=False)

    def _update(self, request, partial):
        order = self.get_object()
        serializer = OrderUpdateSerializer(order, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderReadSerializer(order).data)

    def perform_destroy(self, instance):
        logger.info(f"Order #{instance.id} deleted by {self.request.user.email}")
        instance.delete()


@swagger_auto_schema(
    method='post',
    operation_description="Move an order to its next status, or cancel it. Managers may pass override=true to set any status.",
    request_body=OrderStatusSerializer,
    responses={
        200: OrderReadSerializer,
        400: openapi.Response(description="Transition not allowed"),
        403: openapi.Response(description="Override requested by a non-manager"),
        404: openapi.Response(description="Order not found"),
    }
)
@api_view(['POST'])
@permission_classes([IsStaffMember])
def update_order_status(request, pk):
    order = get_object_or_404(Order, pk=pk)
    previous = order.status

    serializer = OrderStatusSerializer(order, data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    serializer.save()
    how = 'overridden' if serializer.validated_data['override'] else 'changed'
    logger.info(f"Order #{order.id} status {how} {previous} -> {order.status} by {request.user.email}")

    return Response(OrderReadSerializer(order_queryset().get(pk=pk)).data)


@swagger_auto_schema(
    method='get',
    operation_description="Order count and revenue with UPI / Cash split. All time unless a period is given.",
    manual_parameters=PERIOD_PARAMETERS,
    responses={200: OrderStatsSerializer}
)
@api_view(['GET'])
@permission_classes([IsStaffMember])
def order_stats(request):
    queryset = Order.objects.all()
    date_range = range_from_query(request.query_params, default=None)
    if date_range is not None:
        queryset = queryset.in_range(date_range.start_date, date_range.end_date)

    stats = order_statistics(queryset)
    return Response(OrderStatsSerializer(stats).data)


@swagger_auto_schema(method='get', responses={200: OrderReceiptSerializer})
@api_view(['GET'])
@permission_classes([IsStaffMember])
def order_receipt(request, pk):
    """Invoice data: items, subtotal, discount and payable amount"""
    order = get_object_or_404(order_queryset(), pk=pk)
    return Response(OrderReceiptSerializer(order).data)
