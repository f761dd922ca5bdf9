from decimal import Decimal

from rest_framework import exceptions, serializers
from django.db import transaction
from django.db.models import Count, Q, Sum

from inventory.models import MenuItem
from .models import Order, OrderItem


class OrderItemCreateSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)

    def validate_menu_item_id(self, value):
        if not MenuItem.objects.active().filter(id=value).exists():
            raise serializers.ValidationError("Menu item not found or inactive")
        return value


class OrderItemReadSerializer(serializers.ModelSerializer):
    menu_item_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item_id', 'name', 'price', 'quantity', 'total']


def create_order_items(order, items_data):
    """Copy name and price from the menu so past orders are unaffected by menu edits"""
    menu_items = MenuItem.objects.in_bulk([item['menu_item_id'] for item in items_data])
    for item_data in items_data:
        menu_item = menu_items[item_data['menu_item_id']]
        OrderItem.objects.create(
            order=order,
            menu_item=menu_item,
            name=menu_item.name,
            price=menu_item.price,
            quantity=item_data['quantity'],
        )
    order.calculate_totals()
    order.save(update_fields=['total_quantity', 'total_amount', 'updated_at'])


class OrderCreateSerializer(serializers.ModelSerializer):
    items = OrderItemCreateSerializer(many=True, write_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'items', 'payment_mode', 'order_type', 'notes',
            'customer_name', 'customer_phone', 'discount', 'status', 'order_date'
        ]
        read_only_fields = ['id', 'status', 'order_date']
        extra_kwargs = {
            'payment_mode': {'required': True, 'allow_blank': False},
        }

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("An order needs at least one item")
        return value

    @transaction.atomic
    def create(self, validated_data):
        items_data = validated_data.pop('items')

        request = self.context.get('request')
        if request and request.user.is_authenticated:
            validated_data['created_by'] = request.user

        order = Order.objects.create(**validated_data)
        create_order_items(order, items_data)
        return order


class CustomerOrderCreateSerializer(OrderCreateSerializer):
    """Orders placed from the public customer page; always marked online"""

    class Meta(OrderCreateSerializer.Meta):
        read_only_fields = ['id', 'status', 'order_date', 'order_type', 'discount']

    def create(self, validated_data):
        validated_data['order_type'] = Order.OrderType.ONLINE
        return super().create(validated_data)


class OrderReadSerializer(serializers.ModelSerializer):
    items = OrderItemReadSerializer(many=True, read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'items', 'total_quantity', 'total_amount', 'discount', 'status',
            'payment_mode', 'order_type', 'notes', 'customer_name', 'customer_phone',
            'order_date', 'created_by', 'created_by_name', 'created_at', 'updated_at'
        ]

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None


class OrderUpdateSerializer(serializers.ModelSerializer):
    """Staff edits. Passing ``items`` replaces the whole item list."""
    items = OrderItemCreateSerializer(many=True, write_only=True, required=False)

    class Meta:
        model = Order
        fields = [
            'items', 'payment_mode', 'order_type', 'notes',
            'customer_name', 'customer_phone', 'discount'
        ]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("An order needs at least one item")
        return value

    @transaction.atomic
    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if items_data is not None:
            instance.items.all().delete()
            create_order_items(instance, items_data)

        return instance


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
    override = serializers.BooleanField(
        default=False, write_only=True,
        help_text="Managers only: set any status, e.g. to correct a mistaken cancellation"
    )

    def validate(self, attrs):
        order = self.instance
        new_status = attrs['status']

        if attrs['override']:
            request = self.context.get('request')
            if not (request and request.user.is_authenticated and request.user.is_manager):
                raise exceptions.PermissionDenied('Only managers can override the order status flow.')
            return attrs

        if order.is_terminal:
            raise serializers.ValidationError({
                'status': f"Order is already {order.status} and can no longer change status"
            })
        if not order.can_transition_to(new_status):
            raise serializers.ValidationError({
                'status': f"Cannot move order from {order.status} to {new_status}"
            })
        return attrs

    def update(self, instance, validated_data):
        instance.status = validated_data['status']
        instance.save(update_fields=['status', 'updated_at'])
        return instance


class OrderReceiptSerializer(serializers.ModelSerializer):
    items = OrderItemReadSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(source='total_amount', max_digits=10, decimal_places=2, read_only=True)
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    payable_amount = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_date', 'customer_name', 'customer_phone', 'payment_mode',
            'items', 'total_quantity', 'subtotal', 'discount', 'discount_amount', 'payable_amount'
        ]


class OrderStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    upi_orders = serializers.IntegerField()
    upi_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    cash_orders = serializers.IntegerField()
    cash_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)


def order_statistics(queryset):
    """Totals plus the UPI / Cash split, cancelled orders excluded. One aggregate query."""
    upi = Q(payment_mode=Order.PaymentMode.UPI)
    cash = Q(payment_mode=Order.PaymentMode.CASH)
    stats = queryset.not_cancelled().aggregate(
        total_orders=Count('id'),
        total_revenue=Sum('total_amount'),
        upi_orders=Count('id', filter=upi),
        upi_revenue=Sum('total_amount', filter=upi),
        cash_orders=Count('id', filter=cash),
        cash_revenue=Sum('total_amount', filter=cash),
    )
    for key in ('total_revenue', 'upi_revenue', 'cash_revenue'):
        stats[key] = stats[key] or Decimal('0.00')
    return stats
