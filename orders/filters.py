import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    date = django_filters.DateFilter(field_name='order_date', lookup_expr='date')
    start_date = django_filters.DateFilter(field_name='order_date', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='order_date', lookup_expr='date__lte')

    class Meta:
        model = Order
        fields = ['status', 'payment_mode', 'order_type', 'date', 'start_date', 'end_date']
