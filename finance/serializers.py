from rest_framework import serializers
from django.conf import settings

from .models import Expense, DailySummary
from .profit import format_currency, format_percentage


class ExpenseSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id', 'category', 'category_display', 'description', 'amount',
            'date', 'receipt', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_description(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Description is required.")
        return value

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        if value > settings.EXPENSE_MAX_AMOUNT:
            raise serializers.ValidationError(f"Amount cannot exceed {settings.EXPENSE_MAX_AMOUNT}.")
        return value


class ProfitDataSerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit_margin = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_orders = serializers.IntegerField()
    formatted = serializers.SerializerMethodField()

    def get_formatted(self, obj):
        return {
            'total_revenue': format_currency(obj.total_revenue),
            'total_expenses': format_currency(obj.total_expenses),
            'net_profit': format_currency(obj.net_profit),
            'profit_margin': format_percentage(obj.profit_margin),
        }


class TrendPointSerializer(serializers.Serializer):
    date = serializers.CharField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit = serializers.DecimalField(max_digits=14, decimal_places=2)


class BreakdownRowSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=Expense.Category.choices)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=6, decimal_places=2)


class ExpenseBreakdownSerializer(serializers.Serializer):
    breakdown = BreakdownRowSerializer(many=True)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)


class DailySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = DailySummary
        fields = [
            'id', 'date', 'total_orders', 'total_revenue', 'total_expenses',
            'net_profit', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CloseDaySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
