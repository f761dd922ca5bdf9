from rest_framework import serializers

from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'name', 'price', 'category', 'category_display', 'description',
            'image_url', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Menu item name is required.")

        queryset = MenuItem.objects.filter(name__iexact=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("Menu item with this name already exists.")
        return value

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be greater than zero.")
        return value


class MenuItemStatusSerializer(serializers.ModelSerializer):
    """Read-only view used by the activate / deactivate endpoints"""

    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'is_active', 'updated_at']
        read_only_fields = fields
