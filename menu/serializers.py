from rest_framework import serializers

from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'description', 'category', 'subcategory', 'price', 'image',
                  'printer', 'is_available', 'variants', 'nutritional_info',
                  'preparation_time', 'is_popular', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'price': {'min_value': 0, 'help_text': 'Unit price in the house currency'},
            'printer': {'help_text': 'Printer the KOT line for this item is routed to',
                        'error_messages': {'invalid_choice': 'Invalid printer'}},
            'category': {'error_messages': {'invalid_choice': 'Invalid category'}},
            'preparation_time': {'help_text': 'Preparation time in minutes'},
        }


def group_menu(items):
    """Nest items as ``{category: {subcategory: [item, ...]}}`` keeping input order."""
    grouped = {}
    for item in items:
        grouped.setdefault(item['category'], {}).setdefault(item['subcategory'], []).append(item)
    return grouped
