import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Exact-match filters applied on top of the search pipeline."""

    published = django_filters.BooleanFilter(field_name="published")
    user = django_filters.NumberFilter(field_name="user_id")

    class Meta:
        model = Product
        fields = ["published", "user"]
