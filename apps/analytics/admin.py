from django.contrib import admin

from .models import Impression


@admin.register(Impression)
class ImpressionAdmin(admin.ModelAdmin):
    list_display = ('id', 'advertiser_id', 'campaign_id', 'property_id', 'displayed_at', 'clicked_at', 'payable')
    list_filter = ('payable', 'displayed_at_date')
    search_fields = ('campaign_name', 'property_name')
    date_hierarchy = 'displayed_at_date'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
