# expenses/admin.py
from django.contrib import admin

from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['date', 'description', 'category', 'amount', 'is_recurring', 'clinic']
    list_filter = ['category', 'is_recurring', 'clinic']
    search_fields = ['description', 'supplier', 'invoice_number']
    date_hierarchy = 'date'
