"""
Admin configuration for the Expenses app.
"""
from django.contrib import admin

from apps.expenses.models import Expense, ExpenseSplit, Settlement


class ExpenseSplitInline(admin.TabularInline):
    model = ExpenseSplit
    extra = 0


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = [
        'description',
        'amount',
        'category',
        'split_type',
        'paid_by',
        'group',
        'date',
    ]
    list_filter = ['category', 'split_type', 'date']
    search_fields = ['description', 'receipt_note', 'paid_by']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ExpenseSplitInline]


@admin.register(ExpenseSplit)
class ExpenseSplitAdmin(admin.ModelAdmin):
    list_display = ['expense', 'member', 'amount', 'percentage']
    search_fields = ['member', 'expense__description']


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    list_display = [
        'from_member',
        'to_member',
        'amount',
        'method',
        'group',
        'date',
    ]
    list_filter = ['method', 'date']
    search_fields = ['from_member', 'to_member', 'note']
