from django.urls import path
from . import views


urlpatterns = [
    # Expenses
    path('expenses/', views.ExpenseListCreateView.as_view(), name='expense-list-create'),
    path('expenses/<int:pk>/', views.ExpenseDetailView.as_view(), name='expense-detail'),

    # Reports
    path('profit/', views.profit_summary, name='profit-summary'),
    path('trend/', views.profit_trend, name='profit-trend'),
    path('expense-breakdown/', views.expense_breakdown, name='expense-breakdown'),
    path('export/', views.export_profit_report, name='profit-export'),

    # End of day
    path('daily-summaries/', views.DailySummaryListView.as_view(), name='daily-summary-list'),
    path('daily-summaries/close/', views.close_day, name='daily-summary-close'),
]
