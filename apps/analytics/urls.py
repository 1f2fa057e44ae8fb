from django.urls import path
from . import views

urlpatterns = [
    path('<str:kind>/<int:pk>/summary/', views.EntityMetricsSummaryView.as_view(), name='entity_metrics_summary'),
    path('<str:kind>/<int:pk>/sparklines/', views.EntitySparklinesView.as_view(), name='entity_sparklines'),
]
