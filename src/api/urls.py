"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import admin_views
from api.v1 import performance_views
from api.v1 import sales_views
from api.auth_views import (
    MeView,
    ThrottledTokenObtainPairView,
    ThrottledTokenRefreshView,
)

router = DefaultRouter()
router.register(r'admin/territories', admin_views.TerritoryViewSet, basename='admin-territory')
router.register(r'admin/products', admin_views.ProductViewSet, basename='admin-product')
router.register(r'admin/territory-assignments', admin_views.TerritoryAssignmentViewSet, basename='admin-territory-assignment')
router.register(r'sales', sales_views.SaleRecordViewSet, basename='sale')


app_name = 'api'
urlpatterns = [
    # Auth endpoints
    path('auth/token/', ThrottledTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', ThrottledTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', MeView.as_view(), name='auth-me'),

    # Territory performance
    path('territory-performance/', performance_views.TerritoryPerformanceListView.as_view(), name='territory-performance'),
    path('territory-performance/sales-reps/', performance_views.TerritoryPerformanceSalesRepsView.as_view(), name='territory-performance-sales-reps'),
    path('territory-performance/<uuid:pk>/', performance_views.TerritoryPerformanceDetailView.as_view(), name='territory-performance-detail'),

    # Maps
    path('map/territories/', performance_views.TerritoryMapView.as_view(), name='map-territories'),
    path('map/districts/', performance_views.DistrictMapView.as_view(), name='map-districts'),

    # Dashboards
    path('dashboard/sales/', performance_views.SalesDashboardView.as_view(), name='dashboard-sales'),
    path('dashboard/management/', performance_views.ManagementDashboardView.as_view(), name='dashboard-management'),

    # Management
    path('management/sales-users/', performance_views.SalesUsersView.as_view(), name='management-sales-users'),
    path('management/sales-target/', performance_views.SalesTargetView.as_view(), name='management-sales-target'),
    path('management/sales-performance/', performance_views.SalesPerformanceView.as_view(), name='management-sales-performance'),

    # Sales self-service
    path('sales/my-performance/', performance_views.MyPerformanceView.as_view(), name='sales-my-performance'),

    path('', include(router.urls)),
]
