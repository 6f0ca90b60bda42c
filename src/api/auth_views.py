"""Authentication API views (JWT pair, refresh, current user)."""

import logging

from django.core.exceptions import ImproperlyConfigured
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1.serializers import MeSerializer

logger = logging.getLogger("territory")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle that falls back to a strict default if scope config is missing."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


class ThrottledTokenObtainPairView(TokenObtainPairView):
    """Obtain an access / refresh JWT pair from email and password."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"


class ThrottledTokenRefreshView(TokenRefreshView):
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"


class MeView(APIView):
    """Return the authenticated user with their role."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)
