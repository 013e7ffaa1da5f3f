# audit/urls.py
from rest_framework.routers import SimpleRouter

from audit.views import AuditLogViewSet

router = SimpleRouter()
router.register(r"audit", AuditLogViewSet, basename="audit")

urlpatterns = router.urls
