# backups/urls.py

from rest_framework.routers import SimpleRouter

from backups.views import BackupViewSet

router = SimpleRouter()
router.register("backup", BackupViewSet, basename="backup")

urlpatterns = router.urls
