# backups/views.py

"""
BACKUP API

- GET  /backup/?company=     JSON snapshot (trucks, allocations, audit_logs)
- POST /backup/restore/      {"company": <id>, "data": <snapshot>}
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from backups.serializers import RestoreCommandSerializer, RestoreResultSerializer
from backups.services import coordinator
from common.api import domain_error_response, parse_company_param
from common.exceptions import FuelTrackerError


class BackupViewSet(viewsets.ViewSet):
    @extend_schema(
        parameters=[OpenApiParameter("company", int, required=False)],
        responses={200: OpenApiTypes.OBJECT},
    )
    def list(self, request):
        try:
            company_id = parse_company_param(request)
            payload = coordinator.snapshot(company_id=company_id)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(payload)

    @extend_schema(request=RestoreCommandSerializer, responses={200: RestoreResultSerializer})
    @action(detail=False, methods=["post"], url_path="restore")
    def restore(self, request):
        command = RestoreCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            result = coordinator.restore(
                company_id=command.validated_data["company"],
                data=command.validated_data["data"],
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(RestoreResultSerializer(result).data)
