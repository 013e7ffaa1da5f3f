# audit/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.response import Response

from audit.serializers import AuditLogSerializer
from audit.services.recorder import list_audit_logs
from common.api import domain_error_response, parse_company_param
from common.exceptions import FuelTrackerError


class AuditLogViewSet(viewsets.ViewSet):
    """
    Read-only audit trail. Scoped lists include global entries.
    """

    serializer_class = AuditLogSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter("company", int, required=False),
            OpenApiParameter("limit", int, required=False),
        ],
        responses={200: AuditLogSerializer(many=True)},
    )
    def list(self, request):
        try:
            logs = list_audit_logs(
                company_id=parse_company_param(request),
                limit=request.query_params.get("limit"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(AuditLogSerializer(logs, many=True).data)
