# audit/serializers.py

from rest_framework import serializers

from audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLog
        fields = [
            "id",
            "company",
            "action",
            "entity_type",
            "entity_id",
            "details",
            "created_at",
        ]
        read_only_fields = fields
