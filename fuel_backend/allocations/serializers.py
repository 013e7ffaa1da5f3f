# allocations/serializers.py

from rest_framework import serializers

from allocations.models import Allocation


class AllocationSerializer(serializers.ModelSerializer):
    consumed_volume = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        read_only=True,
    )

    class Meta:
        model = Allocation
        fields = [
            "id",
            "company",
            "product_type",
            "initial_volume",
            "remaining_volume",
            "consumed_volume",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AllocationTargetSerializer(serializers.Serializer):
    """Reset / adjust command. Volume parsing is owned by the ledger."""

    company = serializers.IntegerField(required=False, allow_null=True)
    product_type = serializers.CharField(max_length=8)
    initial_volume = serializers.CharField()


class AvailabilityQuerySerializer(serializers.Serializer):
    company = serializers.IntegerField(required=False, allow_null=True)
    product_type = serializers.CharField(max_length=8)
    volume = serializers.CharField()


class AvailabilitySerializer(serializers.Serializer):
    available = serializers.BooleanField()
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)


class AllocationSnapshotSerializer(serializers.Serializer):
    """One allocation row of a backup payload. Volumes are parsed by the ledger."""

    product_type = serializers.CharField(max_length=16)
    initial_volume = serializers.CharField()
    remaining_volume = serializers.CharField()
    updated_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
