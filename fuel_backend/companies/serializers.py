# companies/serializers.py

from rest_framework import serializers

from companies.models import Company


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            "id",
            "name",
            "slug",
            "is_admin",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CompanyWriteSerializer(serializers.Serializer):
    """
    Command serializer (shape only). Uniqueness and slug rules live in the registry.
    """

    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    slug = serializers.CharField(max_length=100, required=False, allow_blank=True)
