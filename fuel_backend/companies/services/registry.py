# companies/services/registry.py

"""
COMPANY REGISTRY (APPLICATION SERVICE)

Purpose:
- Tenant CRUD with slug-based lookup.
- Provision zeroed AGO/PMS allocation rows for every new company.
- Own the cascading deletion of a tenant's trucks, allocations and audit entries.

Rules:
- slug must be URL-safe and unique (case-sensitive as stored)
- the admin company can never be deleted (silent no-op)
- create/delete are atomic: a tenant never exists half-provisioned
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_slug
from django.db import IntegrityError, transaction

from allocations.models import Allocation, ProductCategory
from audit.models import AuditLog
from audit.services.recorder import record_audit
from common.exceptions import ConflictError, InvalidInputError, NotFoundError
from companies.models import Company
from trucks.models import Truck

logger = logging.getLogger(__name__)


def _clean_name(name) -> str:
    value = (name or "").strip()
    if not value:
        raise InvalidInputError("name is required")
    return value


def _clean_slug(slug) -> str:
    value = (slug or "").strip()
    if not value:
        raise InvalidInputError("slug is required")
    try:
        validate_slug(value)
    except ValidationError as exc:
        raise InvalidInputError(
            "slug may only contain letters, numbers, underscores or hyphens"
        ) from exc
    return value


# ============================================================
# READS
# ============================================================


def list_companies():
    """Admin company first, then alphabetical."""
    return Company.objects.order_by("-is_admin", "name")


def get_company(company_id) -> Company:
    try:
        return Company.objects.get(pk=company_id)
    except (Company.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Company {company_id} not found") from exc


def get_company_by_slug(slug) -> Company:
    try:
        return Company.objects.get(slug=(slug or "").strip())
    except Company.DoesNotExist as exc:
        raise NotFoundError(f"Company '{slug}' not found") from exc


def get_admin_company() -> Company:
    company = Company.objects.filter(is_admin=True).first()
    if company is None:
        raise NotFoundError("Admin company is not provisioned")
    return company


def resolve_company(company_id=None) -> Company:
    """
    Write scope: an explicit company, or the admin (default) tenant.
    """
    if company_id is None or company_id == "":
        return get_admin_company()
    return get_company(company_id)


# ============================================================
# WRITES
# ============================================================


@transaction.atomic
def create_company(*, name, slug) -> Company:
    name = _clean_name(name)
    slug = _clean_slug(slug)

    if Company.objects.filter(slug=slug).exists():
        raise ConflictError(f"Slug '{slug}' is already registered")

    try:
        with transaction.atomic():
            company = Company.objects.create(name=name, slug=slug)
    except IntegrityError as exc:
        raise ConflictError(f"Slug '{slug}' is already registered") from exc

    Allocation.objects.bulk_create(
        [
            Allocation(company=company, product_type=category)
            for category in ProductCategory.values
        ]
    )

    logger.info(
        "Company created",
        extra={"company_id": company.id, "slug": slug},
    )

    record_audit(
        action="CREATE_COMPANY",
        entity_type="company",
        entity_id=company.id,
        details=f"Created company: {name} ({slug})",
    )
    return company


@transaction.atomic
def update_company(*, company_id, name=None, slug=None) -> Company:
    company = get_company(company_id)

    update_fields = []
    if name is not None:
        company.name = _clean_name(name)
        update_fields.append("name")

    if slug is not None:
        new_slug = _clean_slug(slug)
        if Company.objects.filter(slug=new_slug).exclude(pk=company.pk).exists():
            raise ConflictError(f"Slug '{new_slug}' is already registered")
        company.slug = new_slug
        update_fields.append("slug")

    if not update_fields:
        return company

    try:
        with transaction.atomic():
            company.save(update_fields=[*update_fields, "updated_at"])
    except IntegrityError as exc:
        raise ConflictError(f"Slug '{company.slug}' is already registered") from exc

    record_audit(
        action="UPDATE_COMPANY",
        entity_type="company",
        entity_id=company.id,
        details=f"Updated company: {company.name}",
    )
    return company


@transaction.atomic
def delete_company(*, company_id) -> bool:
    """
    Delete a tenant and everything it owns.

    Returns False (and deletes nothing) for the admin company.
    """
    company = get_company(company_id)

    if company.is_admin:
        logger.warning(
            "Refused to delete admin company",
            extra={"company_id": company.id},
        )
        return False

    trucks_deleted, _ = Truck.objects.filter(company=company).delete()
    Allocation.objects.filter(company=company).delete()
    AuditLog.objects.filter(company=company).delete()

    deleted_id = company.id
    name = company.name
    company.delete()

    logger.info(
        "Company deleted",
        extra={"company_id": deleted_id, "trucks_deleted": trucks_deleted},
    )

    record_audit(
        action="DELETE_COMPANY",
        entity_type="company",
        entity_id=deleted_id,
        details=f"Deleted company: {name}",
    )
    return True
