# audit/models/audit_log.py

"""
AUDIT LOG ENTRY (APPEND-ONLY)

Purpose:
- Observational record of every mutating action.
- company = NULL means a global (admin-level) entry.

Rules:
- Created once. Never updated. Never deleted individually.
- Rows disappear only when their company is deleted (queryset cascade).
- Not used for replay or recovery.
"""

from django.db import models

from companies.models import Company


class AuditLog(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="audit_logs",
    )

    action = models.CharField(max_length=64)
    entity_type = models.CharField(max_length=64)
    entity_id = models.BigIntegerField(null=True, blank=True)
    details = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
            models.Index(fields=["action"], name="audit_action_idx"),
        ]

    def save(self, *args, **kwargs):
        # Allow creation, block updates
        if not self._state.adding:
            raise RuntimeError("AuditLog records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("AuditLog records cannot be deleted individually")

    def __str__(self):
        scope = self.company_id or "global"
        return f"[{scope}] {self.action} {self.entity_type}#{self.entity_id or '-'}"
