"""
ProjectDesk

Multi-tenant project-management backend. Tenants, their users and
their projects share one schema and are partitioned by tenant_id.
"""

__version__ = "1.0.0"
