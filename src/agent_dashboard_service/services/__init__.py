"""
Service layer package.

Submodules are imported directly where needed, e.g.:

    from agent_dashboard_service.services.mcp_service import get_mcp_service
"""

__all__ = []
