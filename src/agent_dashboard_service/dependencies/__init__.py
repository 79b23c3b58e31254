from agent_dashboard_service.dependencies.auth import get_tenant_id, get_token_payload

__all__ = ["get_tenant_id", "get_token_payload"]
