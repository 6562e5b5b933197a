"""API tests for the health endpoint."""

from httpx import AsyncClient


class TestHealthAPI:
    async def test_health_with_database(self, client: AsyncClient, ledger_db):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["backup_configured"] is False

    async def test_reports_backup_configured(self, client: AsyncClient, ledger_db, monkeypatch):
        from invoiceflow.config import reset_settings

        monkeypatch.setenv("BACKUP_SCRIPT_URL", "https://backup.example.test/exec")
        reset_settings()

        response = await client.get("/api/health")

        assert response.json()["backup_configured"] is True
