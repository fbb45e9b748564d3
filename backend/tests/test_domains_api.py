"""Tests for custom domain registration and verification."""
import pytest

from linkshort.api.deps import get_domain_service
from linkshort.core.policy import Tier
from linkshort.repositories import SqlDomainRepository
from linkshort.services.domains import DomainService


@pytest.fixture
def published_tokens(app, session_factory):
    """Serve verification tokens from a dict instead of the network."""
    tokens = {}

    async def fetch_token(domain):
        return tokens.get(domain)

    async def domain_service():
        async with session_factory() as db:
            yield DomainService(SqlDomainRepository(db), token_fetcher=fetch_token)

    app.dependency_overrides[get_domain_service] = domain_service
    yield tokens
    app.dependency_overrides.clear()


async def test_premium_adds_domain(client, premium_user, published_tokens):
    _, headers = premium_user
    response = await client.post("/api/domains", json={"domain": "Go.Example.com"}, headers=headers)

    assert response.status_code == 201
    data = response.json()
    assert data["domain"] == "go.example.com"
    assert data["isVerified"] is False
    assert len(data["verificationToken"]) == 32


async def test_pro_cannot_add_domain(client, pro_user, published_tokens):
    _, headers = pro_user
    response = await client.post("/api/domains", json={"domain": "go.example.com"}, headers=headers)
    assert response.status_code == 403


async def test_invalid_domain(client, premium_user, published_tokens):
    _, headers = premium_user
    response = await client.post("/api/domains", json={"domain": "not a domain"}, headers=headers)
    assert response.status_code == 400


async def test_duplicate_domain(client, make_user, published_tokens):
    _, first = await make_user(Tier.PREMIUM)
    _, second = await make_user(Tier.PREMIUM)
    await client.post("/api/domains", json={"domain": "go.example.com"}, headers=first)

    response = await client.post("/api/domains", json={"domain": "go.example.com"}, headers=second)
    assert response.status_code == 409


async def test_verify(client, premium_user, published_tokens):
    _, headers = premium_user
    domain = (await client.post("/api/domains", json={"domain": "go.example.com"}, headers=headers)).json()

    response = await client.post(f"/api/domains/{domain['id']}/verify", headers=headers)
    assert response.json() == {"success": False, "message": "Verification token not found on domain"}

    published_tokens["go.example.com"] = domain["verificationToken"]
    response = await client.post(f"/api/domains/{domain['id']}/verify", headers=headers)
    assert response.json()["success"] is True

    listed = (await client.get("/api/domains", headers=headers)).json()["domains"]
    assert [d["isVerified"] for d in listed] == [True]


async def test_delete(client, premium_user, published_tokens):
    _, headers = premium_user
    domain = (await client.post("/api/domains", json={"domain": "go.example.com"}, headers=headers)).json()

    assert (await client.delete(f"/api/domains/{domain['id']}", headers=headers)).status_code == 200
    assert (await client.delete(f"/api/domains/{domain['id']}", headers=headers)).status_code == 404
