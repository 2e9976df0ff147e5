import pytest
from fastapi.testclient import TestClient

from ecolens.config import Settings
from ecolens.errors import ExternalServiceError
from ecolens.main import create_app
from ecolens.schemas import ProductRecord


class FakeAI:
    """Stands in for AIService; remembers every prompt it was given."""

    def __init__(self, reply="AI says hi", fail=None):
        self.reply = reply
        self.fail = fail
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.fail:
            raise ExternalServiceError(self.fail)
        return self.reply

    def list_models(self):
        if self.fail:
            raise ExternalServiceError(self.fail)
        return [{"name": "gpt-4o-mini", "displayName": "gpt-4o-mini"}]

    def probe_models(self, candidates):
        return [{"name": c, "ok": True} for c in candidates]


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test")


@pytest.fixture
def fake_ai():
    return FakeAI()


@pytest.fixture
def product():
    return ProductRecord(
        found=True,
        source="UPC Item DB",
        name="Steel Bottle",
        brand="Hydro",
        categories="Drinkware",
        description="Insulated bottle",
        image_url="https://img.example/bottle.jpg",
    )


@pytest.fixture
def resolver_calls():
    return []


@pytest.fixture
def make_client(settings, product, resolver_calls):
    def resolver(code):
        resolver_calls.append(code)
        return product if code == "0123456789012" else ProductRecord(found=False)

    def build(ai):
        return TestClient(create_app(settings, ai=ai, resolver=resolver))
    return build


@pytest.fixture
def client(make_client, fake_ai):
    return make_client(fake_ai)


@pytest.fixture
def failing_client(make_client):
    return make_client(FakeAI(fail="quota exceeded"))
