import requests

from ecolens.integrations.barcode import (
    normalize_open_food_facts,
    normalize_upcitemdb,
    resolve_barcode,
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeHTTP:
    """Minimal requests replacement keyed by host.

    A route value may be a FakeResponse or an exception to raise.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        for host, outcome in self.routes.items():
            if host in url:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"no route for {url}")


OFF = "openfoodfacts.org"
UPC = "upcitemdb.com"

OFF_HIT = FakeResponse({
    "status": 1,
    "product": {
        "product_name": "Oat Drink",
        "brands": "Oatly",
        "categories": "Plant-based milks",
        "ingredients_text": "water, oats",
        "packaging": "Tetra Pak",
        "nutriscore_grade": "b",
        "ecoscore_grade": "a",
        "image_url": "https://img.example/oat.jpg",
    },
})
OFF_MISS = FakeResponse({"status": 0, "status_verbose": "product not found"})
UPC_HIT = FakeResponse({"code": "OK", "items": [{
    "title": "Steel Bottle",
    "brand": "Hydro",
    "category": "Drinkware",
    "description": "Insulated bottle",
    "images": ["https://img.example/bottle.jpg", "https://img.example/2.jpg"],
}]})
UPC_MISS = FakeResponse({"code": "OK", "total": 0, "items": []})


def hosts(http):
    return [OFF if OFF in c["url"] else UPC for c in http.calls]


def test_open_food_facts_hit_short_circuits():
    http = FakeHTTP({OFF: OFF_HIT, UPC: UPC_HIT})
    record = resolve_barcode("737628064502", http=http)
    assert record.found and record.source == "Open Food Facts"
    assert record.name == "Oat Drink"
    assert record.ecoscore == "a"
    assert record.description is None
    assert hosts(http) == [OFF]


def test_falls_back_to_upcitemdb_when_not_found():
    http = FakeHTTP({OFF: OFF_MISS, UPC: UPC_HIT})
    record = resolve_barcode("012345678905", http=http)
    assert record.source == "UPC Item DB"
    assert record.description == "Insulated bottle"
    assert record.image_url == "https://img.example/bottle.jpg"
    assert record.ingredients is None
    assert hosts(http) == [OFF, UPC]
    assert http.calls[1]["params"] == {"upc": "012345678905"}


def test_both_miss_gives_not_found():
    http = FakeHTTP({OFF: OFF_MISS, UPC: UPC_MISS})
    record = resolve_barcode("000", http=http)
    assert record.found is False
    assert record.name is None
    assert hosts(http) == [OFF, UPC]


def test_timeout_is_treated_as_not_found():
    http = FakeHTTP({OFF: requests.Timeout("read timed out"), UPC: UPC_HIT})
    record = resolve_barcode("012345678905", http=http)
    assert record.source == "UPC Item DB"
    assert hosts(http) == [OFF, UPC]


def test_timeout_passed_to_every_provider():
    http = FakeHTTP({OFF: OFF_MISS, UPC: UPC_MISS})
    resolve_barcode("1", http=http, timeout=5)
    assert [c["timeout"] for c in http.calls] == [5, 5]


def test_provider_errors_never_escape():
    http = FakeHTTP({
        OFF: FakeResponse(ValueError("not json")),
        UPC: FakeResponse({"error": "rate limited"}, status_code=429),
    })
    assert resolve_barcode("1", http=http).found is False


def test_malformed_shapes_absorbed():
    http = FakeHTTP({OFF: FakeResponse({"status": 1}), UPC: FakeResponse(["unexpected"])})
    assert resolve_barcode("1", http=http).found is False


def test_open_food_facts_placeholders():
    record = normalize_open_food_facts({})
    assert record.name == "Unknown Product"
    assert record.brand == "Unknown Brand"
    assert record.categories == "N/A"
    assert record.ingredients == "Not available"
    assert record.packaging == "Not specified"
    assert record.labels == ""
    assert record.nutriscore == "N/A"
    assert record.image_url is None


def test_upcitemdb_placeholders():
    record = normalize_upcitemdb({"images": []})
    assert record.name == "Unknown Product"
    assert record.description == "Not available"
    assert record.image_url is None
    assert record.ecoscore is None
