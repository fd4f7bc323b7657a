from prepline.infra.kv_store import StorageError
from prepline.routers import ready as ready_router

INGEST = {
    "title": "Cake",
    "steps_text": "1. Mix butter and flour.\n2. Add vanilla and mix again.",
    "ingredients_text": "2 cups flour, sifted\n1 cup butter, softened\n1 tsp vanilla",
}


def test_ready(client):
    resp = client.get("/api/ready")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "storage": "memory"}


def test_ready_probes_redis(client, monkeypatch):
    monkeypatch.setattr(ready_router.settings, "storage_backend", "redis")
    resp = client.get("/api/ready")
    assert resp.json() == {"ok": True, "storage": "redis", "redis_ok": True}


def test_ingest_recipe(client):
    resp = client.post("/api/recipes/ingest", json=INGEST)
    assert resp.status_code == 201
    data = resp.json()
    assert data["title"] == "Cake"
    assert [s["content"] for s in data["steps"]] == [
        "Sift 2 cups flour",
        "Mix 1 cup butter and flour.",
        "Add 1 tsp vanilla and mix again.",
    ]
    butter = data["ingredients"][1]
    assert data["ingredient_tracker"][butter["id"]]["step_order"] == 1
    mention = data["steps"][1]["ingredients"][0]
    assert mention["kind"] == "resolved"


def test_relink_round_trip(client):
    recipe = client.post("/api/recipes/ingest", json=INGEST).json()
    resp = client.post("/api/recipes/relink", json={"recipe": recipe})
    assert resp.status_code == 200
    assert [s["content"] for s in resp.json()["steps"]] == [s["content"] for s in recipe["steps"]]


def test_parse_and_reparse_ingredient(client):
    resp = client.post("/api/ingredients/parse", json={"text": "2 onions, chopped"})
    assert resp.status_code == 200
    ingredient = resp.json()
    assert ingredient["structured"]["ingredient"]["id"] == "onion"
    assert ingredient["structured"]["preparation"]["requires_step"] is True
    assert ingredient["display_text"] == "2 onions, chopped"

    resp = client.post("/api/ingredients/reparse", json={"text": "3 onions, sliced", "existing": ingredient})
    assert resp.json()["id"] == ingredient["id"]
    assert resp.json()["structured"]["preparation"]["id"] == "sliced"


def test_correction_lifecycle(client):
    parsed = client.post("/api/ingredients/parse", json={"text": "1 cup flour"}).json()["structured"]

    resp = client.post("/api/corrections", json={"original_text": "1 cup flour", "corrected": parsed})
    assert resp.status_code == 201
    example = resp.json()
    assert example["manual_parsing"]["source"] == "manual"

    similar = client.get("/api/corrections/similar", params={"text": "3 cups flour"}).json()
    assert similar[0]["example"]["id"] == example["id"]
    assert similar[0]["score"] == 1.0

    assert client.get("/api/corrections/stats").json()["total"] == 1
    exported = client.get("/api/corrections/export").json()
    assert exported["version"] == "1.0"
    assert len(exported["data"]) == 1

    assert client.delete(f"/api/corrections/{example['id']}").status_code == 204
    assert client.delete(f"/api/corrections/{example['id']}").status_code == 404


def test_correction_validation(client):
    assert client.post("/api/corrections", json={}).status_code == 422
    assert client.post("/api/corrections", json={"original_text": "", "corrected": {}}).status_code == 422


def test_catalog_search(client):
    resp = client.get("/api/catalog/search", params={"q": "oni"})
    assert resp.status_code == 200
    assert resp.json()[0]["id"] == "onion"
    assert client.get("/api/catalog/search").status_code == 422


def test_add_custom_ingredient(client):
    resp = client.post("/api/catalog/custom", json={"name": "Sumac"})
    assert resp.status_code == 201
    sumac = resp.json()
    assert sumac["id"].startswith("custom_")

    again = client.post("/api/catalog/custom", json={"name": "sumac"}).json()
    assert again["id"] == sumac["id"]

    assert client.get("/api/catalog/search", params={"q": "sum"}).json()[0]["id"] == sumac["id"]


def test_add_custom_ingredient_blank_name(client):
    assert client.post("/api/catalog/custom", json={"name": "   "}).status_code == 422


def test_unit_conversions(client):
    resp = client.get("/api/catalog/units/cup/conversions", params={"qty": 1})
    assert resp.status_code == 200
    by_unit = {c["unit"]: c for c in resp.json()}
    assert by_unit["tbsp"]["display"] == "16 tbsp"

    assert client.get("/api/catalog/units/bushel/conversions", params={"qty": 1}).status_code == 404
    assert client.get("/api/catalog/units/cup/conversions", params={"qty": 0}).status_code == 422


def test_unreadable_storage_answers_503(client, ingestion, store, monkeypatch):
    parsed = ingestion.parser.parse("1 cup flour").model_dump(mode="json")

    async def failing_get(key):
        raise StorageError("redis down")

    monkeypatch.setattr(store, "get", failing_get)
    resp = client.post("/api/corrections", json={"original_text": "1 cup flour", "corrected": parsed})
    assert resp.status_code == 503
    assert client.post("/api/catalog/custom", json={"name": "Sumac"}).status_code == 503
