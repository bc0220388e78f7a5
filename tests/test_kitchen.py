"""
Tests for the kitchen module: inventory, grocery lists, meal plans, recipes
"""

from conftest import bearer, failing_photo
from familyhub.integrations.gemini import get_gemini_client
from familyhub.main import app
from familyhub.modules.kitchen.schemas import map_category


def test_map_category():
    assert map_category("dairy") == "Dairy"
    assert map_category(" Frozen ") == "Frozen"
    assert map_category("fruit") == "Other"
    assert map_category(None) == "Other"


def test_inventory_crud(client, db, group):
    created = client.post(
        "/api/v1/kitchen/inventory",
        json={
            "groupId": group["id"], "name": "Eggs", "category": "Dairy", "location": "Fridge",
            "quantity": 12, "unit": "pieces", "expirationDate": "2026-11-01",
        },
        headers=bearer("bob"),
    )
    assert created.status_code == 201
    item = created.json()
    assert item["expirationDate"] == "2026-11-01"
    assert item["addedBy"] == "bob"

    updated = client.patch(f"/api/v1/kitchen/inventory/{item['id']}", json={"quantity": 6}, headers=bearer("alice"))
    assert updated.json()["quantity"] == 6

    assert client.patch(f"/api/v1/kitchen/inventory/{item['id']}", json={"quantity": 1}, headers=bearer("carol")).status_code == 403
    assert client.delete(f"/api/v1/kitchen/inventory/{item['id']}", headers=bearer("alice")).status_code == 204
    assert client.get("/api/v1/kitchen/inventory", params={"groupId": group["id"]}, headers=bearer("bob")).json() == []


def test_inventory_item_requires_quantity(client, group):
    response = client.post(
        "/api/v1/kitchen/inventory",
        json={"groupId": group["id"], "name": "Eggs", "category": "Dairy", "location": "Fridge", "unit": "pieces"},
        headers=bearer("bob"),
    )
    assert response.status_code == 400


def test_photo_batch_keeps_successful_images(client, db, gemini, group):
    gemini.photo_results = [
        {"items": [{"name": "Milk", "category": "dairy", "quantity": 2, "unit": "liters"}]},
        failing_photo(),
        {"items": [{"name": "Apples", "category": "fruit"}], "suggestions": ["Keep apples in the fridge"]},
    ]
    response = client.post(
        "/api/v1/kitchen/inventory/photo",
        json={"groupId": group["id"], "imageData": ["data:image/png;base64,AAAA", "BBBB", "CCCC"]},
        headers=bearer("bob"),
    )
    assert response.status_code == 200
    body = response.json()
    assert [(i["name"], i["category"], i["location"]) for i in body["items"]] == [
        ("Milk", "Dairy", "Counter"),
        ("Apples", "Other", "Counter"),
    ]
    assert body["message"] == "Analyzed 3 photos and added 2 items to inventory"
    assert body["suggestions"] == ["Keep apples in the fridge"]
    assert len(db.rows("kitchen_inventory")) == 2


def test_photo_with_nothing_detected(client, db, gemini, group):
    gemini.photo_results = [{"items": []}]
    response = client.post(
        "/api/v1/kitchen/inventory/photo",
        json={"groupId": group["id"], "imageData": "data:image/jpeg;base64,AAAA"},
        headers=bearer("bob"),
    )
    assert response.status_code == 200
    assert response.json() == {
        "items": [],
        "suggestions": ["Try taking clearer photos with better lighting"],
        "message": "No items detected in the photos",
    }
    assert db.rows("kitchen_inventory") == []


def test_photo_requires_membership(client, gemini, group):
    response = client.post(
        "/api/v1/kitchen/inventory/photo",
        json={"groupId": group["id"], "imageData": "AAAA"},
        headers=bearer("mallory"),
    )
    assert response.status_code == 403


def test_ai_features_need_configuration(client, group):
    app.dependency_overrides.pop(get_gemini_client)
    response = client.post(
        "/api/v1/kitchen/recipes/generate",
        json={"groupId": group["id"], "mealIdea": "Soup"},
        headers=bearer("bob"),
    )
    assert response.status_code == 503
    assert response.json() == {"error": "AI service is not configured"}


def test_inventory_analysis(client, db, gemini, group):
    db.seed("kitchen_inventory", group_id=group["id"], name="Rice", category="Pantry", quantity=1, unit="kg")
    response = client.get("/api/v1/kitchen/inventory/analyze", params={"groupId": group["id"]}, headers=bearer("bob"))
    assert response.status_code == 200
    assert response.json() == {"summary": "Well stocked"}
    assert [i["name"] for i in gemini.prompts[0]] == ["Rice"]


def test_grocery_list_items(client, db, group):
    grocery_list = client.post(
        "/api/v1/kitchen/grocery-lists", json={"groupId": group["id"], "name": "Weekly"}, headers=bearer("bob")
    ).json()
    item = client.post(
        f"/api/v1/kitchen/grocery-lists/{grocery_list['id']}/items", json={"name": "Bread"}, headers=bearer("bob")
    ).json()
    assert (item["quantity"], item["unit"], item["category"], item["estimatedCost"]) == (1, "pieces", "Other", 0)
    assert item["isPurchased"] is False

    purchased = client.patch(
        f"/api/v1/kitchen/grocery-lists/{grocery_list['id']}/items/{item['id']}",
        json={"isPurchased": True},
        headers=bearer("alice"),
    )
    assert purchased.json()["isPurchased"] is True

    lists = client.get("/api/v1/kitchen/grocery-lists", params={"groupId": group["id"]}, headers=bearer("bob")).json()
    assert [i["name"] for i in lists[0]["items"]] == ["Bread"]

    other = db.seed("kitchen_grocery_lists", group_id=group["id"], name="Party", created_by="alice")
    wrong_list = client.delete(f"/api/v1/kitchen/grocery-lists/{other['id']}/items/{item['id']}", headers=bearer("bob"))
    assert wrong_list.status_code == 404

    assert client.delete(f"/api/v1/kitchen/grocery-lists/{grocery_list['id']}", headers=bearer("bob")).status_code == 204
    assert db.rows("kitchen_grocery_items") == []


MEAL_PLAN = {
    "name": "Busy week",
    "servings": 2,
    "meals": [
        {
            "name": "Omelette",
            "type": "breakfast",
            "dayOfWeek": 0,
            "ingredients": [{"name": "Eggs", "quantity": 3, "unit": "pieces"}],
        },
        {
            "name": "Stir fry",
            "type": "dinner",
            "dayOfWeek": 0,
            "ingredients": [{"name": "Tofu", "quantity": 1, "unit": "block"}],
        },
    ],
}


def test_create_meal_plan_with_meals_and_ingredients(client, group):
    response = client.post("/api/v1/kitchen/meal-plans", json={"groupId": group["id"], **MEAL_PLAN}, headers=bearer("bob"))
    assert response.status_code == 201
    plan = response.json()
    assert plan["servings"] == 2
    assert [m["name"] for m in plan["meals"]] == ["Omelette", "Stir fry"]
    assert plan["meals"][0]["ingredients"][0]["name"] == "Eggs"

    listed = client.get("/api/v1/kitchen/meal-plans", params={"groupId": group["id"]}, headers=bearer("alice")).json()
    assert listed[0]["id"] == plan["id"]
    assert {m["name"] for m in listed[0]["meals"]} == {"Omelette", "Stir fry"}


def test_failed_meal_plan_leaves_nothing_behind(client, db, group):
    # The second meal's ingredients fail after the plan, both meals and the first ingredients are stored
    db.fail_next("kitchen_meal_ingredients", "insert", skip=1)
    response = client.post("/api/v1/kitchen/meal-plans", json={"groupId": group["id"], **MEAL_PLAN}, headers=bearer("bob"))
    assert response.status_code == 500
    assert response.json() == {"error": "storage unavailable"}
    assert ("kitchen_meal_ingredients", "delete") in db.calls
    assert db.rows("kitchen_meal_plans") == []
    assert db.rows("kitchen_meals") == []
    assert db.rows("kitchen_meal_ingredients") == []


def test_generate_meal_plan_uses_defaults(client, gemini, group):
    gemini.meal_plan = {
        "meals": [{"name": "Pasta", "dayOfWeek": 1, "ingredients": [{"name": "Penne", "quantity": "500", "unit": "g"}]}],
    }
    response = client.post("/api/v1/kitchen/meal-plans/generate", json={"groupId": group["id"]}, headers=bearer("bob"))
    assert response.status_code == 201
    plan = response.json()
    assert plan["name"] == "7-Day Meal Plan"
    assert plan["servings"] == 4
    assert plan["meals"][0]["ingredients"][0]["quantity"] == 500
    assert gemini.prompts[0]["number_of_days"] == 7


def test_recipes_include_public_ones(client, db, group):
    other = db.add_group(name="Neighbours", admin="dave")
    db.seed("kitchen_recipes", group_id=other["id"], name="Shared pie", is_public=True)
    db.seed("kitchen_recipes", group_id=other["id"], name="Secret stew", is_public=False)

    created = client.post(
        "/api/v1/kitchen/recipes",
        json={"groupId": group["id"], "name": "Pancakes", "instructions": ["Mix", "Fry"],
              "ingredients": [{"name": "Flour", "quantity": 200, "unit": "g"}]},
        headers=bearer("bob"),
    )
    assert created.status_code == 201
    assert created.json()["source"] == "User Created"

    names = {r["name"] for r in client.get("/api/v1/kitchen/recipes", params={"groupId": group["id"]}, headers=bearer("bob")).json()}
    assert names == {"Pancakes", "Shared pie"}


def test_generated_recipe_is_saved(client, db, gemini, group):
    gemini.recipe = {"description": "Warm and quick", "instructions": ["Chop", "Simmer"], "prepTime": 10}
    response = client.post(
        "/api/v1/kitchen/recipes/generate",
        json={"groupId": group["id"], "mealIdea": "Tomato soup"},
        headers=bearer("bob"),
    )
    assert response.status_code == 201
    recipe = response.json()
    assert recipe["name"] == "Tomato soup"
    assert recipe["source"] == "AI Generated"
    assert db.rows("kitchen_recipes")[0]["created_by"] == "bob"


def test_inventory_update_rejects_null_and_negative(client, db, group):
    item = client.post(
        "/api/v1/kitchen/inventory",
        json={
            "groupId": group["id"], "name": "Rice", "category": "Pantry", "location": "Cupboard",
            "quantity": 2, "unit": "kg",
        },
        headers=bearer("bob"),
    ).json()
    url = f"/api/v1/kitchen/inventory/{item['id']}"
    for body in ({"name": None}, {"quantity": -5}, {"quantity": 0}, {"unit": None}, {"location": ""}):
        response = client.patch(url, json=body, headers=bearer("bob"))
        assert response.status_code == 400, body
    stored = db.rows("kitchen_inventory")[0]
    assert (stored["name"], stored["quantity"], stored["unit"], stored["location"]) == ("Rice", 2, "kg", "Cupboard")

    cleared = client.patch(url, json={"expirationDate": None}, headers=bearer("bob"))
    assert cleared.status_code == 200
    assert cleared.json()["expirationDate"] is None


def test_grocery_item_update_rejects_null_and_negative(client, db, group):
    grocery_list = client.post(
        "/api/v1/kitchen/grocery-lists", json={"groupId": group["id"], "name": "Weekly"}, headers=bearer("bob")
    ).json()
    items_url = f"/api/v1/kitchen/grocery-lists/{grocery_list['id']}/items"
    assert client.post(items_url, json={"name": "Milk", "quantity": -1}, headers=bearer("bob")).status_code == 400
    item = client.post(items_url, json={"name": "Milk", "estimatedCost": 2.5}, headers=bearer("bob")).json()

    for body in ({"isPurchased": None}, {"name": None}, {"quantity": -2}, {"estimatedCost": -1}):
        response = client.patch(f"{items_url}/{item['id']}", json=body, headers=bearer("alice"))
        assert response.status_code == 400, body
    stored = db.rows("kitchen_grocery_items")[0]
    assert (stored["name"], stored["quantity"], stored["estimated_cost"]) == ("Milk", 1, 2.5)
    assert not stored.get("is_purchased")


def test_photo_skips_malformed_items(client, db, gemini, group):
    gemini.photo_results = [
        {"items": [
            {"name": "Eggs", "quantity": "a dozen"},
            {"name": "Butter", "category": "dairy", "quantity": 1, "unit": "block"},
            {"quantity": 2},
            "Yoghurt",
            {"name": "Jam", "quantity": -3},
        ]},
    ]
    response = client.post(
        "/api/v1/kitchen/inventory/photo",
        json={"groupId": group["id"], "imageData": ["data:image/png;base64,AAAA"]},
        headers=bearer("bob"),
    )
    assert response.status_code == 200
    assert [i["name"] for i in response.json()["items"]] == ["Butter"]
    assert [row["name"] for row in db.rows("kitchen_inventory")] == ["Butter"]


def test_generated_meal_plan_is_created_by_caller(client, db, gemini, group):
    gemini.meal_plan = {"name": "Quick week", "meals": []}
    response = client.post(
        "/api/v1/kitchen/meal-plans/generate",
        json={"groupId": group["id"], "createdBy": "mallory"},
        headers=bearer("bob"),
    )
    assert response.status_code == 201
    assert db.rows("kitchen_meal_plans")[0]["created_by"] == "bob"
