"""
Integration tests for Recipes API.

Tests the full recipe flow including:
- Cost calculation from latest prices
- Lines whose cost cannot be computed
- Soft deletion of recipes and recipe lines
- Filtering by recipe and ingredient
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import Recipe, RecipeIngredient
from tests.factories import (
    create_ingredient,
    create_price,
    create_recipe,
    create_recipe_ingredient,
)


def _pancakes(db: Session):
    """Recipe using 500 g of flour bought per kg and 250 ml of milk bought per l."""
    flour = create_ingredient(db, name="Flour")
    milk = create_ingredient(db, name="Milk")
    create_price(db, flour, price=100, quantity=1, unit="kg")
    create_price(db, milk, price=10, quantity=1, unit="l")
    recipe = create_recipe(db, name="Pancakes")
    create_recipe_ingredient(db, recipe, flour, quantity="500", unit="g")
    create_recipe_ingredient(db, recipe, milk, quantity="250", unit="ml")
    return recipe, flour, milk


class TestRecipeCosts:
    """Tests for cost fields on recipe responses."""

    def test_get_recipe_with_costs(self, client: TestClient, db: Session):
        recipe, _, _ = _pancakes(db)

        response = client.get(f"/api/recipes/{recipe.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Pancakes"
        assert data["total_cost"] == pytest.approx(52.5)
        costs = [line["calculated_cost"] for line in data["recipe_ingredients"]]
        assert costs == [pytest.approx(50.0), pytest.approx(2.5)]

    def test_list_recipes_with_costs(self, client: TestClient, db: Session):
        recipe, _, _ = _pancakes(db)

        data = client.get("/api/recipes").json()

        assert [r["id"] for r in data] == [recipe.id]
        assert data[0]["total_cost"] == pytest.approx(52.5)

    def test_unparsable_quantity_gives_null_cost(self, client: TestClient, db: Session):
        recipe, _, _ = _pancakes(db)
        salt = create_ingredient(db, name="Salt")
        create_price(db, salt, price=1, unit="kg")
        create_recipe_ingredient(db, recipe, salt, quantity="a pinch", unit="g")

        data = client.get(f"/api/recipes/{recipe.id}").json()

        salt_line = next(
            line for line in data["recipe_ingredients"] if line["ingredient_id"] == salt.id
        )
        assert salt_line["calculated_cost"] is None
        assert data["total_cost"] == pytest.approx(52.5)

    @pytest.mark.parametrize("quantity", ["1e400", "nan", "inf"])
    def test_non_finite_quantity_keeps_total(
        self, client: TestClient, db: Session, quantity
    ):
        flour = create_ingredient(db, name="Flour")
        salt = create_ingredient(db, name="Salt")
        create_price(db, flour, price=100, unit="kg")
        create_price(db, salt, price=1, unit="kg")
        recipe = create_recipe(db)
        create_recipe_ingredient(db, recipe, flour, quantity="500", unit="g")
        create_recipe_ingredient(db, recipe, salt, quantity=quantity, unit="g")

        response = client.get("/api/recipes")

        assert response.status_code == 200
        data = response.json()[0]
        assert data["total_cost"] == pytest.approx(50.0)
        salt_line = next(
            line for line in data["recipe_ingredients"] if line["ingredient_id"] == salt.id
        )
        assert salt_line["calculated_cost"] is None

    def test_latest_price_wins(self, client: TestClient, db: Session):
        flour = create_ingredient(db)
        now = datetime.now(timezone.utc)
        create_price(db, flour, price=300, unit="kg", date=now - timedelta(days=7))
        create_price(db, flour, price=100, unit="kg", date=now)
        recipe = create_recipe(db)
        create_recipe_ingredient(db, recipe, flour, quantity="1,5", unit="kg")

        data = client.get(f"/api/recipes/{recipe.id}").json()

        assert data["total_cost"] == pytest.approx(150.0)

    def test_recipe_without_lines(self, client: TestClient, db: Session):
        recipe = create_recipe(db)

        data = client.get(f"/api/recipes/{recipe.id}").json()

        assert data["total_cost"] == 0.0
        assert data["recipe_ingredients"] == []


class TestRecipeFilters:
    """Tests for GET /api/recipes query filters."""

    def test_filter_by_recipe_id(self, client: TestClient, db: Session):
        first = create_recipe(db)
        create_recipe(db)

        data = client.get("/api/recipes", params={"recipe_id": first.id}).json()

        assert [r["id"] for r in data] == [first.id]

    def test_filter_by_ingredient(self, client: TestClient, db: Session):
        recipe, _, milk = _pancakes(db)
        create_recipe(db, name="Toast")

        data = client.get("/api/recipes", params={"ingredient_id": milk.id}).json()

        assert [r["id"] for r in data] == [recipe.id]

    def test_deleted_recipes_hidden(self, client: TestClient, db: Session):
        create_recipe(db, deleted_at=datetime.now(timezone.utc))

        assert client.get("/api/recipes").json() == []


class TestRecipeCrud:
    """Tests for creating and deleting recipes."""

    def test_create_recipe(self, client: TestClient):
        response = client.post("/api/recipes", json={"name": " Bread "})

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Bread"
        assert data["total_cost"] == 0.0

    def test_create_recipe_empty_name(self, client: TestClient):
        response = client.post("/api/recipes", json={"name": ""})

        assert response.status_code == 400

    def test_get_missing_recipe(self, client: TestClient):
        assert client.get("/api/recipes/999999").status_code == 404

    def test_delete_recipe(self, client: TestClient, db: Session):
        recipe = create_recipe(db)

        response = client.delete(f"/api/recipes/{recipe.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Recipe deleted successfully"}
        assert client.get(f"/api/recipes/{recipe.id}").status_code == 404
        db.expire_all()
        assert db.get(Recipe, recipe.id).deleted_at is not None

    def test_delete_missing_recipe(self, client: TestClient):
        assert client.delete("/api/recipes/999999").status_code == 404


class TestRecipeIngredients:
    """Tests for adding and removing recipe lines."""

    def test_add_line(self, client: TestClient, db: Session):
        recipe = create_recipe(db)
        flour = create_ingredient(db, name="Flour")

        response = client.post(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredient_id": flour.id, "quantity": "1,5", "unit": "kg"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["quantity"] == "1,5"
        assert data["ingredient"]["name"] == "Flour"

    def test_add_line_to_missing_recipe(self, client: TestClient, db: Session):
        flour = create_ingredient(db)

        response = client.post(
            "/api/recipes/999999/ingredients",
            json={"ingredient_id": flour.id, "quantity": "1"},
        )

        assert response.status_code == 404

    def test_add_unknown_ingredient(self, client: TestClient, db: Session):
        recipe = create_recipe(db)

        response = client.post(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredient_id": 999999, "quantity": "1"},
        )

        assert response.status_code == 404

    def test_add_empty_quantity(self, client: TestClient, db: Session):
        recipe = create_recipe(db)
        flour = create_ingredient(db)

        response = client.post(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredient_id": flour.id, "quantity": "  "},
        )

        assert response.status_code == 400

    def test_remove_line(self, client: TestClient, db: Session):
        recipe, flour, milk = _pancakes(db)

        response = client.delete(f"/api/recipes/{recipe.id}/ingredients/{flour.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Ingredient deleted from recipe successfully"}

        data = client.get(f"/api/recipes/{recipe.id}").json()
        assert [line["ingredient_id"] for line in data["recipe_ingredients"]] == [milk.id]
        assert data["total_cost"] == pytest.approx(2.5)

        db.expire_all()
        removed = db.query(RecipeIngredient).filter(
            RecipeIngredient.ingredient_id == flour.id
        ).one()
        assert removed.deleted_at is not None

    def test_remove_line_from_missing_recipe(self, client: TestClient):
        response = client.delete("/api/recipes/999999/ingredients/1")

        assert response.status_code == 404
