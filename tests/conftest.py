import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chronochef import models  # noqa: F401
from chronochef.core.database import Base, get_db
from chronochef.main import app
from chronochef.models.user import User
from chronochef.services.recipe.recipe_generation import (
    RecipeGenerationService,
    get_recipe_generation_service,
)

SAMPLE_RECIPES = {
    "recipes": [
        {
            "name": "Garlic Butter Chicken",
            "description": "Juicy pan-seared chicken in a garlic butter sauce.",
            "cookTime": "25 minutes",
            "ingredients": ["2 chicken breasts", "3 cloves garlic", "2 tbsp butter"],
            "instructions": ["Season the chicken.", "Sear 6 minutes per side.", "Baste with garlic butter."],
        },
        {
            "name": "Chicken Fried Rice",
            "description": "Quick fried rice with leftover chicken.",
            "cookTime": "20 minutes",
            "ingredients": ["1 cup cooked rice", "1 chicken breast", "2 eggs"],
            "instructions": ["Dice the chicken.", "Scramble the eggs.", "Fry everything with the rice."],
        },
    ]
}


def make_completion(content):
    """Shape of an OpenAI chat completion as far as the generator reads it."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    """Insert a bare user row and return its id."""
    def _make(username):
        user = User(username=username, email=f"{username}@example.com")
        db.add(user)
        db.commit()
        return user.id
    return _make


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(json.dumps(SAMPLE_RECIPES))
    return client


@pytest.fixture
def client(session_factory, openai_client):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_recipe_generation_service] = (
        lambda: RecipeGenerationService(client=openai_client)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sign_up(client):
    """Register a user and return bearer headers for it."""
    def _sign_up(username, password="secret123"):
        response = client.post("/api/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        })
        assert response.status_code == 201, response.text
        # Keep identity explicit per request
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _sign_up
