"""
Periferia Social Backend — Configuration, Lifespan & Seed Tests
================================================================

What:  Development-default detection, production refusal at startup, and
       the demo data produced by the seed tool.
"""

import pytest
from sqlalchemy import func, select

from periferia_social.config import DEFAULT_JWT_SECRET, Settings, settings
from periferia_social.main import create_app
from periferia_social.models import Post, User
from periferia_social.seed import DEMO_PASSWORD, seed
from periferia_social.services.auth_service import AuthService


class TestSettings:

    def test_url_composed_from_parts(self):
        config = Settings(database_url=None, db_host="db", db_port=5433, db_user="u", db_password="p", db_name="n")

        assert config.sqlalchemy_url == "postgresql+asyncpg://u:p@db:5433/n"

    def test_explicit_url_wins(self):
        config = Settings(database_url="sqlite+aiosqlite:///x.db", db_host="ignored")

        assert config.sqlalchemy_url == "sqlite+aiosqlite:///x.db"

    def test_development_defaults_reported(self):
        config = Settings(database_url=None, jwt_secret=DEFAULT_JWT_SECRET, db_password="postgres")

        with pytest.raises(ValueError) as exc:
            config.validate_required_for_production()
        assert "JWT_SECRET" in str(exc.value)
        assert "DB_PASSWORD" in str(exc.value)

    def test_custom_secrets_pass(self):
        config = Settings(database_url=None, jwt_secret="long-random", db_password="also-random")

        config.validate_required_for_production()

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="CHATTY")

    def test_cors_origins_split(self):
        config = Settings(cors_origins="http://a.test, http://b.test")

        assert config.cors_origins_list == ["http://a.test", "http://b.test"]


class TestLifespan:

    @pytest.mark.asyncio
    async def test_production_refuses_default_secret(self, monkeypatch, database):
        monkeypatch.setattr(settings, "environment", "production")
        monkeypatch.setattr(settings, "jwt_secret", DEFAULT_JWT_SECRET)
        app = create_app(database=database)

        with pytest.raises(ValueError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_injected_database_left_open(self, database):
        app = create_app(database=database)

        async with app.router.lifespan_context(app):
            assert app.state.database is database

        # Still usable after shutdown: the test owns it
        async with database.session() as session:
            assert await session.scalar(select(func.count(User.id))) == 0


class TestSeed:

    @pytest.mark.asyncio
    async def test_seed_creates_demo_users_and_posts(self, database):
        assert await seed(database) == 3

        async with database.session() as session:
            aliases = (await session.scalars(select(User.alias).order_by(User.alias))).all()
            messages = (await session.scalars(select(Post.message).order_by(Post.message))).all()

        assert aliases == ["juanp", "luisr", "mariag"]
        assert messages == ["Hola, soy Juan", "Hola, soy Luis", "Hola, soy Maria"]

    @pytest.mark.asyncio
    async def test_seed_is_repeatable_and_accounts_log_in(self, database):
        await seed(database)
        await seed(database)

        async with database.session() as session:
            assert await session.scalar(select(func.count(User.id))) == 3
            token = await AuthService().login(session, "juan@example.com", DEMO_PASSWORD)

        assert token
