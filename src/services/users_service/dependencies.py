from src.infra.database import DatabaseManager, get_db
from src.infra.identity_provider import IdentityProvider, get_identity_provider
from src.services.users_service.repository import UserRepository
from src.services.users_service.service import UserService

def get_database() -> DatabaseManager:
    return get_db()

def get_user_repository() -> UserRepository:
    db = get_database()
    return UserRepository(db)

def get_user_service() -> UserService:
    repo = get_user_repository()
    identity: IdentityProvider = get_identity_provider()
    return UserService(repo, identity)
