# storefront/services/user_service.py
import logging
import uuid
from typing import Any, Dict
from ..database.repositories import UserRepository
from ..errors import AuthError, DuplicateKeyError, InvalidReferenceError
from ..models.user import User, RegisterRequest
from ..utils.identifiers import parse_uuid
from ..utils.security import hash_password, verify_password, generate_access_token, verify_access_token

class UserService:
    def __init__(self, users: UserRepository):
        self.users = users
        self.logger = logging.getLogger(__name__)

    async def register_user(self, user_data: RegisterRequest) -> Dict[str, Any]:
        """Create an account and return it with an access token"""
        email = user_data.email.strip().lower()
        if await self.users.get_by_email(email):
            raise DuplicateKeyError("Email already registered")

        user = User.model_validate(await self.users.create({
            'user_id': uuid.uuid4(),
            'name': user_data.name,
            'email': email,
            'password_hash': hash_password(user_data.password),
            'role': user_data.role.value
        }))
        self.logger.info(f"User {user.user_id} registered as {user.role.value}")

        return {
            "message": "User registered successfully",
            "user": user.model_dump(mode="json"),
            "token": generate_access_token(str(user.user_id), user.role.value)
        }

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Exchange credentials for an access token"""
        user = await self.users.get_by_email(email.strip().lower())
        if not user or not verify_password(password, user['password_hash']):
            raise AuthError("Invalid credentials")

        return {
            "message": "Login successful",
            "token": generate_access_token(str(user['user_id']), user['role'])
        }

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to the user it was issued for"""
        claims = verify_access_token(token)
        if not claims:
            raise AuthError("Invalid token")

        user_id, _role = claims
        try:
            user = await self.users.get(parse_uuid(user_id, "user"))
        except InvalidReferenceError:
            raise AuthError("Invalid token") from None

        if not user:
            raise AuthError("User not found")
        return User.model_validate(user)

    async def get_profile(self, user: User) -> Dict[str, Any]:
        return {"user": user.model_dump(mode="json")}
