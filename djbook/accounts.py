"""Account service - registration, login and account removal"""

import logging
import re
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .db import transaction
from .errors import AlreadyExistsError, AuthenticationError, NotFoundError, ValidationError
from .models import DJProfile, Plan, Role, User, new_id
from .repositories import CalendarRepository, DJProfileRepository, ReviewRepository, UserRepository
from .security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(*parts: str) -> str:
    text = "-".join(p for p in parts if p)
    return _NON_SLUG.sub("-", text.lower()).strip("-")


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role=Role.CUSTOMER,
        plan=None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> User:
        try:
            role = Role(str(role.value if isinstance(role, Role) else role).upper())
        except ValueError:
            raise ValidationError(f"Invalid role: {role}")
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be registered")
        if not (name or "").strip() or not (email or "").strip() or not password:
            raise ValidationError("name, email and password are required")
        if role == Role.DJ and not (city or "").strip():
            raise ValidationError("city is required for DJ accounts")

        async with transaction(self.db):
            if await UserRepository.get_by_email(self.db, email):
                raise AlreadyExistsError("Email already exists")

            user = UserRepository.add(
                self.db,
                User(
                    id=new_id(),
                    name=name.strip(),
                    email=email.strip().lower(),
                    password_hash=hash_password(password),
                    role=role.value,
                ),
            )

            if role == Role.DJ:
                profile = await self._create_profile(user, plan, state, city, latitude, longitude)
                user.dj_profile_id = profile.id

        logger.info(f"Registered {role.value} account {user.id}")
        return user

    async def _create_profile(self, user, plan, state, city, latitude, longitude) -> DJProfile:
        try:
            plan = Plan(str(plan or Plan.FREE.value).upper())
        except ValueError:
            raise ValidationError(f"Unknown plan: {plan}")

        base = slugify(user.name, city.strip()) or "dj"
        slug = base
        n = 2
        while await DJProfileRepository.slug_exists(self.db, slug):
            slug = f"{base}-{n}"
            n += 1

        profile = DJProfile(
            id=new_id(),
            user_id=user.id,
            name=user.name,
            slug=slug,
            city=city.strip(),
            state=(state or "").strip() or None,
            genres=[],
            event_types=[],
            gallery=[],
            videos=[],
            latitude=latitude,
            longitude=longitude,
        )
        profile.apply_plan(plan.value)
        DJProfileRepository.add(self.db, profile)
        await self.db.flush()
        return profile

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await UserRepository.get_by_email(self.db, email or "")
        if not user or not verify_password(password or "", user.password_hash):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials")
        return user, create_access_token(user)

    async def delete_account(self, user_id: str) -> None:
        async with transaction(self.db):
            user = await UserRepository.get(self.db, user_id)
            if not user:
                raise NotFoundError("User not found")

            if user.dj_profile_id:
                # bookings stay as history; calendar and reviews go with the profile
                await CalendarRepository.delete_for_dj(self.db, user.dj_profile_id)
                await ReviewRepository.delete_for_dj(self.db, user.dj_profile_id)
                profile = await DJProfileRepository.get(self.db, user.dj_profile_id)
                if profile:
                    await DJProfileRepository.delete(self.db, profile)

            await UserRepository.delete(self.db, user)

        logger.info(f"Deleted account {user_id}")

    async def ensure_admin(self, email: str, password: str) -> User:
        async with transaction(self.db):
            user = await UserRepository.get_by_email(self.db, email)
            if user:
                return user
            user = UserRepository.add(
                self.db,
                User(
                    id=new_id(),
                    name="Admin",
                    email=email.strip().lower(),
                    password_hash=hash_password(password),
                    role=Role.ADMIN.value,
                ),
            )

        logger.info(f"Bootstrapped admin account {user.email}")
        return user
