import sqlalchemy

from src.models.db.account import Account, AccountRoleEnum
from src.repository.crud.base import BaseCRUDRepository
from src.securities.hashing.password import pwd_generator
from src.utilities.exceptions.database import EntityAlreadyExists, EntityDoesNotExist
from src.utilities.exceptions.password import PasswordDoesNotMatch


class AccountCRUDRepository(BaseCRUDRepository):
    async def get_account_by_id(self, *, account_id: int) -> Account:
        stmt = sqlalchemy.select(Account).where(Account.id == account_id)
        query = await self.async_session.execute(statement=stmt)
        account = query.scalar()
        if not account:
            raise EntityDoesNotExist("Account does not exist!")
        return account  # type: ignore

    async def get_account_by_email(self, *, email: str) -> Account:
        stmt = sqlalchemy.select(Account).where(Account.email == email.lower())
        query = await self.async_session.execute(statement=stmt)
        account = query.scalar()
        if not account:
            raise EntityDoesNotExist("Account with this email does not exist!")
        return account  # type: ignore

    async def create_account(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        role: AccountRoleEnum = AccountRoleEnum.ADMIN,
    ) -> Account:
        email = email.lower()
        stmt = sqlalchemy.select(Account).where(Account.email == email)
        query = await self.async_session.execute(statement=stmt)
        if query.scalar():
            raise EntityAlreadyExists("Account with this email already exists!")

        new_account = Account(email=email, display_name=display_name, role=role, password_hash="")
        new_account.password_hash = pwd_generator.generate_hashed_password(new_password=password)

        self.async_session.add(new_account)
        await self.async_session.commit()
        await self.async_session.refresh(new_account)
        return new_account

    async def verify_password(self, *, email: str, password: str) -> Account:
        account = await self.get_account_by_email(email=email)
        if not pwd_generator.is_password_authenticated(password=password, hashed_password=account.password_hash):
            raise PasswordDoesNotMatch("Password does not match!")
        return account
