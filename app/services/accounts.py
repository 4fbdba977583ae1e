"""Ownership-scoped account storage.

Every query filters on owner_id as well as the account id, so an account that
belongs to another user looks exactly like one that does not exist.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.models import Account
from app.schemas.account import AccountType
from app.services.results import RepositoryResult

logger = logging.getLogger(__name__)


class AccountRepository:
    """CRUD over accounts, always scoped to the authenticated owner's id."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _scoped(self, owner_id: str, account_id: str) -> Query:
        return self.session.query(Account).filter(
            Account.id == account_id,
            Account.owner_id == owner_id,
        )

    def _storage_failure(self, operation: str) -> RepositoryResult:
        self.session.rollback()
        logger.exception("[ERR_ACCOUNT_%s] account storage failure", operation)
        return RepositoryResult.internal_error()

    def create_account(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType,
    ) -> RepositoryResult[Account]:
        account = Account(owner_id=owner_id, name=name, type=account_type)
        try:
            self.session.add(account)
            self.session.commit()
            self.session.refresh(account)
        except SQLAlchemyError:
            return self._storage_failure("CREATE")
        logger.info(
            "Account created (account_id=%s, owner_id=%s, type=%s)",
            account.id,
            owner_id,
            account_type.value,
        )
        return RepositoryResult.success(account)

    def list_accounts(
        self,
        owner_id: str,
        type_filter: AccountType | None = None,
    ) -> RepositoryResult[list[Account]]:
        """Owner's accounts, oldest first. An empty result is NOT_FOUND."""
        try:
            query = self.session.query(Account).filter(Account.owner_id == owner_id)
            if type_filter is not None:
                query = query.filter(Account.type == type_filter)
            accounts = query.order_by(Account.created_at, Account.id).all()
        except SQLAlchemyError:
            return self._storage_failure("LIST")
        if not accounts:
            return RepositoryResult.not_found()
        return RepositoryResult.success(accounts)

    def update_account(
        self,
        owner_id: str,
        account_id: str,
        name: str | None = None,
    ) -> RepositoryResult[Account]:
        """
        Apply the patch with one UPDATE matching both id and owner_id.
        Zero matched rows (unknown id or someone else's account) is NOT_FOUND.
        """
        try:
            if name is not None:
                matched = self._scoped(owner_id, account_id).update(
                    {Account.name: name}, synchronize_session=False
                )
                if matched == 0:
                    self.session.rollback()
                    return RepositoryResult.not_found()
                self.session.commit()
            account = self._scoped(owner_id, account_id).first()
        except SQLAlchemyError:
            return self._storage_failure("UPDATE")
        if account is None:
            return RepositoryResult.not_found()
        if name is not None:
            logger.info("Account updated (account_id=%s, owner_id=%s)", account_id, owner_id)
        return RepositoryResult.success(account)

    def delete_account(self, owner_id: str, account_id: str) -> RepositoryResult[Account]:
        """Delete the owner's account and return it as it was before deletion."""
        try:
            account = self._scoped(owner_id, account_id).first()
            if account is None:
                return RepositoryResult.not_found()
            # Detach so the returned entity stays readable after the row is gone.
            self.session.expunge(account)
            deleted = self._scoped(owner_id, account_id).delete(synchronize_session=False)
            if deleted == 0:
                self.session.rollback()
                return RepositoryResult.not_found()
            self.session.commit()
        except SQLAlchemyError:
            return self._storage_failure("DELETE")
        logger.info("Account deleted (account_id=%s, owner_id=%s)", account_id, owner_id)
        return RepositoryResult.success(account)
