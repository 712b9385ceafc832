# app/services/ledger_service.py
from datetime import datetime
from typing import List

from app.domain.errors import EntityNotFoundError
from app.domain.filters import filter_transactions
from app.domain.schemas import Transaction
from app.services.export_service import transactions_to_csv
from app.services.state_service import StateService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class LedgerService:
    """Rejestr transakcji: tylko dopisywanie (przez checkout), odczyt i czyszczenie."""

    def __init__(self, state: StateService):
        self.state = state

    def list_transactions(
        self,
        month: int | None = None,
        current_week: bool = False,
        now: datetime | None = None,
    ) -> List[Transaction]:
        return filter_transactions(self.state.state.transactions, month, current_week, now)

    def get_transaction(self, transaction_id: str) -> Transaction:
        for t in self.state.state.transactions:
            if t.id == transaction_id:
                return t
        raise EntityNotFoundError(f"Transakcja {transaction_id} nie istnieje")

    def export_csv(self, month: int | None = None, current_week: bool = False) -> str:
        transactions = self.list_transactions(month, current_week)
        logger.info(f"Eksport {len(transactions)} transakcji do CSV")
        return transactions_to_csv(transactions)

    def clear_ledger(self) -> None:
        with self.state.lock:
            self.state.commit(transactions=[])
        logger.info("Rejestr transakcji wyczyszczony")
