# app/services/tax_service.py
from typing import List

from app.domain.errors import EntityNotFoundError
from app.domain.schemas import FixedTax, FixedTaxIn, FixedTaxUpdate
from app.services.catalog_service import new_id
from app.services.state_service import StateService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class TaxService:
    def __init__(self, state: StateService):
        self.state = state

    def list_taxes(self) -> List[FixedTax]:
        return list(self.state.state.fixed_taxes)

    def get_tax(self, tax_id: str) -> FixedTax:
        for t in self.state.state.fixed_taxes:
            if t.id == tax_id:
                return t
        raise EntityNotFoundError(f"Podatek {tax_id} nie istnieje")

    def add_tax(self, payload: FixedTaxIn) -> FixedTax:
        tax = FixedTax(id=new_id(), **payload.model_dump())

        with self.state.lock:
            self.state.commit(fixed_taxes=[*self.state.state.fixed_taxes, tax])

        logger.info(f"Dodano podatek {tax.id} ({tax.name})")
        return tax

    def update_tax(self, tax_id: str, payload: FixedTaxUpdate) -> FixedTax:
        with self.state.lock:
            updated = self.get_tax(tax_id).model_copy(
                update=payload.model_dump(exclude_none=True)
            )
            self.state.commit(
                fixed_taxes=[updated if t.id == tax_id else t for t in self.state.state.fixed_taxes]
            )

        logger.info(f"Zaktualizowano podatek {tax_id}")
        return updated

    def delete_tax(self, tax_id: str) -> None:
        with self.state.lock:
            self.get_tax(tax_id)
            #usuniety podatek nie moze zostac zaznaczony w koszyku
            self.state.commit(
                fixed_taxes=[t for t in self.state.state.fixed_taxes if t.id != tax_id],
                selected_tax_ids=[i for i in self.state.state.selected_tax_ids if i != tax_id],
            )

        logger.info(f"Usunieto podatek {tax_id}")
