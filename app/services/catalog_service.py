# app/services/catalog_service.py
import uuid
from typing import List

from app.domain.errors import EntityNotFoundError
from app.domain.filters import search_products
from app.domain.schemas import Product, ProductIn, ProductUpdate
from app.services.export_service import catalog_to_csv, parse_products_csv
from app.services.state_service import StateService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


class CatalogService:
    """Use case'y katalogu: dodaj, edytuj, usun, import, czyszczenie."""

    def __init__(self, state: StateService):
        self.state = state

    #query
    def list_products(self, search: str | None = None, limit: int | None = None) -> List[Product]:
        return search_products(self.state.state.catalog, search, limit)

    def get_product(self, product_id: str) -> Product:
        for p in self.state.state.catalog:
            if p.id == product_id:
                return p
        raise EntityNotFoundError(f"Produkt {product_id} nie istnieje")

    def export_csv(self) -> str:
        return catalog_to_csv(self.state.state.catalog)

    #commands
    def add_product(self, payload: ProductIn) -> Product:
        product = Product(id=new_id(), **payload.model_dump())

        with self.state.lock:
            self.state.commit(catalog=[*self.state.state.catalog, product])

        logger.info(f"Dodano produkt {product.id} ({product.name})")
        return product

    def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        with self.state.lock:
            current = self.get_product(product_id)
            updated = current.model_copy(update=payload.model_dump(exclude_none=True))

            self.state.commit(
                catalog=[updated if p.id == product_id else p for p in self.state.state.catalog]
            )

        logger.info(f"Zaktualizowano produkt {product_id}")
        return updated

    def delete_product(self, product_id: str) -> None:
        with self.state.lock:
            self.get_product(product_id)
            self.state.commit(
                catalog=[p for p in self.state.state.catalog if p.id != product_id]
            )

        logger.info(f"Usunieto produkt {product_id}")

    def import_products(self, csv_text: str) -> List[Product]:
        rows = parse_products_csv(csv_text)
        imported = [Product(id=new_id(), **row.model_dump()) for row in rows]

        if imported:
            with self.state.lock:
                self.state.commit(catalog=[*self.state.state.catalog, *imported])

        logger.info(f"Zaimportowano {len(imported)} produktow")
        return imported

    def clear_catalog(self) -> None:
        with self.state.lock:
            self.state.commit(catalog=[])
        logger.info("Katalog wyczyszczony")
