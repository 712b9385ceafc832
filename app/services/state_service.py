# app/services/state_service.py
import threading
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Protocol

from pydantic import TypeAdapter

from app.domain.checkout import ZERO_DISCOUNT
from app.domain.schemas import CartLine, Discount, FixedTax, Product, Transaction
from app.utils.settings import STORAGE_KEY_PREFIX
from app.utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...

    def save_many(self, values: Dict[str, Any]) -> None: ...

    def ping(self) -> bool: ...


@dataclass
class AppState:
    catalog: List[Product] = field(default_factory=list)
    cart: List[CartLine] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    fixed_taxes: List[FixedTax] = field(default_factory=list)
    discount: Discount = ZERO_DISCOUNT
    # wybor podatkow tylko na czas sesji, nie jest zapisywany
    selected_tax_ids: List[str] = field(default_factory=list)


#kolekcja -> (sufiks klucza, adapter do walidacji/serializacji)
_COLLECTIONS = {
    "catalog": ("inventory", TypeAdapter(List[Product])),
    "cart": ("cart", TypeAdapter(List[CartLine])),
    "transactions": ("transactions", TypeAdapter(List[Transaction])),
    "fixed_taxes": ("fixed_taxes", TypeAdapter(List[FixedTax])),
}


class StateService:
    """
    Jedyny wlasciciel stanu aplikacji.
    -akcje wykonywane po kolei (lock), zadna akcja nie przeplata sie z inna
    -kazda zmiana = podmiana kolekcji w pamieci + jeden zapis do magazynu
    -blad zapisu jest logowany, stan w pamieci zostaje
    """

    def __init__(self, store: KeyValueStore, key_prefix: str = STORAGE_KEY_PREFIX):
        self.store = store
        self.key_prefix = key_prefix
        self.lock = threading.RLock()
        self.state = AppState()

    def key_for(self, collection: str) -> str:
        suffix, _ = _COLLECTIONS[collection]
        return f"{self.key_prefix}:{suffix}"

    def load(self) -> AppState:
        with self.lock:
            loaded = {}
            for name, (_, adapter) in _COLLECTIONS.items():
                loaded[name] = self._load_collection(name, adapter)

            self.state = AppState(**loaded)
            logger.info(
                f"Wczytano stan: {len(self.state.catalog)} produktow, "
                f"{len(self.state.cart)} pozycji koszyka, "
                f"{len(self.state.transactions)} transakcji, "
                f"{len(self.state.fixed_taxes)} podatkow"
            )
            return self.state

    def _load_collection(self, name: str, adapter: TypeAdapter) -> list:
        key = self.key_for(name)
        try:
            raw = self.store.load(key)
        except Exception as e:
            logger.error(f"Blad odczytu {key} z magazynu: {e}")
            return []

        #brak klucza przy pierwszym uruchomieniu to pusta kolekcja
        if raw is None:
            return []

        try:
            return adapter.validate_python(raw)
        except ValueError as e:
            logger.error(f"Niepoprawne dane pod kluczem {key}: {e}")
            return []

    def commit(self, **changes) -> AppState:
        """
        Podmienia podane pola stanu i zapisuje zmienione kolekcje jednym zapisem.
        Pola spoza magazynu (discount, selected_tax_ids) zmieniaja tylko pamiec.
        """
        with self.lock:
            known = {f.name for f in fields(AppState)}
            for name in changes:
                if name not in known:
                    raise AttributeError(f"Nieznane pole stanu: {name}")

            #nowy obiekt stanu podmieniany jednym przypisaniem, czytelnicy bez locka
            #widza albo caly stary stan albo caly nowy
            self.state = replace(self.state, **changes)

            payload = {
                self.key_for(name): _COLLECTIONS[name][1].dump_python(value, mode="json", by_alias=True)
                for name, value in changes.items()
                if name in _COLLECTIONS
            }
            if payload:
                self._persist(payload)

            return self.state

    def _persist(self, payload: Dict[str, Any]) -> None:
        try:
            if len(payload) == 1:
                [(key, value)] = payload.items()
                self.store.save(key, value)
            else:
                self.store.save_many(payload)
        except Exception as e:
            # bez retry i bez rollbacku, pamiec jest zrodlem prawdy w tej sesji
            logger.error(f"Blad zapisu {list(payload)} do magazynu: {e}")

    def ping(self) -> bool:
        try:
            return self.store.ping()
        except Exception as e:
            logger.error(f"Magazyn niedostepny: {e}")
            return False


def build_store(backend: str | None = None) -> KeyValueStore:
    from app.utils import settings

    backend = backend or settings.STORAGE_BACKEND

    if backend == "redis":
        from app.repos.redis_kv_repo import RedisKeyValueRepo

        return RedisKeyValueRepo(settings.REDIS_URL)

    if backend == "sql":
        from app.data.database import SessionLocal, init_db
        from app.repos.kv_repo import KeyValueRepo

        init_db()
        return KeyValueRepo(SessionLocal)

    raise ValueError(f"Nieznany STORAGE_BACKEND: {backend}")
