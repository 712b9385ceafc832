#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.kv_entry import KeyValueEntryModel

__all__ = ["KeyValueEntryModel"]
