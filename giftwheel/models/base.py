from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase

from giftwheel.db.metadata import metadata_obj


class Base(DeclarativeBase):
    metadata = metadata_obj
    # Every timestamp in the schema is stored timezone-aware.
    type_annotation_map = {datetime: DateTime(timezone=True)}
