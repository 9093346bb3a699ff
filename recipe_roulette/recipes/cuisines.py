from __future__ import annotations

from sqlalchemy import select

from ..db import Cuisine, Datastore
from ..errors import NotFoundError
from ..validation import require_positive_id, require_text


class CuisineCatalogue:
    def __init__(self, datastore: Datastore) -> None:
        self.datastore = datastore

    def all_cuisines(self) -> list[Cuisine]:
        with self.datastore.session() as session:
            return list(session.scalars(select(Cuisine).order_by(Cuisine.name)).all())

    def cuisine_id_by_name(self, name: str) -> int:
        name = require_text(name, "cuisine name")
        with self.datastore.session() as session:
            cuisine_id = session.scalar(select(Cuisine.id).where(Cuisine.name == name))
        if cuisine_id is None:
            raise NotFoundError(f'Cuisine with name "{name}" not found.')
        return cuisine_id

    def cuisine_name_by_id(self, cuisine_id: int) -> str:
        cuisine_id = require_positive_id(cuisine_id, "cuisine ID")
        with self.datastore.session() as session:
            name = session.scalar(select(Cuisine.name).where(Cuisine.id == cuisine_id))
        if name is None:
            raise NotFoundError(f'Cuisine with ID "{cuisine_id}" not found.')
        return name
