"""
Persistence provider for WardShift.

Offers create / update / delete / list per entity kind. Every call is a
single attempt; failures surface as PersistenceError and nothing is retried.
"""
import logging
from enum import Enum
from typing import Dict, List, Optional, Any, Type

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from wardshift.core.exceptions import PersistenceError
from wardshift.db.connection import get_session_factory
from wardshift.db.tables import (
    PatientRecord,
    TaskRecord,
    ActivityLogRecord,
    ShiftRecord,
    DischargedPatientRecord,
    DeceasedPatientRecord,
    BedStatusRecord
)

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    PATIENTS = "patients"
    TASKS = "tasks"
    ACTIVITY_LOGS = "activity_logs"
    SHIFTS = "shifts"
    DISCHARGED = "discharged"
    DECEASED = "deceased"
    BED_STATUSES = "bed_statuses"


_TABLES: Dict[EntityKind, Type] = {
    EntityKind.PATIENTS: PatientRecord,
    EntityKind.TASKS: TaskRecord,
    EntityKind.ACTIVITY_LOGS: ActivityLogRecord,
    EntityKind.SHIFTS: ShiftRecord,
    EntityKind.DISCHARGED: DischargedPatientRecord,
    EntityKind.DECEASED: DeceasedPatientRecord,
    EntityKind.BED_STATUSES: BedStatusRecord,
}


def _record_key(kind: EntityKind, entity: BaseModel) -> str:
    if kind == EntityKind.BED_STATUSES:
        return entity.department
    return entity.id


class PersistenceProvider:
    """SQLAlchemy-backed document store, one table per entity kind."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or get_session_factory()

    def create(self, kind: EntityKind, entity: BaseModel) -> Dict[str, Any]:
        data = entity.model_dump(mode="json")
        key = _record_key(kind, entity)
        with self._session_factory() as session:
            try:
                session.add(_TABLES[kind](id=key, data=data))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Failed to create {kind.value} record {key}: {e}") from e
        logger.debug(f"Created {kind.value} record {key}")
        return data

    def update(self, kind: EntityKind, entity: BaseModel) -> Dict[str, Any]:
        """Replace a stored record; creates it when it does not exist yet."""
        data = entity.model_dump(mode="json")
        key = _record_key(kind, entity)
        with self._session_factory() as session:
            try:
                session.merge(_TABLES[kind](id=key, data=data))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Failed to update {kind.value} record {key}: {e}") from e
        logger.debug(f"Updated {kind.value} record {key}")
        return data

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        with self._session_factory() as session:
            try:
                record = session.get(_TABLES[kind], record_id)
                if record is None:
                    return False
                session.delete(record)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Failed to delete {kind.value} record {record_id}: {e}") from e
        logger.debug(f"Deleted {kind.value} record {record_id}")
        return True

    def list(self, kind: EntityKind) -> List[Dict[str, Any]]:
        table = _TABLES[kind]
        with self._session_factory() as session:
            try:
                records = session.query(table).order_by(table.created_at).all()
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to list {kind.value}: {e}") from e
            return [record.data for record in records]
