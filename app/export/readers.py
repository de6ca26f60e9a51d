"""
Domain Readers - Lectura de registros por dominio.

Cada reader abre su propia sesión, así varios pueden correr en
paralelo sin compartir estado. La pertenencia se aplica solo por el
scope de la query (user_id), nunca por el contenido del registro.
"""

import logging
from abc import ABC
from datetime import date, timedelta
from typing import Any, Callable, ClassVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from app.db.database import get_session
from app.db.models import (
    BudgetModel,
    FinancialGoalModel,
    FitnessGoalModel,
    HabitCheckInModel,
    HabitModel,
    JournalEntryModel,
    LifeSystemModel,
    ProgressSnapshotModel,
    SystemAdherenceModel,
    UserAchievementModel,
    UserModel,
)
from app.export.domains import ExportDomain
from app.export.selection import DateRange, normalize_days
from app.utils.errors import retry_database

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class DomainReader(ABC):
    """
    Capacidad de lectura de un dominio.

    Subclases definen `domain`, `model` y la columna temporal; pueden
    sobreescribir `build_query`, `load_options` y `to_record`.
    """

    domain: ClassVar[ExportDomain]
    model: ClassVar[type]
    date_column: ClassVar[str] = "created_at"

    def __init__(self, session_factory: Callable | None = None):
        self._session_factory = session_factory or get_session

    @property
    def temporal_column(self):
        return getattr(self.model, self.date_column)

    def owner_clause(self, user_id: str):
        return self.model.user_id == user_id

    def load_options(self, date_range: DateRange | None = None, **options: Any) -> list:
        """Opciones de carga para relaciones anidadas."""
        return []

    def build_query(
        self,
        user_id: str,
        date_range: DateRange | None = None,
        limit: int | None = None,
        **options: Any,
    ) -> Select:
        query = select(self.model).where(self.owner_clause(user_id))

        if date_range:
            query = query.where(*date_range.clauses(self.temporal_column))

        loaders = self.load_options(date_range, **options)
        if loaders:
            query = query.options(*loaders)

        query = query.order_by(self.temporal_column.desc(), self.model.id)

        if limit is not None and limit > 0:
            query = query.limit(limit)

        return query

    def to_record(self, row) -> Record:
        return row.to_record()

    @retry_database()
    async def fetch(
        self,
        user_id: str,
        date_range: DateRange | None = None,
        limit: int | None = None,
        **options: Any,
    ) -> list[Record]:
        """Obtiene los registros del usuario, opcionalmente acotados."""
        query = self.build_query(user_id, date_range, limit, **options)

        async with self._session_factory() as session:
            result = await session.execute(query)
            records = [self.to_record(row) for row in result.scalars().all()]

        logger.debug(f"{self.domain.value}: {len(records)} registros para {user_id}")
        return records

    @retry_database()
    async def count(self, user_id: str) -> int:
        """Cuenta registros del usuario sin traerlos."""
        query = (
            select(func.count())
            .select_from(self.model)
            .where(self.owner_clause(user_id))
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalar() or 0


class FinancialGoalsReader(DomainReader):
    domain = ExportDomain.FINANCIAL_GOALS
    model = FinancialGoalModel


class FitnessGoalsReader(DomainReader):
    domain = ExportDomain.FITNESS_GOALS
    model = FitnessGoalModel

    def load_options(self, date_range=None, **options):
        return [selectinload(FitnessGoalModel.progress_history)]

    def to_record(self, row: FitnessGoalModel) -> Record:
        record = row.to_record()
        record["progress_history"] = [p.to_record() for p in row.progress_history]
        return record


class HabitsReader(DomainReader):
    """
    Hábitos con check-ins.

    Los hábitos se filtran por `created_at`; los check-ins por el rango
    si existe, o por la ventana de `days` (default 30) si no.
    """

    domain = ExportDomain.HABITS
    model = HabitModel

    def load_options(self, date_range=None, days=None, **options):
        if date_range:
            criteria = date_range.clauses(HabitCheckInModel.date)
        else:
            since = date.today() - timedelta(days=normalize_days(days))
            criteria = [HabitCheckInModel.date >= since]

        if not criteria:
            return [selectinload(HabitModel.check_ins)]
        return [selectinload(HabitModel.check_ins.and_(*criteria))]

    def to_record(self, row: HabitModel) -> Record:
        record = row.to_record()
        record["check_ins"] = [c.to_record() for c in row.check_ins]
        return record

    @retry_database()
    async def count_check_ins(self, user_id: str) -> int:
        """Check-ins de todos los hábitos del usuario (sin ventana de días)."""
        query = (
            select(func.count(HabitCheckInModel.id))
            .select_from(HabitCheckInModel)
            .join(HabitModel, HabitCheckInModel.habit_id == HabitModel.id)
            .where(HabitModel.user_id == user_id)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalar() or 0


class SystemsReader(DomainReader):
    domain = ExportDomain.SYSTEMS
    model = LifeSystemModel

    def load_options(self, date_range=None, **options):
        if date_range:
            return [
                selectinload(
                    LifeSystemModel.adherence.and_(
                        *date_range.clauses(SystemAdherenceModel.date)
                    )
                )
            ]
        return [selectinload(LifeSystemModel.adherence)]

    def to_record(self, row: LifeSystemModel) -> Record:
        record = row.to_record()
        record["adherence"] = [a.to_record() for a in row.adherence]
        return record


class BudgetsReader(DomainReader):
    """Presupuestos con sus items; `year` acota a un solo año."""

    domain = ExportDomain.BUDGETS
    model = BudgetModel

    def load_options(self, date_range=None, **options):
        return [selectinload(BudgetModel.items)]

    def build_query(self, user_id, date_range=None, limit=None, year=None, **options):
        if year is None:
            return super().build_query(user_id, date_range, limit, **options)

        query = (
            select(BudgetModel)
            .where(self.owner_clause(user_id), BudgetModel.year == year)
            .options(*self.load_options(date_range))
        )
        if date_range:
            query = query.where(*date_range.clauses(self.temporal_column))

        query = query.order_by(BudgetModel.month.asc(), BudgetModel.id)

        if limit is not None and limit > 0:
            query = query.limit(limit)
        return query

    def to_record(self, row: BudgetModel) -> Record:
        record = row.to_record()
        record["items"] = [i.to_record() for i in row.items]
        return record


class SnapshotsReader(DomainReader):
    domain = ExportDomain.SNAPSHOTS
    model = ProgressSnapshotModel
    date_column = "date"


class AchievementsReader(DomainReader):
    domain = ExportDomain.ACHIEVEMENTS
    model = UserAchievementModel
    date_column = "unlocked_at"

    def load_options(self, date_range=None, **options):
        return [selectinload(UserAchievementModel.achievement)]

    def to_record(self, row: UserAchievementModel) -> Record:
        record = row.to_record()
        record["achievement"] = row.achievement.to_record() if row.achievement else None
        return record


class JournalsReader(DomainReader):
    domain = ExportDomain.JOURNALS
    model = JournalEntryModel
    date_column = "date"


class ProfileReader:
    """
    Perfil del usuario para el envelope del export JSON.

    No es un dominio: no entra al bundle ni al resumen.
    """

    def __init__(self, session_factory: Callable | None = None):
        self._session_factory = session_factory or get_session

    @retry_database()
    async def fetch(self, user_id: str) -> Record | None:
        """id, email, name y created_at; None si el usuario no existe."""
        query = select(
            UserModel.id, UserModel.email, UserModel.name, UserModel.created_at
        ).where(UserModel.id == user_id)

        async with self._session_factory() as session:
            result = await session.execute(query)
            row = result.one_or_none()

        return dict(row._mapping) if row is not None else None


READER_CLASSES: tuple[type[DomainReader], ...] = (
    FinancialGoalsReader,
    FitnessGoalsReader,
    HabitsReader,
    SystemsReader,
    BudgetsReader,
    SnapshotsReader,
    AchievementsReader,
    JournalsReader,
)


def build_readers(session_factory: Callable | None = None) -> dict[ExportDomain, DomainReader]:
    """Un reader por dominio, compartiendo la misma factory de sesiones."""
    return {cls.domain: cls(session_factory) for cls in READER_CLASSES}
