"""
Modelos SQLAlchemy - LifeOS.

Tipos portables (JSON, Date, DateTime) para que los mismos modelos
funcionen sobre PostgreSQL y SQLite.
"""

from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordMixin:
    """Serializacion de columnas a dict (orden de declaracion)."""

    def to_record(self) -> dict[str, Any]:
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
        }


# ============================================================
# USERS
# ============================================================


class UserModel(RecordMixin, Base):
    """Usuario dueño de los registros."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="INR")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )


# ============================================================
# FINANCIAL GOALS
# ============================================================


class FinancialGoalModel(RecordMixin, Base):
    """Meta financiera (ahorro, inversión, fondo de emergencia...)."""

    __tablename__ = "financial_goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    target_amount: Mapped[float] = mapped_column(Float, nullable=False)
    current_amount: Mapped[float] = mapped_column(Float, default=0)
    monthly_contribution: Mapped[float] = mapped_column(Float, default=0)

    start_date: Mapped[datetime | None] = mapped_column(DateTime)
    target_date: Mapped[datetime | None] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(20), default="ON_TRACK")

    is_archived: Mapped[bool] = mapped_column(Boolean, default=False)
    is_paused: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )


# ============================================================
# FITNESS GOALS
# ============================================================


class FitnessGoalModel(RecordMixin, Base):
    """Meta de fitness con historial de progreso."""

    __tablename__ = "fitness_goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    metric_type: Mapped[str] = mapped_column(String(30), nullable=False)
    start_value: Mapped[float] = mapped_column(Float, nullable=False)
    current_value: Mapped[float] = mapped_column(Float, nullable=False)
    target_value: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)

    start_date: Mapped[datetime | None] = mapped_column(DateTime)
    target_date: Mapped[datetime | None] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(20), default="ON_TRACK")
    is_achieved: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    progress_history: Mapped[list["FitnessProgressModel"]] = relationship(
        back_populates="goal",
        order_by="FitnessProgressModel.recorded_at.desc()",
    )


class FitnessProgressModel(RecordMixin, Base):
    """Registro puntual de progreso de una meta de fitness."""

    __tablename__ = "fitness_progress"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    fitness_goal_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("fitness_goals.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    notes: Mapped[str | None] = mapped_column(Text)

    goal: Mapped["FitnessGoalModel"] = relationship(back_populates="progress_history")


# ============================================================
# HABITS
# ============================================================


class HabitModel(RecordMixin, Base):
    """Hábito con sus check-ins."""

    __tablename__ = "habits"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    target_count: Mapped[int] = mapped_column(Integer, default=1)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Hábitos cuantitativos
    is_quantity: Mapped[bool] = mapped_column(Boolean, default=False)
    quantity_unit: Mapped[str | None] = mapped_column(String(20))
    quantity_target: Mapped[float | None] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    check_ins: Mapped[list["HabitCheckInModel"]] = relationship(
        back_populates="habit",
        order_by="HabitCheckInModel.date.desc()",
    )


class HabitCheckInModel(RecordMixin, Base):
    """Check-in diario de un hábito."""

    __tablename__ = "habit_check_ins"
    __table_args__ = (Index("ix_habit_check_ins_habit_date", "habit_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    habit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("habits.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=True)
    quantity: Mapped[float | None] = mapped_column(Float)
    notes: Mapped[str | None] = mapped_column(Text)
    skipped: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    habit: Mapped["HabitModel"] = relationship(back_populates="check_ins")


# ============================================================
# LIFE SYSTEMS
# ============================================================


class LifeSystemModel(RecordMixin, Base):
    """Sistema de vida (rutina) con registro de adherencia."""

    __tablename__ = "life_systems"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    adherence_target: Mapped[float] = mapped_column(Float, default=80)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    adherence: Mapped[list["SystemAdherenceModel"]] = relationship(
        back_populates="system",
        order_by="SystemAdherenceModel.date.desc()",
    )


class SystemAdherenceModel(RecordMixin, Base):
    """Adherencia diaria a un sistema."""

    __tablename__ = "system_adherence"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    system_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("life_systems.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    adhered: Mapped[bool] = mapped_column(Boolean, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    system: Mapped["LifeSystemModel"] = relationship(back_populates="adherence")


# ============================================================
# BUDGETS
# ============================================================


class BudgetModel(RecordMixin, Base):
    """Presupuesto mensual (clave año/mes)."""

    __tablename__ = "budgets"
    __table_args__ = (Index("ix_budgets_user_year_month", "user_id", "year", "month"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )

    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    income: Mapped[float] = mapped_column(Float, nullable=False)
    rollover_amount: Mapped[float] = mapped_column(Float, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    items: Mapped[list["BudgetItemModel"]] = relationship(
        back_populates="budget",
        order_by="BudgetItemModel.category",
    )


class BudgetItemModel(RecordMixin, Base):
    """Línea de presupuesto por categoría."""

    __tablename__ = "budget_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    budget_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    planned: Mapped[float] = mapped_column(Float, nullable=False)
    actual: Mapped[float] = mapped_column(Float, default=0)
    rollover: Mapped[float] = mapped_column(Float, default=0)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    budget: Mapped["BudgetModel"] = relationship(back_populates="items")


# ============================================================
# PROGRESS SNAPSHOTS
# ============================================================


class ProgressSnapshotModel(RecordMixin, Base):
    """Foto diaria de los puntajes de vida."""

    __tablename__ = "progress_snapshots"
    __table_args__ = (Index("ix_progress_snapshots_user_date", "user_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)

    life_score: Mapped[int] = mapped_column(Integer, nullable=False)
    finance_score: Mapped[int] = mapped_column(Integer, nullable=False)
    fitness_score: Mapped[int] = mapped_column(Integer, nullable=False)
    habits_score: Mapped[int] = mapped_column(Integer, nullable=False)
    systems_score: Mapped[int] = mapped_column(Integer, nullable=False)

    total_saved: Mapped[float] = mapped_column(Float, default=0)
    active_habits: Mapped[int] = mapped_column(Integer, default=0)
    active_goals: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)


# ============================================================
# ACHIEVEMENTS
# ============================================================


class AchievementModel(RecordMixin, Base):
    """Catálogo de logros (compartido entre usuarios)."""

    __tablename__ = "achievements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    criteria: Mapped[dict] = mapped_column(JSON, nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=10)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)


class UserAchievementModel(RecordMixin, Base):
    """Logro desbloqueado por un usuario."""

    __tablename__ = "user_achievements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    achievement_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("achievements.id"), nullable=False
    )
    unlocked_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    notified: Mapped[bool] = mapped_column(Boolean, default=False)

    achievement: Mapped["AchievementModel"] = relationship()


# ============================================================
# JOURNAL
# ============================================================


class JournalEntryModel(RecordMixin, Base):
    """Entrada del diario."""

    __tablename__ = "journal_entries"
    __table_args__ = (Index("ix_journal_entries_user_date", "user_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)

    title: Mapped[str | None] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[int | None] = mapped_column(Integer)
    energy: Mapped[int | None] = mapped_column(Integer)
    gratitude: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str] | None] = mapped_column(JSON)
    is_private: Mapped[bool] = mapped_column(Boolean, default=True)
    word_count: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )
