"""Dominios exportables (conjunto cerrado)."""

from enum import Enum


class ExportDomain(str, Enum):
    """Dominio de datos del usuario que puede exportarse."""

    FINANCIAL_GOALS = "financialGoals"
    FITNESS_GOALS = "fitnessGoals"
    HABITS = "habits"
    SYSTEMS = "systems"
    BUDGETS = "budgets"
    SNAPSHOTS = "progressSnapshots"
    ACHIEVEMENTS = "achievements"
    JOURNALS = "journalEntries"

    @property
    def flag(self) -> str:
        """Flag de inclusión aceptado en requests (includeHabits, ...)."""
        return DOMAIN_FLAGS[self]

    @property
    def filename(self) -> str:
        """Nombre del archivo CSV del dominio."""
        return DOMAIN_FILENAMES[self]

    @classmethod
    def from_key(cls, key: str) -> "ExportDomain | None":
        """Resuelve una clave de dominio o un flag include*. None si no existe."""
        try:
            return cls(key)
        except ValueError:
            return _FLAG_TO_DOMAIN.get(key)


DOMAIN_FLAGS: dict[ExportDomain, str] = {
    ExportDomain.FINANCIAL_GOALS: "includeFinancialGoals",
    ExportDomain.FITNESS_GOALS: "includeFitnessGoals",
    ExportDomain.HABITS: "includeHabits",
    ExportDomain.SYSTEMS: "includeSystems",
    ExportDomain.BUDGETS: "includeBudgets",
    ExportDomain.SNAPSHOTS: "includeSnapshots",
    ExportDomain.ACHIEVEMENTS: "includeAchievements",
    ExportDomain.JOURNALS: "includeJournals",
}

DOMAIN_FILENAMES: dict[ExportDomain, str] = {
    ExportDomain.FINANCIAL_GOALS: "financial_goals.csv",
    ExportDomain.FITNESS_GOALS: "fitness_goals.csv",
    ExportDomain.HABITS: "habits.csv",
    ExportDomain.SYSTEMS: "systems.csv",
    ExportDomain.BUDGETS: "budgets.csv",
    ExportDomain.SNAPSHOTS: "progress_snapshots.csv",
    ExportDomain.ACHIEVEMENTS: "achievements.csv",
    ExportDomain.JOURNALS: "journal_entries.csv",
}

_FLAG_TO_DOMAIN = {flag: domain for domain, flag in DOMAIN_FLAGS.items()}
