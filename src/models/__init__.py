from src.models.base import Base
from src.models.trade import CurveMigration, CurveTrade

__all__ = [
    "Base",
    "CurveTrade",
    "CurveMigration",
]
