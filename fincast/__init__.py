"""
FinCast - Yearly Balance Forecaster

Projects a running account balance across a calendar year from monthly
rules, planned events and recorded real movements, and reconciles the
forecast line against the real one.

Modules
-------
- dates          : Calendar utilities (leap years, clamping, day indices)
- entities       : MonthlyRule, PlannedEvent, RealMovement, ForecastState
- projection     : Day-by-day forecast balance
- reconciliation : Real line, current forecast/real difference
- store          : File-backed entity store
- serialization  : JSON snapshot export/import
- plotting       : Presentation feed and charts
- model          : ForecastModel facade

"""

from .entities import MonthlyRule, PlannedEvent, RealMovement, ForecastState
from .projection import DayPoint, project
from .reconciliation import ReconciledPoint, ReconciliationResult, reconcile, current_difference
from .store import EntityStore
from .model import ForecastModel
from . import dates
