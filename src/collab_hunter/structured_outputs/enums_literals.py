from typing import Literal

Momentum = Literal["Emerging", "Peaking", "Stabilizing"]
CommercialValue = Literal["High", "Medium", "Niche"]

IPStatus = Literal["Active", "Dormant", "Classic"]
IPTier = Literal["S", "A", "B", "C"]

BudgetLevel = Literal["$", "$$", "$$$"]

IdeaKind = Literal["ip", "brand", "trend_topic"]
